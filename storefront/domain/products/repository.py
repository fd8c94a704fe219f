"""Product repository - Database operations for products"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...constants import RESULTS_PER_PAGE
from ...models import Product


@dataclass
class ProductQuery:
    """Search, filter and page parameters for the public product listing"""

    keyword: Optional[str] = None
    category: Optional[str] = None
    price_gte: Optional[float] = None
    price_lte: Optional[float] = None
    ratings_gte: Optional[float] = None
    ratings_lte: Optional[float] = None
    page: int = 1


class ProductRepository:
    """Repository for product database operations"""

    @staticmethod
    def count_products(db: Session) -> int:
        return db.query(func.count(Product.id)).scalar() or 0

    @staticmethod
    def get_products(db: Session) -> list[Product]:
        """Get every product, newest first"""
        return db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def get_product_by_id(db: Session, product_id: int, with_reviews: bool = False) -> Optional[Product]:
        query = db.query(Product).filter(Product.id == product_id)
        if with_reviews:
            query = query.options(selectinload(Product.reviews))
        return query.first()

    @staticmethod
    def search_products(
        db: Session, params: ProductQuery, per_page: int = RESULTS_PER_PAGE
    ) -> tuple[list[Product], int]:
        """
        Apply keyword search and filters, then paginate.
        Returns (page of products, number of products matching before paging)
        """
        query = db.query(Product)

        if params.keyword:
            query = query.filter(Product.name.ilike(f"%{params.keyword}%"))
        if params.category:
            query = query.filter(Product.category == params.category)
        if params.price_gte is not None:
            query = query.filter(Product.price >= params.price_gte)
        if params.price_lte is not None:
            query = query.filter(Product.price <= params.price_lte)
        if params.ratings_gte is not None:
            query = query.filter(Product.ratings >= params.ratings_gte)
        if params.ratings_lte is not None:
            query = query.filter(Product.ratings <= params.ratings_lte)

        filtered_count = query.count()

        page = max(params.page, 1)
        products = (
            query.order_by(Product.created_at.desc(), Product.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
            .all()
        )
        return products, filtered_count

    @staticmethod
    def create_product(db: Session, user_id: int, **product_data) -> Product:
        product = Product(user_id=user_id, ratings=0, num_of_reviews=0, **product_data)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product: Product, **updates) -> Product:
        """Update a product with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(product, key):
                setattr(product, key, value)

        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def save(db: Session, product: Product) -> Product:
        """Persist in-memory changes to a product and its reviews"""
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, product: Product) -> None:
        db.delete(product)
        db.commit()

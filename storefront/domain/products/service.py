"""Product service - Business logic for product operations"""

import logging
from contextlib import contextmanager

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import PRODUCT_IMAGE_FOLDER
from ...constants import RESULTS_PER_PAGE, Size
from ...models import Product, User
from ...services.image_ingestion import (
    InvalidImageError,
    delete_images,
    upload_images,
    validate_image_payloads,
)
from ...utils.media_storage import MediaStorageError
from .repository import ProductQuery, ProductRepository
from .schemas import ProductCreate, ProductUpdate, StockUpdate, stock_to_storage

logger = logging.getLogger(__name__)


@contextmanager
def media_errors(action: str):
    """Translate image ingestion failures into HTTP errors"""
    try:
        yield
    except InvalidImageError as e:
        logger.error(f"❌ {action}: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except MediaStorageError as e:
        logger.error(f"❌ {action}: {e}")
        raise HTTPException(status_code=502, detail=f"Image host error: {e}") from e


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, db: Session, storage=None):
        self.db = db
        self.storage = storage
        self.repo = ProductRepository()

    @contextmanager
    def _persist(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ {action}: {e}")
            raise HTTPException(status_code=500, detail=f"Error {action.lower()}") from e

    def get_product(self, product_id: int, with_reviews: bool = False) -> Product:
        product = self.repo.get_product_by_id(self.db, product_id, with_reviews=with_reviews)
        if not product:
            logger.warning(f"⚠️ Product {product_id} not found")
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    def list_products(self, params: ProductQuery) -> dict:
        """Public listing with search, filters and fixed-size pages"""
        products_count = self.repo.count_products(self.db)
        products, filtered_count = self.repo.search_products(self.db, params, RESULTS_PER_PAGE)
        return {
            "products": products,
            "productsCount": products_count,
            "resultPerPage": RESULTS_PER_PAGE,
            "filteredProductCount": filtered_count,
        }

    def list_all_products(self) -> list[Product]:
        return self.repo.get_products(self.db)

    @staticmethod
    def get_sizes() -> list[int]:
        return [size.value for size in Size]

    async def create_product(self, data: ProductCreate, user: User) -> Product:
        logger.info(f"📥 Creating product '{data.name}' for user_id: {user.id}")

        images = []
        if data.images:
            with media_errors("Error uploading product images"):
                stored = await upload_images(data.images, PRODUCT_IMAGE_FOLDER, self.storage)
            images = [image.as_dict() for image in stored]

        with self._persist("Creating product"):
            product = self.repo.create_product(
                self.db,
                user.id,
                name=data.name,
                description=data.description,
                price=data.price,
                info=data.info,
                category=data.category,
                stock=stock_to_storage(data.stock),
                images=images,
            )

        logger.info(f"✅ Product {product.id} created with {len(images)} images")
        return product

    async def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        """Update fields; new images replace all stored ones"""
        product = self.get_product(product_id)

        updates = {
            "name": data.name,
            "description": data.description,
            "price": data.price,
            "info": data.info,
            "category": data.category,
        }
        if data.stock is not None:
            updates["stock"] = stock_to_storage(data.stock)

        if data.images:
            with media_errors(f"Error replacing images of product {product_id}"):
                validate_image_payloads(data.images)
                await delete_images(product.images or [], self.storage)
                stored = await upload_images(data.images, PRODUCT_IMAGE_FOLDER, self.storage)
            updates["images"] = [image.as_dict() for image in stored]

        with self._persist("Updating product"):
            product = self.repo.update_product(self.db, product, **updates)

        logger.info(f"✅ Product {product_id} updated")
        return product

    def update_stock(self, product_id: int, data: StockUpdate) -> Product:
        product = self.get_product(product_id)
        with self._persist("Updating product"):
            product = self.repo.update_product(self.db, product, stock=stock_to_storage(data.stock))
        logger.info(f"📦 Stock updated for product {product_id}: {product.stock}")
        return product

    async def delete_product(self, product_id: int) -> dict:
        """Delete remote images first, then the product and its reviews"""
        product = self.get_product(product_id)

        with media_errors(f"Error deleting images of product {product_id}"):
            await delete_images(product.images or [], self.storage)

        with self._persist("Deleting product"):
            self.repo.delete_product(self.db, product)

        logger.info(f"🗑️ Product {product_id} deleted")
        return {"success": True, "message": "Product deleted successfully"}

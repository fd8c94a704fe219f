"""Review service - Business logic for product reviews"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Product, Review, User
from ..products.repository import ProductRepository
from .aggregator import remove_review, upsert_review
from .schemas import ReviewUpsert

logger = logging.getLogger(__name__)


class ReviewService:
    """Service layer for reviews nested under a product"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepository()

    def _get_product(self, product_id: int) -> Product:
        product = self.repo.get_product_by_id(self.db, product_id, with_reviews=True)
        if not product:
            logger.warning(f"⚠️ Product {product_id} not found")
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    def _save(self, product: Product) -> Product:
        try:
            return self.repo.save(self.db, product)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Saving reviews of product {product.id} failed: {e}")
            raise HTTPException(status_code=500, detail="Error saving review") from e

    def list_reviews(self, product_id: int) -> list[Review]:
        return list(self._get_product(product_id).reviews)

    def upsert_review(self, product_id: int, data: ReviewUpsert, user: User) -> Product:
        """Create the user's review, or overwrite the one they already left"""
        product = self._get_product(product_id)
        review = upsert_review(
            product,
            user,
            ratings=data.ratings,
            title=data.title,
            comment=data.comment,
            recommend=data.recommend,
        )
        action = "updated" if review.id else "added"
        product = self._save(product)

        logger.info(
            f"⭐ Review {action} on product {product_id} by user {user.id}: "
            f"ratings={product.ratings}, numOfReviews={product.num_of_reviews}"
        )
        return product

    def delete_review(self, product_id: int, review_id: int, user: User) -> Product:
        """Remove a review; admins may remove any, users only their own"""
        product = self._get_product(product_id)

        review = next((r for r in product.reviews if r.id == review_id), None)
        if review is None:
            logger.warning(f"⚠️ Review {review_id} not found on product {product_id}")
            raise HTTPException(status_code=404, detail="Review not found")
        if not user.is_admin and review.user_id != user.id:
            logger.warning(f"⚠️ User {user.id} denied deleting review {review_id}")
            raise HTTPException(status_code=403, detail="Not allowed to delete this review")

        remove_review(product, review_id)

        product = self._save(product)
        logger.info(
            f"🗑️ Review {review_id} removed from product {product_id}: "
            f"ratings={product.ratings}, numOfReviews={product.num_of_reviews}"
        )
        return product

"""Review router - FastAPI endpoints for a product's reviews"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ReviewListResponse, ReviewResponse, ReviewSummary, ReviewUpsert
from .service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products/{product_id}/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.get("", response_model=ReviewListResponse)
async def get_product_reviews(
    product_id: int,
    service: ReviewService = Depends(get_review_service),
):
    reviews = service.list_reviews(product_id)
    return ReviewListResponse(reviews=[ReviewResponse.model_validate(r) for r in reviews])


@router.put("", response_model=ReviewSummary)
async def upsert_product_review(
    product_id: int,
    data: ReviewUpsert,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Create the current user's review of a product, or update it"""
    product = service.upsert_review(product_id, data, current_user)
    return ReviewSummary(ratings=product.ratings, numOfReviews=product.num_of_reviews)


@router.delete("/{review_id}", response_model=ReviewSummary)
async def delete_product_review(
    product_id: int,
    review_id: int,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    product = service.delete_review(product_id, review_id, current_user)
    return ReviewSummary(ratings=product.ratings, numOfReviews=product.num_of_reviews)

"""Review domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...constants import MAX_REVIEW_RATING, MIN_REVIEW_RATING


class ReviewUpsert(BaseModel):
    """Schema for creating or updating the current user's review"""

    ratings: int = Field(..., ge=MIN_REVIEW_RATING, le=MAX_REVIEW_RATING)
    title: str = Field(..., min_length=1, max_length=255)
    comment: str = Field(..., min_length=1)
    recommend: bool = True


class ReviewResponse(BaseModel):
    """Schema for review response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    avatar: str
    ratings: int
    title: str
    comment: str
    recommend: bool
    created_at: Optional[datetime] = None


class ReviewSummary(BaseModel):
    """Aggregate rating fields after a review change"""

    success: bool = True
    ratings: float
    numOfReviews: int


class ReviewListResponse(BaseModel):
    success: bool = True
    reviews: list[ReviewResponse]

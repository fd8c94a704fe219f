"""
Review bookkeeping on a product.

A user holds at most one review per product: a second submission overwrites
the first in place. ``ratings`` and ``num_of_reviews`` on the product are
recomputed from the full review list after every change.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from ...models import Product, Review, User


def find_review(reviews: Iterable[Review], user_id: int) -> Optional[Review]:
    for review in reviews:
        if str(review.user_id) == str(user_id):
            return review
    return None


def recompute_review_stats(product: Product) -> Product:
    """Set ratings to the raw mean of review ratings (0 with no reviews)"""
    reviews = list(product.reviews)
    product.num_of_reviews = len(reviews)
    if not reviews:
        product.ratings = 0
    else:
        product.ratings = sum(float(r.ratings) for r in reviews) / len(reviews)
    return product


def upsert_review(
    product: Product,
    user: User,
    *,
    ratings,
    title: str,
    comment: str,
    recommend: bool = True,
    now: Optional[datetime] = None,
) -> Review:
    """
    Add the user's review to the product, or update the one they already left.

    An updated review keeps its original ``created_at``.
    """
    ratings = int(ratings)
    review = find_review(product.reviews, user.id)

    if review:
        review.ratings = ratings
        review.comment = comment
        review.recommend = recommend
        review.title = title
    else:
        review = Review(
            user_id=user.id,
            name=user.display_name,
            avatar=user.avatar_url or "",
            ratings=ratings,
            title=title,
            comment=comment,
            recommend=recommend,
            created_at=now or datetime.now(timezone.utc),
        )
        product.reviews.append(review)

    recompute_review_stats(product)
    return review


def remove_review(product: Product, review_id: int) -> bool:
    """Drop the review with this id and recompute; False when nothing matched"""
    remaining = [r for r in product.reviews if str(r.id) != str(review_id)]
    if len(remaining) == len(product.reviews):
        return False

    product.reviews = remaining
    recompute_review_stats(product)
    return True

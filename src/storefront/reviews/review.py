"""Review aggregate: a rating and comment left by a user on a product."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront
from storefront.reviews.events import ReviewAdded

MIN_RATING = 1
MAX_RATING = 5


@storefront.aggregate
class Review:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    created_at = DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})

    @classmethod
    def add(cls, product_id, user_id, rating, comment=None):
        review = cls(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            comment=(comment or "").strip() or None,
            created_at=datetime.now(UTC),
        )
        review.raise_(
            ReviewAdded(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                comment=review.comment,
                created_at=review.created_at,
            )
        )
        return review

"""AddReview: attach a review to an existing product."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.management import load_product
from storefront.domain import storefront
from storefront.reviews.review import Review
from storefront.utils.query import fetch_all

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Review")
class AddReview:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


def reviews_for_product(product_id):
    """Reviews for a product, newest first."""
    return fetch_all(current_domain.repository_for(Review)._dao.query.filter(product_id=str(product_id)))


@storefront.command_handler(part_of=Review)
class AddReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        load_product(command.product_id)

        review = Review.add(
            product_id=command.product_id,
            user_id=command.user_id,
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Review).add(review)
        logger.info("Review added", review_id=str(review.id), product_id=str(command.product_id), rating=command.rating)
        return str(review.id)

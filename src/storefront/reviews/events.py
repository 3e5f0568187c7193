"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewAdded:
    """A user reviewed a product."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    created_at = DateTime(required=True)

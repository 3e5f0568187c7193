"""Application tests for administrative order status changes."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from storefront.catalogue.product.management import DeleteProduct
from storefront.catalogue.product.product import Product
from storefront.errors import AccessDeniedError
from storefront.ordering.order.order import OrderStatus
from storefront.ordering.order.queries import load_order


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock


class TestUpdateOrderStatus:
    def test_paid_to_completed(self, pipeline, customer, admin, make_product):
        a = make_product()
        order_id = pipeline.place_order(customer, [(a, 1)])
        pipeline.complete_payment(customer, order_id, "card")

        assert pipeline.update_order_status(admin, order_id, "Completed") == "Completed"
        assert load_order(order_id).status == OrderStatus.COMPLETED.value

    def test_same_status_is_a_no_op(self, pipeline, customer, admin, make_product):
        a = make_product()
        order_id = pipeline.place_order(customer, [(a, 1)])
        assert pipeline.update_order_status(admin, order_id, "Pending") == "Pending"

    def test_backward_transition_rejected(self, pipeline, customer, admin, make_product):
        a = make_product()
        order_id = pipeline.place_order(customer, [(a, 1)])
        pipeline.complete_payment(customer, order_id, "card")

        with pytest.raises(ValidationError):
            pipeline.update_order_status(admin, order_id, "Pending")
        assert load_order(order_id).status == OrderStatus.PAID.value

    def test_unknown_status_rejected(self, pipeline, customer, admin, make_product):
        a = make_product()
        order_id = pipeline.place_order(customer, [(a, 1)])
        with pytest.raises(ValidationError):
            pipeline.update_order_status(admin, order_id, "Shipped")

    def test_customer_cannot_change_status(self, pipeline, customer, make_product):
        a = make_product()
        order_id = pipeline.place_order(customer, [(a, 1)])
        with pytest.raises(AccessDeniedError):
            pipeline.update_order_status(customer, order_id, "Cancelled")


class TestCancellation:
    def test_cancel_restocks(self, pipeline, customer, admin, make_product):
        a = make_product(stock=5)
        b = make_product(stock=5)
        order_id = pipeline.place_order(customer, [(a, 2), (b, 3)])
        assert (_stock(a), _stock(b)) == (3, 2)

        pipeline.update_order_status(admin, order_id, "Cancelled")

        assert load_order(order_id).status == OrderStatus.CANCELLED.value
        assert (_stock(a), _stock(b)) == (5, 5)

    def test_cancel_twice_restocks_once(self, pipeline, customer, admin, make_product):
        a = make_product(stock=5)
        order_id = pipeline.place_order(customer, [(a, 2)])

        pipeline.update_order_status(admin, order_id, "Cancelled")
        pipeline.update_order_status(admin, order_id, "Cancelled")
        assert _stock(a) == 5

    def test_cancel_skips_deleted_products(self, pipeline, customer, admin, make_product):
        a = make_product(stock=5)
        b = make_product(stock=5)
        order_id = pipeline.place_order(customer, [(a, 1), (b, 1)])
        current_domain.process(DeleteProduct(product_id=b), asynchronous=False)

        pipeline.update_order_status(admin, order_id, "Cancelled")
        assert _stock(a) == 5

    def test_completed_order_cannot_be_cancelled(self, pipeline, customer, admin, make_product):
        a = make_product(stock=5)
        order_id = pipeline.place_order(customer, [(a, 1)])
        pipeline.complete_payment(customer, order_id, "card")
        pipeline.update_order_status(admin, order_id, "Completed")

        with pytest.raises(ValidationError):
            pipeline.update_order_status(admin, order_id, "Cancelled")
        assert _stock(a) == 4

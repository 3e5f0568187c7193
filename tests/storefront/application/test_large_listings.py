"""Listings and dashboard figures past the default query page of 100 records."""

from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain
from storefront.catalogue.product.queries import all_products, product_count, search_products
from storefront.identity.registration import all_users, user_count
from storefront.identity.user import User
from storefront.ordering.order.order import Order
from storefront.ordering.order.queries import all_orders, order_count, orders_for_customer, total_revenue


def _add_orders(count, customer_id="cust-001"):
    """Persist ``count`` paid orders of 10.0 each, one minute apart."""
    repo = current_domain.repository_for(Order)
    start = datetime.now(UTC) - timedelta(days=1)
    ids = []
    for i in range(count):
        order = Order.place(
            customer_id,
            [{"product_id": f"prod-{i}", "name": "Desk Lamp", "quantity": 1, "unit_price": 10.0}],
        )
        order.created_at = start + timedelta(minutes=i)
        order.mark_paid(f"pay-{i}", "card")
        repo.add(order)
        ids.append(str(order.id))
    return ids


class TestOrderListings:
    def test_every_order_is_counted(self):
        _add_orders(120)

        assert order_count() == 120
        assert len(all_orders()) == 120
        assert total_revenue() == 1200.0

    def test_customer_sees_newest_orders_first(self):
        ids = _add_orders(105)

        orders = orders_for_customer("cust-001")

        assert len(orders) == 105
        assert [str(o.id) for o in orders[:3]] == ids[::-1][:3]
        assert str(orders[-1].id) == ids[0]


class TestProductListings:
    def test_whole_catalogue_is_listed(self, make_product):
        for i in range(111):
            make_product(name=f"Lamp {i}", city="Lisbon" if i % 2 else "Porto")

        assert product_count() == 111
        assert len(all_products()) == 111
        assert len(search_products(search="lamp")) == 111
        assert len(search_products(city="Lisbon")) == 55


class TestUserListings:
    def test_every_user_is_listed(self):
        repo = current_domain.repository_for(User)
        for i in range(101):
            repo.add(User.register(email=f"user{i}@example.com", password="secret-pass", rounds=4))

        assert user_count() == 101
        assert len(all_users()) == 101

import pytest
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.auth import AuthContext
from storefront.identity.user import Role
from storefront.ordering.checkout.pipeline import OrderPipeline
from storefront.ordering.checkout.worker import OrderQueue


@pytest.fixture(autouse=True)
def run_around_tests():
    """Push domain context before each test, cleanup after."""
    ctx = storefront.domain_context()
    ctx.push()

    yield

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def customer():
    return AuthContext(user_id="cust-001", role=Role.CUSTOMER.value)


@pytest.fixture()
def other_customer():
    return AuthContext(user_id="cust-002", role=Role.CUSTOMER.value)


@pytest.fixture()
def seller():
    return AuthContext(user_id="seller-001", role=Role.SELLER.value)


@pytest.fixture()
def admin():
    return AuthContext(user_id="admin-001", role=Role.ADMIN.value)


@pytest.fixture()
def order_queue():
    return OrderQueue(capacity=50)


@pytest.fixture()
def pipeline(order_queue):
    return OrderPipeline(order_queue)


@pytest.fixture()
def make_product():
    """Create a persisted product through the command path and return its id."""
    from storefront.catalogue.product.management import CreateProduct

    def _make(name="Desk Lamp", price=10.0, stock=10, seller_id="seller-001", **kwargs):
        return current_domain.process(
            CreateProduct(name=name, price=price, stock=stock, seller_id=seller_id, **kwargs),
            asynchronous=False,
        )

    return _make

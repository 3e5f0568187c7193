import pytest
from fastapi.testclient import TestClient
from storefront.api.app import create_app


@pytest.fixture()
def client():
    with TestClient(create_app(init_domain=False)) as client:
        yield client


def headers(user_id, role="customer"):
    return {"X-User-Id": user_id, "X-User-Role": role}


@pytest.fixture()
def as_customer():
    return headers("cust-001")


@pytest.fixture()
def as_seller():
    return headers("seller-001", "seller")


@pytest.fixture()
def as_admin():
    return headers("admin-001", "admin")


@pytest.fixture()
def create_product(client, as_seller):
    def _create(name="Desk Lamp", price=10.0, stock=10, **extra):
        response = client.post(
            "/products",
            json={"name": name, "price": price, "stock": stock, **extra},
            headers=as_seller,
        )
        assert response.status_code == 201
        return response.json()["product_id"]

    return _create

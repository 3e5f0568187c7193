"""Checkout load test scenarios.

``ShopperUser`` runs the browse, cart, checkout and payment journey against
a shared pool of well-stocked products. ``LastUnitRaceUser`` hammers a few
products with tiny stock so that concurrent checkouts compete for the
last units; a 409 there is the expected outcome, not a failure.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_line, payment_method, product_data, seller_id, shopper_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import SellerState, ShopperState


def _seed_products(client, count: int, stock: int | None = None) -> list[str]:
    """Create ``count`` products as a fresh seller; returns their ids."""
    seller = SellerState(user_id=seller_id())
    headers = {"X-User-Id": seller.user_id, "X-User-Role": "seller"}
    for _ in range(count):
        with client.post(
            "/products",
            json=product_data(stock=stock),
            headers=headers,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                seller.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")
    return seller.product_ids


class CheckoutJourney(SequentialTaskSet):
    """Browse -> Add to Cart (x2) -> Checkout -> Pay -> View Order."""

    def on_start(self):
        self.state = ShopperState(user_id=shopper_id(), product_ids=self.user.product_ids)
        self.headers = {"X-User-Id": self.state.user_id}

    @task
    def browse(self):
        self.client.get("/products", name="GET /products")

    @task
    def add_first_line(self):
        self._add_line()

    @task
    def add_second_line(self):
        self._add_line()

    def _add_line(self):
        with self.client.post(
            "/cart",
            json=cart_line(self.state.product_ids),
            headers=self.headers,
            catch_response=True,
            name="POST /cart",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_lines += 1
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def checkout(self):
        with self.client.post("/orders", headers=self.headers, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
            elif resp.status_code == 409:
                self.state.rejected_checkouts += 1
                resp.success()
                self.interrupt()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay(self):
        order_id = self.state.order_ids[-1]
        with self.client.post(
            f"/orders/{order_id}/payment",
            json={"method": payment_method()},
            headers=self.headers,
            catch_response=True,
            name="POST /orders/{id}/payment",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def view_order(self):
        order_id = self.state.order_ids[-1]
        self.client.get(f"/orders/{order_id}", headers=self.headers, name="GET /orders/{id}")
        self.interrupt()


class ShopperUser(HttpUser):
    wait_time = between(0.5, 2)
    tasks = [CheckoutJourney]

    def on_start(self):
        self.product_ids = _seed_products(self.client, count=5)


class LastUnitRaceUser(HttpUser):
    """Many buyers, few units: checks that stock never goes negative."""

    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.user_id = shopper_id()
        self.product_ids = _seed_products(self.client, count=2, stock=3)

    @task
    def buy_last_unit(self):
        product_id = random.choice(self.product_ids)
        with self.client.post(
            "/orders",
            json={"items": [{"product_id": product_id, "quantity": 1}]},
            headers={"X-User-Id": self.user_id},
            catch_response=True,
            name="POST /orders (scarce)",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def check_stock(self):
        product_id = random.choice(self.product_ids)
        with self.client.get(f"/products/{product_id}", catch_response=True, name="GET /products/{id}") as resp:
            if resp.status_code == 200 and resp.json()["stock"] < 0:
                resp.failure("Stock went negative")

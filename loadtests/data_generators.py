"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation
rules and match the field names of the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CITIES = ["Lisbon", "Porto", "Braga", "Coimbra"]


def shopper_id() -> str:
    return f"shopper-{uuid.uuid4().hex[:8]}"


def seller_id() -> str:
    return f"seller-{uuid.uuid4().hex[:8]}"


def valid_email() -> str:
    """Emails with exactly one @ and no spaces."""
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}"


def registration_data(role: str = "customer") -> dict:
    """RegisterUserRequest payload; passwords are at least 8 characters."""
    return {"email": valid_email(), "password": fake.password(length=12), "role": role}


def product_data(stock: int | None = None) -> dict:
    """CreateProductRequest payload."""
    return {
        "name": fake.catch_phrase()[:255],
        "price": round(random.uniform(1.0, 200.0), 2),
        "stock": stock if stock is not None else random.randint(50, 500),
        "city": random.choice(CITIES),
        "description": fake.paragraph(nb_sentences=2),
    }


def cart_line(product_ids: list[str]) -> dict:
    return {"product_id": random.choice(product_ids), "quantity": random.randint(1, 3)}


def payment_method() -> str:
    return random.choice(["card", "paypal", "bank-transfer"])

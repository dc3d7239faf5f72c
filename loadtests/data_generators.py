"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(username pattern, SKU pattern, supplier contact formats) and match the
exact field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CATEGORIES = ["Electronics", "Clothing", "Food", "Books", "Furniture", "Sports", "Other"]


# ---------- Users ----------


def unique_username() -> str:
    """Usernames like 'lt_jsmith_a1b2' (3-30 chars, letters/digits/._-)."""
    return f"lt_{fake.user_name()[:12]}_{uuid.uuid4().hex[:4]}"


def valid_email() -> str:
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def user_data(role: str = "user") -> dict:
    return {"username": unique_username(), "email": valid_email(), "role": role}


# ---------- Inventory ----------


def unique_sku() -> str:
    """SKUs like 'LT-ELEC-A1B2C3' (uppercase letters, digits, hyphens)."""
    return f"LT-{fake.lexify('????').upper()}-{uuid.uuid4().hex[:6].upper()}"


def valid_phone() -> str:
    area = random.randint(200, 999)
    prefix = random.randint(200, 999)
    line = random.randint(1000, 9999)
    return f"+1-{area}-{prefix}-{line}"


def item_data(quantity: int | None = None, min_stock_level: int = 10) -> dict:
    return {
        "name": fake.catch_phrase()[:100],
        "description": fake.sentence(nb_words=12)[:500],
        "category": random.choice(CATEGORIES),
        "sku": unique_sku(),
        "quantity": quantity if quantity is not None else random.randint(0, 200),
        "min_stock_level": min_stock_level,
        "price": round(random.uniform(1, 500), 2),
        "supplier": {
            "name": fake.company()[:100],
            "email": f"orders.{uuid.uuid4().hex[:6]}@example.com",
            "phone": valid_phone(),
        },
        "location": {
            "warehouse": random.choice(["Main", "North", "South"]),
            "aisle": f"A{random.randint(1, 20)}",
            "shelf": str(random.randint(1, 8)),
        },
    }


def stock_adjustment() -> dict:
    operation = random.choice(["set", "add", "subtract"])
    upper = 200 if operation == "set" else 25
    return {"operation": operation, "quantity": random.randint(0, upper)}

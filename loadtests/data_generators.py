"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation
rules (10-digit phones starting 6-9, 6-digit ZIP codes, amounts in paise)
and match the field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

DEPARTMENTS = ["Computer Science", "Mechanical", "Civil", "Electrical", "Physics", "Design"]


def valid_email() -> str:
    """Unique per call so concurrent registrations never collide."""
    local = fake.user_name()[:20].replace(".", "")
    return f"{local}.{uuid.uuid4().hex[:6]}@students.example.edu"


def valid_phone() -> str:
    return f"{random.choice('6789')}{random.randint(0, 999_999_999):09d}"


def valid_zip_code() -> str:
    return f"{random.randint(110_001, 855_117):06d}"


def student_data() -> dict:
    """Generate RegisterUserRequest payload."""
    return {
        "name": fake.name()[:50],
        "email": valid_email(),
        "college_id": f"2K{random.randint(20, 26)}/{uuid.uuid4().hex[:5].upper()}",
        "department": random.choice(DEPARTMENTS),
        "year": random.randint(1, 4),
        "phone": valid_phone(),
    }


def shipping_address() -> dict:
    """Generate ShippingAddressSchema payload."""
    return {
        "full_name": fake.name()[:100],
        "phone": valid_phone(),
        "street": fake.street_address()[:200],
        "city": fake.city()[:50],
        "state": fake.state()[:50],
        "zip_code": valid_zip_code(),
    }


def product_data(quantity=None) -> dict:
    """Generate CreateProductRequest payload."""
    name = f"{fake.color_name()} {random.choice(['Hoodie', 'Mug', 'Notebook', 'Cap', 'Tote'])}"
    return {
        "name": name[:100],
        "description": fake.sentence(nb_words=12),
        "price": random.randint(99, 2499) * 100,
        "quantity": random.randint(5, 200) if quantity is None else quantity,
        "images": [f"https://media.example.edu/products/{uuid.uuid4().hex[:12]}.jpg"],
        "tags": random.sample(["merch", "apparel", "stationery", "gift", "limited"], k=2),
    }


def checkout_data(cart: dict) -> dict:
    """Generate a PlaceOrderRequest payload that mirrors the cart's lines and totals."""
    subtotal = cart["total_amount"]
    shipping = 0 if subtotal >= 50_000 else 4_000
    return {
        "items": [
            {
                "product_id": line["product_id"],
                "quantity": line["quantity"],
                "selected_variants": [{"kind": v["kind"], "value": v["value"]} for v in line["selected_variants"]],
            }
            for line in cart["items"]
        ],
        "shipping_address": shipping_address(),
        "payment_method": random.choice(["cash_on_delivery", "upi", "card", "net_banking"]),
        "subtotal": subtotal,
        "tax": 0,
        "shipping": shipping,
        "total_amount": subtotal + shipping,
    }

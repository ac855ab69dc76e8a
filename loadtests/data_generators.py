"""Faker-based data generators for Locust load test scenarios.

Payloads pass the product and review validators and match the field names
of the API's request schemas.
"""

import random

from faker import Faker

fake = Faker()

CATEGORIES = ["Footwear", "Outerwear", "Accessories", "Kitchen", "Lighting", "Garden"]


def product_data() -> dict:
    """Name <= 100, category <= 50, image_url <= 255 characters."""
    return {
        "name": fake.catch_phrase()[:100],
        "category": random.choice(CATEGORIES),
        "image_url": f"https://cdn.example.com/{fake.uuid4()}.jpg",
    }


def review_data(rating: int | None = None) -> dict:
    """Rating 1..5, content 1..500 characters."""
    return {
        "rating": rating or random.randint(1, 5),
        "content": fake.paragraph(nb_sentences=3)[:500],
    }


def product_changes() -> dict:
    return random.choice(
        [
            {"name": fake.catch_phrase()[:100]},
            {"category": random.choice(CATEGORIES)},
            {"image_url": f"https://cdn.example.com/{fake.uuid4()}.jpg"},
        ]
    )


def listing_params() -> dict:
    return {
        "page": random.randint(1, 5),
        "page_size": random.choice([5, 10, 20]),
        "sort": random.choice(["id", "-id", "name", "-name", "category"]),
        "category": random.choice(["", "wear", "kitchen"]),
    }

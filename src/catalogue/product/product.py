"""Product entity, its partial-update input, and field rules."""

from dataclasses import asdict, dataclass
from typing import Any

from shared.changes import UNSET, Changes
from shared.validation import Validator, check_required_text

# Listing sort safelist; both directions of every column are allowed
PRODUCT_SORT_SAFELIST = ("id", "name", "category", "-id", "-name", "-category")


@dataclass
class Product:
    name: str
    category: str
    image_url: str
    id: int | None = None
    average_rating: float = 0.0  # derived from reviews, never set by callers
    version: int | None = None

    @classmethod
    def from_row(cls, row) -> "Product":
        return cls(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            image_url=row["image_url"],
            average_rating=float(row["average_rating"]),
            version=row["version"],
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProductChanges(Changes):
    name: Any = UNSET
    category: Any = UNSET
    image_url: Any = UNSET


def validate_product(v: Validator, product: Product) -> None:
    check_required_text(v, product.name, "name", 100)
    check_required_text(v, product.category, "category", 50)
    check_required_text(v, product.image_url, "image_url", 255)

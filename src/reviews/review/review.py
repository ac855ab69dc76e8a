"""Review entity: a customer's star rating (1 to 5) and comment on a product.

``helpful_count`` only ever grows, one vote at a time, through
``HelpfulVotes``. ``created_at`` is fixed at insert.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from shared.changes import UNSET, Changes
from shared.validation import Validator, check_required_text

REVIEW_SORT_SAFELIST = ("id", "rating", "helpful_count", "-id", "-rating", "-helpful_count")


@dataclass
class Review:
    product_id: int
    rating: int
    content: str
    id: int | None = None
    helpful_count: int = 0
    created_at: datetime | None = None
    version: int | None = None

    @classmethod
    def from_row(cls, row) -> "Review":
        return cls(
            id=row["id"],
            product_id=row["product_id"],
            rating=row["rating"],
            content=row["content"],
            helpful_count=row["helpful_count"],
            created_at=row["created_at"],
            version=row["version"],
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ReviewChanges(Changes):
    rating: Any = UNSET
    content: Any = UNSET


def validate_review(v: Validator, review: Review) -> None:
    rating = review.rating
    v.check(
        isinstance(rating, int) and not isinstance(rating, bool) and 1 <= rating <= 5,
        "rating",
        "must be between 1 and 5",
    )
    check_required_text(v, review.content, "content", 500)

"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state.
"""

from dataclasses import dataclass, field


@dataclass
class ProductState:
    """Tracks a product created by a simulated user and the version last seen."""

    product_id: int | None = None
    version: int = 1
    review_ids: list[int] = field(default_factory=list)

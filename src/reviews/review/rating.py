"""Average-rating maintenance for products.

``products.average_rating`` is derived from the product's reviews. Each
recompute is one UPDATE whose value comes from an AVG subquery over the
review set, never an application-side read followed by a write. Recomputes
are idempotent; callers that mutate reviews hold the product row lock (see
``ReviewService``) so the subquery sees every earlier committed review.
"""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from shared.errors import NotFoundError
from shared.logging import get_logger
from shared.schema import is_key, products, reviews

logger = get_logger(__name__)


def _mean_rating_of(product_id):
    return (
        sa.select(sa.func.coalesce(sa.func.avg(reviews.c.rating), 0))
        .where(reviews.c.product_id == product_id)
        .scalar_subquery()
    )


class RatingMaintainer:
    def __init__(self, conn: Connection):
        self.conn = conn

    def recompute_average(self, product_id: int) -> None:
        """Set the product's average_rating to the mean of its reviews, or 0."""
        if not is_key(product_id):
            raise NotFoundError()

        result = self.conn.execute(
            sa.update(products).where(products.c.id == product_id).values(average_rating=_mean_rating_of(product_id))
        )
        if result.rowcount == 0:
            raise NotFoundError()

    def reconcile_all(self) -> int:
        """Recompute every product's average in one statement.

        Repairs ratings written outside the review service. Returns the
        number of products touched.
        """
        result = self.conn.execute(sa.update(products).values(average_rating=_mean_rating_of(products.c.id)))
        logger.info("ratings_reconciled", products=result.rowcount)
        return result.rowcount

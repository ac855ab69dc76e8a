"""Helpful votes on reviews."""

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from shared.errors import NotFoundError
from shared.schema import is_key, reviews


class HelpfulVotes:
    def __init__(self, conn: Connection):
        self.conn = conn

    def increment_helpful(self, product_id: int, review_id: int) -> None:
        # Increment in the database, never read-modify-write, so no vote is lost
        if not is_key(product_id) or not is_key(review_id):
            raise NotFoundError()

        result = self.conn.execute(
            sa.update(reviews)
            .where(reviews.c.product_id == product_id, reviews.c.id == review_id)
            .values(helpful_count=reviews.c.helpful_count + 1)
        )
        if result.rowcount == 0:
            raise NotFoundError()

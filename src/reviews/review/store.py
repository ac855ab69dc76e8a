"""Review persistence bound to one open transaction.

Every single-review lookup is scoped by its product: a review id that exists
under one product is not found under another.
"""

from __future__ import annotations

from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from reviews.review.review import Review
from shared.concurrency import versioned_update
from shared.errors import NotFoundError
from shared.filters import Filters, Metadata, SortDirection, build_metadata, compute_window, resolve_sort
from shared.schema import is_key, reviews


class ReviewStore:
    def __init__(self, conn: Connection):
        self.conn = conn

    def insert(self, review: Review) -> Review:
        stmt = (
            sa.insert(reviews)
            .values(
                product_id=review.product_id,
                rating=review.rating,
                content=review.content,
                helpful_count=0,
                created_at=datetime.now(UTC),
            )
            .returning(*reviews.c)
        )
        return Review.from_row(self.conn.execute(stmt).mappings().one())

    def get(self, product_id: int, review_id: int) -> Review:
        if not is_key(product_id) or not is_key(review_id):
            raise NotFoundError()

        stmt = sa.select(reviews).where(reviews.c.product_id == product_id, reviews.c.id == review_id)
        row = self.conn.execute(stmt).mappings().first()
        if row is None:
            raise NotFoundError()
        return Review.from_row(row)

    def update(self, review: Review, expected_version: int | None = None) -> Review:
        """Write rating and content if the row is still at the expected version."""
        if review.id is None or not is_key(review.id) or not is_key(review.product_id):
            raise NotFoundError()

        row = versioned_update(
            self.conn,
            reviews,
            key={"id": review.id, "product_id": review.product_id},
            values={"rating": review.rating, "content": review.content},
            expected_version=review.version if expected_version is None else expected_version,
        )
        return Review.from_row(row)

    def delete(self, product_id: int, review_id: int) -> None:
        if not is_key(product_id) or not is_key(review_id):
            raise NotFoundError()

        result = self.conn.execute(
            sa.delete(reviews).where(reviews.c.product_id == product_id, reviews.c.id == review_id)
        )
        if result.rowcount == 0:
            raise NotFoundError()

    def list(
        self,
        rating: int = 0,
        content: str = "",
        filters: Filters | None = None,
        product_id: int | None = None,
    ) -> tuple[list[Review], Metadata]:
        """Return one page of matching reviews, optionally for one product.

        ``rating=0`` and ``content=""`` are inactive predicates.
        """
        filters = filters or Filters()
        column, direction = resolve_sort(filters.sort, filters.sort_safelist)
        limit, offset = compute_window(filters.page, filters.page_size)

        conditions = []
        if product_id is not None:
            conditions.append(reviews.c.product_id == product_id if is_key(product_id) else sa.false())
        if rating:
            # Stored ratings are 1..5; anything else matches nothing
            conditions.append(reviews.c.rating == rating if 1 <= rating <= 5 else sa.false())
        if content:
            conditions.append(reviews.c.content.icontains(content, autoescape=True))

        order = reviews.c[column].desc() if direction is SortDirection.DESC else reviews.c[column].asc()
        stmt = (
            sa.select(sa.func.count().over().label("total_records"), *reviews.c)
            .where(*conditions)
            .order_by(order, reviews.c.id.asc())
            .limit(limit)
            .offset(offset)
        )
        rows = self.conn.execute(stmt).mappings().all()

        if rows:
            total_records = rows[0]["total_records"]
        elif offset:
            total_records = self.conn.execute(
                sa.select(sa.func.count()).select_from(reviews).where(*conditions)
            ).scalar_one()
        else:
            total_records = 0

        return [Review.from_row(row) for row in rows], build_metadata(total_records, filters.page, filters.page_size)

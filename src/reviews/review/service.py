"""Review operations.

Every review write commits in the same transaction as the
recompute of its product's average rating: both land or neither does, so
``average_rating`` never drifts from the review set.

Writers first take the product's row lock. Review writes for one product
therefore run one after another, and each recompute reads a review set that
includes every earlier committed write.
"""

from __future__ import annotations

from catalogue.product.store import ProductStore
from reviews.review.rating import RatingMaintainer
from reviews.review.review import REVIEW_SORT_SAFELIST, Review, ReviewChanges, validate_review
from reviews.review.store import ReviewStore
from reviews.review.voting import HelpfulVotes
from shared.db import Database
from shared.errors import NotFoundError
from shared.filters import Filters, Metadata, validate_filters
from shared.logging import get_logger
from shared.validation import Validator

logger = get_logger(__name__)


class ReviewService:
    def __init__(self, db: Database):
        self.db = db

    def create(self, product_id: int, rating: int, content: str) -> Review:
        review = Review(product_id=product_id, rating=rating, content=content)

        v = Validator()
        validate_review(v, review)
        v.raise_if_invalid()

        with self.db.transaction() as conn:
            ProductStore(conn).lock(product_id)
            review = ReviewStore(conn).insert(review)
            RatingMaintainer(conn).recompute_average(product_id)

        logger.info("review_created", product_id=product_id, review_id=review.id, rating=review.rating)
        return review

    def get(self, product_id: int, review_id: int) -> Review:
        with self.db.transaction() as conn:
            return ReviewStore(conn).get(product_id, review_id)

    def update(
        self,
        product_id: int,
        review_id: int,
        changes: ReviewChanges,
        expected_version: int | None = None,
    ) -> Review:
        with self.db.transaction() as conn:
            ProductStore(conn).lock(product_id)
            store = ReviewStore(conn)
            review = changes.apply_to(store.get(product_id, review_id))

            v = Validator()
            validate_review(v, review)
            v.raise_if_invalid()

            review = store.update(review, expected_version)
            RatingMaintainer(conn).recompute_average(product_id)

        logger.info("review_updated", product_id=product_id, review_id=review_id, version=review.version)
        return review

    def delete(self, product_id: int, review_id: int) -> None:
        with self.db.transaction() as conn:
            ProductStore(conn).lock(product_id)
            ReviewStore(conn).delete(product_id, review_id)
            RatingMaintainer(conn).recompute_average(product_id)

        logger.info("review_deleted", product_id=product_id, review_id=review_id)

    def mark_helpful(self, product_id: int, review_id: int) -> None:
        with self.db.transaction() as conn:
            HelpfulVotes(conn).increment_helpful(product_id, review_id)

        logger.debug("review_marked_helpful", product_id=product_id, review_id=review_id)

    def list(
        self,
        rating: int = 0,
        content: str = "",
        page: int = 1,
        page_size: int = 10,
        sort: str = "id",
    ) -> tuple[list[Review], Metadata]:
        filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=REVIEW_SORT_SAFELIST)
        validate_filters(filters)

        with self.db.transaction() as conn:
            return ReviewStore(conn).list(rating=rating, content=content, filters=filters)

    def list_for_product(
        self,
        product_id: int,
        rating: int = 0,
        content: str = "",
        page: int = 1,
        page_size: int = 10,
        sort: str = "id",
    ) -> tuple[list[Review], Metadata]:
        filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=REVIEW_SORT_SAFELIST)
        validate_filters(filters)

        with self.db.transaction() as conn:
            if not ProductStore(conn).exists(product_id):
                raise NotFoundError()
            return ReviewStore(conn).list(rating=rating, content=content, filters=filters, product_id=product_id)

    def reconcile_ratings(self) -> int:
        with self.db.transaction() as conn:
            return RatingMaintainer(conn).reconcile_all()

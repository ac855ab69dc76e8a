"""Concurrency tests: real threads against the shared connection pool."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from catalogue.product.product import ProductChanges
from reviews.review.review import ReviewChanges
from shared.errors import ConflictError


def _race(*callables):
    """Run callables on separate threads released at the same instant.

    Returns each callable's result, or the exception it raised.
    """
    barrier = threading.Barrier(len(callables))

    def run(fn):
        barrier.wait()
        try:
            return fn()
        except Exception as exc:  # noqa: BLE001
            return exc

    with ThreadPoolExecutor(max_workers=len(callables)) as pool:
        return list(pool.map(run, callables))


class TestHelpfulVotesUnderLoad:
    @pytest.mark.parametrize("votes", [10, 100])
    def test_no_lost_votes(self, review_service, product, votes):
        review = review_service.create(product.id, rating=4, content="Popular review")

        with ThreadPoolExecutor(max_workers=16) as pool:
            futures = [pool.submit(review_service.mark_helpful, product.id, review.id) for _ in range(votes)]
            for future in futures:
                future.result()

        assert review_service.get(product.id, review.id).helpful_count == votes


class TestLostUpdateDetection:
    def test_second_writer_on_same_version_conflicts(self, product_service, product):
        seen = product_service.get(product.id)
        assert seen.version == 1

        results = _race(
            lambda: product_service.update(product.id, ProductChanges(name="Writer A"), expected_version=seen.version),
            lambda: product_service.update(product.id, ProductChanges(name="Writer B"), expected_version=seen.version),
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], ConflictError)

        stored = product_service.get(product.id)
        assert stored.name == winners[0].name
        assert stored.version == 2

    def test_review_edit_race(self, review_service, product):
        review = review_service.create(product.id, rating=3, content="Undecided")

        results = _race(
            lambda: review_service.update(product.id, review.id, ReviewChanges(rating=1), expected_version=1),
            lambda: review_service.update(product.id, review.id, ReviewChanges(rating=5), expected_version=1),
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        assert len(winners) == 1
        assert sum(isinstance(r, ConflictError) for r in results) == 1

        stored = review_service.get(product.id, review.id)
        assert stored.rating == winners[0].rating
        assert stored.version == 2


class TestConcurrentRecompute:
    def test_average_matches_final_review_set(self, review_service, product_service, product):
        ratings = [1, 2, 3, 4, 5] * 6

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda r: review_service.create(product.id, rating=r, content=f"{r} stars"), ratings))

        assert product_service.get(product.id).average_rating == pytest.approx(sum(ratings) / len(ratings))

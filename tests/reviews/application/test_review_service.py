"""Application tests for ReviewService: CRUD, scoping, and listing."""

import pytest
from reviews.review.review import ReviewChanges
from shared.errors import ConflictError, NotFoundError, ValidationError


def _review(review_service, product_id, rating=4, content="Comfortable from day one."):
    return review_service.create(product_id, rating=rating, content=content)


class TestCreateReview:
    def test_store_assigns_fields(self, review_service, product):
        review = _review(review_service, product.id, rating=5)

        assert review.id >= 1
        assert review.product_id == product.id
        assert review.rating == 5
        assert review.helpful_count == 0
        assert review.version == 1
        assert review.created_at is not None

    def test_unknown_product_is_not_found(self, review_service, db):
        with pytest.raises(NotFoundError):
            _review(review_service, 999_999)

    def test_invalid_review_reports_every_field(self, review_service, product):
        with pytest.raises(ValidationError) as exc:
            review_service.create(product.id, rating=0, content="")
        assert set(exc.value.messages) == {"rating", "content"}


class TestGetReview:
    def test_roundtrip(self, review_service, product):
        review = _review(review_service, product.id)
        fetched = review_service.get(product.id, review.id)
        assert (fetched.id, fetched.rating, fetched.content, fetched.version) == (
            review.id,
            review.rating,
            review.content,
            review.version,
        )

    def test_scoped_by_product(self, review_service, product_service, product):
        other = product_service.create(name="Rain Shell", category="Outerwear", image_url="https://cdn.example.com/rs.jpg")
        review = _review(review_service, product.id)

        with pytest.raises(NotFoundError):
            review_service.get(other.id, review.id)

    @pytest.mark.parametrize("product_id, review_id", [(0, 1), (1, 0), (-5, -5)])
    def test_ids_below_one_are_not_found(self, review_service, db, product_id, review_id):
        with pytest.raises(NotFoundError):
            review_service.get(product_id, review_id)

    def test_ids_beyond_the_column_range_are_not_found(self, review_service, product):
        review = _review(review_service, product.id)

        with pytest.raises(NotFoundError):
            review_service.get(product.id, 2**70)
        with pytest.raises(NotFoundError):
            review_service.get(2**70, review.id)
        with pytest.raises(NotFoundError):
            review_service.mark_helpful(product.id, 2**70)
        with pytest.raises(NotFoundError):
            review_service.update(product.id, 2**70, ReviewChanges(rating=2))


class TestUpdateReview:
    def test_content_only(self, review_service, product):
        review = _review(review_service, product.id, rating=3)
        updated = review_service.update(product.id, review.id, ReviewChanges(content="Better after a week."))

        assert updated.content == "Better after a week."
        assert updated.rating == 3
        assert updated.version == 2

    def test_created_at_is_immutable(self, review_service, product):
        review = _review(review_service, product.id)
        updated = review_service.update(product.id, review.id, ReviewChanges(rating=1, content="Changed my mind."))
        assert updated.created_at == review_service.get(product.id, review.id).created_at
        assert updated.created_at is not None

    def test_stale_version_conflicts(self, review_service, product):
        review = _review(review_service, product.id)
        review_service.update(product.id, review.id, ReviewChanges(rating=2), expected_version=1)

        with pytest.raises(ConflictError):
            review_service.update(product.id, review.id, ReviewChanges(rating=5), expected_version=1)

        assert review_service.get(product.id, review.id).rating == 2

    def test_under_wrong_product_is_not_found(self, review_service, product_service, product):
        other = product_service.create(name="Rain Shell", category="Outerwear", image_url="https://cdn.example.com/rs.jpg")
        review = _review(review_service, product.id)
        with pytest.raises(NotFoundError):
            review_service.update(other.id, review.id, ReviewChanges(rating=1))


class TestDeleteReview:
    def test_second_delete_is_not_found(self, review_service, product):
        review = _review(review_service, product.id)
        review_service.delete(product.id, review.id)
        with pytest.raises(NotFoundError):
            review_service.delete(product.id, review.id)

    def test_never_existed(self, review_service, product):
        with pytest.raises(NotFoundError):
            review_service.delete(product.id, 123_456)


class TestHelpful:
    def test_increments_by_one(self, review_service, product):
        review = _review(review_service, product.id)
        review_service.mark_helpful(product.id, review.id)
        review_service.mark_helpful(product.id, review.id)
        assert review_service.get(product.id, review.id).helpful_count == 2

    def test_does_not_bump_version(self, review_service, product):
        review = _review(review_service, product.id)
        review_service.mark_helpful(product.id, review.id)
        assert review_service.get(product.id, review.id).version == 1

    def test_unknown_review_is_not_found(self, review_service, product):
        with pytest.raises(NotFoundError):
            review_service.mark_helpful(product.id, 123_456)


class TestListReviews:
    @pytest.fixture()
    def reviews(self, review_service, product_service, product):
        other = product_service.create(name="Rain Shell", category="Outerwear", image_url="https://cdn.example.com/rs.jpg")
        return {
            "product": [
                _review(review_service, product.id, 5, "Great grip on wet rock."),
                _review(review_service, product.id, 3, "Runs small, order a half size up."),
                _review(review_service, product.id, 5, "GREAT value for the price."),
            ],
            "other": [
                _review(review_service, other.id, 2, "Leaks at the seams."),
                _review(review_service, other.id, 5, "Great in a downpour."),
            ],
            "other_id": other.id,
        }

    def test_all_reviews(self, review_service, reviews):
        found, metadata = review_service.list()
        assert len(found) == 5
        assert metadata.total_records == 5

    def test_rating_exact_match(self, review_service, reviews):
        found, metadata = review_service.list(rating=5)
        assert {r.rating for r in found} == {5}
        assert metadata.total_records == 3

    def test_content_substring(self, review_service, reviews):
        found, _ = review_service.list(content="great")
        assert len(found) == 3

    def test_for_one_product(self, review_service, product, reviews):
        found, metadata = review_service.list_for_product(product.id, rating=5, content="great")
        assert [r.id for r in found] == [r.id for r in reviews["product"] if r.rating == 5]
        assert metadata.total_records == 2

    def test_for_unknown_product(self, review_service, reviews):
        with pytest.raises(NotFoundError):
            review_service.list_for_product(999_999)

    def test_sort_by_helpful_count(self, review_service, product, reviews):
        target = reviews["product"][1]
        review_service.mark_helpful(product.id, target.id)

        found, _ = review_service.list(sort="-helpful_count", page_size=1)
        assert found[0].id == target.id

    def test_window_does_not_change_total(self, review_service, reviews):
        found, metadata = review_service.list(page=3, page_size=2)
        assert len(found) == 1
        assert metadata.total_records == 5
        assert metadata.last_page == 3

    def test_content_is_not_a_sort_key(self, review_service, reviews):
        with pytest.raises(ValidationError) as exc:
            review_service.list(sort="content")
        assert exc.value.messages == {"sort": ["invalid sort value"]}

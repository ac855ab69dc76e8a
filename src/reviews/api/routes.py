"""FastAPI routes for the Reviews & Ratings context."""

from fastapi import APIRouter, Depends, Header

from reviews.api.schemas import CreateReviewRequest, UpdateReviewRequest
from reviews.review.review import ReviewChanges
from reviews.review.service import ReviewService
from shared.db import Database
from shared.http import get_database

review_router = APIRouter(prefix="/v1", tags=["reviews"])


def get_review_service(db: Database = Depends(get_database)) -> ReviewService:
    return ReviewService(db)


@review_router.post("/products/{product_id}/reviews", status_code=201)
def create_review(
    product_id: int,
    body: CreateReviewRequest,
    service: ReviewService = Depends(get_review_service),
):
    review = service.create(product_id=product_id, rating=body.rating, content=body.content)
    return {"review": review.to_dict()}


@review_router.get("/products/{product_id}/reviews/{review_id}")
def display_review(product_id: int, review_id: int, service: ReviewService = Depends(get_review_service)):
    return {"review": service.get(product_id, review_id).to_dict()}


@review_router.patch("/products/{product_id}/reviews/{review_id}")
def update_review(
    product_id: int,
    review_id: int,
    body: UpdateReviewRequest,
    x_expected_version: int | None = Header(default=None),
    service: ReviewService = Depends(get_review_service),
):
    changes = ReviewChanges(**body.model_dump(exclude_unset=True))
    review = service.update(product_id, review_id, changes, expected_version=x_expected_version)
    return {"review": review.to_dict()}


@review_router.delete("/products/{product_id}/reviews/{review_id}")
def delete_review(product_id: int, review_id: int, service: ReviewService = Depends(get_review_service)):
    service.delete(product_id, review_id)
    return {"message": "review successfully deleted"}


@review_router.post("/products/{product_id}/reviews/{review_id}/helpful")
def mark_review_helpful(product_id: int, review_id: int, service: ReviewService = Depends(get_review_service)):
    service.mark_helpful(product_id, review_id)
    return {"message": "review marked as helpful"}


@review_router.get("/products/{product_id}/reviews")
def list_reviews_for_product(
    product_id: int,
    rating: int = 0,
    content: str = "",
    page: int = 1,
    page_size: int = 10,
    sort: str = "id",
    service: ReviewService = Depends(get_review_service),
):
    reviews, metadata = service.list_for_product(
        product_id, rating=rating, content=content, page=page, page_size=page_size, sort=sort
    )
    return {"reviews": [r.to_dict() for r in reviews], "@metadata": metadata.to_dict()}


@review_router.get("/reviews")
def list_reviews(
    rating: int = 0,
    content: str = "",
    page: int = 1,
    page_size: int = 10,
    sort: str = "id",
    service: ReviewService = Depends(get_review_service),
):
    reviews, metadata = service.list(rating=rating, content=content, page=page, page_size=page_size, sort=sort)
    return {"reviews": [r.to_dict() for r in reviews], "@metadata": metadata.to_dict()}

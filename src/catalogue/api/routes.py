"""FastAPI endpoints for the Catalogue domain.

Endpoints are plain ``def`` so each request runs on its own worker thread
against the shared connection pool.
"""

from fastapi import APIRouter, Depends, Header

from catalogue.api.schemas import CreateProductRequest, UpdateProductRequest
from catalogue.product.product import ProductChanges
from catalogue.product.service import ProductService
from shared.db import Database
from shared.http import get_database

product_router = APIRouter(prefix="/v1/products", tags=["products"])


def get_product_service(db: Database = Depends(get_database)) -> ProductService:
    return ProductService(db)


@product_router.post("", status_code=201)
def create_product(body: CreateProductRequest, service: ProductService = Depends(get_product_service)):
    product = service.create(name=body.name, category=body.category, image_url=body.image_url)
    return {"product": product.to_dict()}


@product_router.get("/{product_id}")
def display_product(product_id: int, service: ProductService = Depends(get_product_service)):
    return {"product": service.get(product_id).to_dict()}


@product_router.patch("/{product_id}")
def update_product(
    product_id: int,
    body: UpdateProductRequest,
    x_expected_version: int | None = Header(default=None),
    service: ProductService = Depends(get_product_service),
):
    changes = ProductChanges(**body.model_dump(exclude_unset=True))
    product = service.update(product_id, changes, expected_version=x_expected_version)
    return {"product": product.to_dict()}


@product_router.delete("/{product_id}")
def delete_product(product_id: int, service: ProductService = Depends(get_product_service)):
    service.delete(product_id)
    return {"message": "product successfully deleted"}


@product_router.get("")
def list_products(
    name: str = "",
    category: str = "",
    page: int = 1,
    page_size: int = 10,
    sort: str = "id",
    service: ProductService = Depends(get_product_service),
):
    products, metadata = service.list(name=name, category=category, page=page, page_size=page_size, sort=sort)
    return {"products": [p.to_dict() for p in products], "@metadata": metadata.to_dict()}

"""Product operations, one transaction each."""

from __future__ import annotations

from catalogue.product.product import PRODUCT_SORT_SAFELIST, Product, ProductChanges, validate_product
from catalogue.product.store import ProductStore
from shared.db import Database
from shared.filters import Filters, Metadata, validate_filters
from shared.logging import get_logger
from shared.validation import Validator

logger = get_logger(__name__)


class ProductService:
    def __init__(self, db: Database):
        self.db = db

    def create(self, name: str, category: str, image_url: str) -> Product:
        product = Product(name=name, category=category, image_url=image_url)

        v = Validator()
        validate_product(v, product)
        v.raise_if_invalid()

        with self.db.transaction() as conn:
            product = ProductStore(conn).insert(product)

        logger.info("product_created", product_id=product.id, version=product.version)
        return product

    def get(self, product_id: int) -> Product:
        with self.db.transaction() as conn:
            return ProductStore(conn).get(product_id)

    def update(self, product_id: int, changes: ProductChanges, expected_version: int | None = None) -> Product:
        """Apply ``changes`` to the stored product.

        Without ``expected_version`` the version read at the start of this
        call is used, which still catches writers racing this call.
        """
        with self.db.transaction() as conn:
            store = ProductStore(conn)
            product = changes.apply_to(store.get(product_id))

            v = Validator()
            validate_product(v, product)
            v.raise_if_invalid()

            product = store.update(product, expected_version)

        logger.info("product_updated", product_id=product.id, version=product.version)
        return product

    def delete(self, product_id: int) -> None:
        with self.db.transaction() as conn:
            ProductStore(conn).delete(product_id)

        logger.info("product_deleted", product_id=product_id)

    def list(
        self,
        name: str = "",
        category: str = "",
        page: int = 1,
        page_size: int = 10,
        sort: str = "id",
    ) -> tuple[list[Product], Metadata]:
        filters = Filters(page=page, page_size=page_size, sort=sort, sort_safelist=PRODUCT_SORT_SAFELIST)
        validate_filters(filters)

        with self.db.transaction() as conn:
            return ProductStore(conn).list(name=name, category=category, filters=filters)

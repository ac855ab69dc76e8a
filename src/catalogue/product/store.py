"""Product persistence bound to one open transaction."""

from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from catalogue.product.product import Product
from shared.concurrency import versioned_update
from shared.errors import NotFoundError
from shared.filters import Filters, Metadata, SortDirection, build_metadata, compute_window, resolve_sort
from shared.schema import is_key, products


class ProductStore:
    """CRUD and listing over the ``products`` table.

    Assumes validated input; only referential and type constraints are
    enforced here.
    """

    def __init__(self, conn: Connection):
        self.conn = conn

    def insert(self, product: Product) -> Product:
        # average_rating starts at the column default; callers cannot set it
        stmt = (
            sa.insert(products)
            .values(name=product.name, category=product.category, image_url=product.image_url)
            .returning(*products.c)
        )
        return Product.from_row(self.conn.execute(stmt).mappings().one())

    def get(self, product_id: int) -> Product:
        if not is_key(product_id):
            raise NotFoundError()

        row = self.conn.execute(sa.select(products).where(products.c.id == product_id)).mappings().first()
        if row is None:
            raise NotFoundError()
        return Product.from_row(row)

    def exists(self, product_id: int) -> bool:
        if not is_key(product_id):
            return False
        return self.conn.execute(sa.select(products.c.id).where(products.c.id == product_id)).first() is not None

    def lock(self, product_id: int) -> None:
        """Hold the product's row lock until the transaction ends.

        Raises ``NotFoundError`` if there is no such product.
        """
        if not is_key(product_id):
            raise NotFoundError()

        stmt = sa.select(products.c.id).where(products.c.id == product_id).with_for_update()
        if self.conn.execute(stmt).first() is None:
            raise NotFoundError()

    def update(self, product: Product, expected_version: int | None = None) -> Product:
        """Write the editable fields if the row is still at the expected version.

        ``expected_version`` defaults to ``product.version``, the version the
        caller read.
        """
        if product.id is None or not is_key(product.id):
            raise NotFoundError()

        row = versioned_update(
            self.conn,
            products,
            key={"id": product.id},
            values={"name": product.name, "category": product.category, "image_url": product.image_url},
            expected_version=product.version if expected_version is None else expected_version,
        )
        return Product.from_row(row)

    def delete(self, product_id: int) -> None:
        if not is_key(product_id):
            raise NotFoundError()

        result = self.conn.execute(sa.delete(products).where(products.c.id == product_id))
        if result.rowcount == 0:
            raise NotFoundError()

    def list(self, name: str = "", category: str = "", filters: Filters | None = None) -> tuple[list[Product], Metadata]:
        """Return one page of matching products and its metadata.

        Empty predicates are inactive. The total is counted by a window
        column in the same SELECT as the page.
        """
        filters = filters or Filters()
        column, direction = resolve_sort(filters.sort, filters.sort_safelist)
        limit, offset = compute_window(filters.page, filters.page_size)

        conditions = []
        if name:
            conditions.append(products.c.name.icontains(name, autoescape=True))
        if category:
            conditions.append(products.c.category.icontains(category, autoescape=True))

        order = products.c[column].desc() if direction is SortDirection.DESC else products.c[column].asc()
        stmt = (
            sa.select(sa.func.count().over().label("total_records"), *products.c)
            .where(*conditions)
            .order_by(order, products.c.id.asc())
            .limit(limit)
            .offset(offset)
        )
        rows = self.conn.execute(stmt).mappings().all()

        if rows:
            total_records = rows[0]["total_records"]
        elif offset:
            # Page past the end: the window column had no row to ride on
            total_records = self.conn.execute(
                sa.select(sa.func.count()).select_from(products).where(*conditions)
            ).scalar_one()
        else:
            total_records = 0

        return [Product.from_row(row) for row in rows], build_metadata(total_records, filters.page, filters.page_size)

"""Relational schema for products and their reviews."""

import sqlalchemy as sa

# SQLite only auto-assigns ids for an INTEGER PRIMARY KEY
Identifier = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

# Largest value a BIGINT (or SQLite INTEGER) column can hold
MAX_INTEGER = 2**63 - 1


def is_key(value: int) -> bool:
    """True if ``value`` could be a stored id; anything else resolves to no row."""
    return 1 <= value <= MAX_INTEGER


metadata = sa.MetaData()

products = sa.Table(
    "products",
    metadata,
    sa.Column("id", Identifier, primary_key=True, autoincrement=True),
    sa.Column("name", sa.String(100), nullable=False),
    sa.Column("category", sa.String(50), nullable=False),
    sa.Column("image_url", sa.String(255), nullable=False),
    sa.Column("average_rating", sa.Float, nullable=False, server_default=sa.text("0")),
    sa.Column("version", sa.Integer, nullable=False, server_default=sa.text("1")),
    sa.CheckConstraint("average_rating >= 0", name="products_average_rating_check"),
)

reviews = sa.Table(
    "reviews",
    metadata,
    sa.Column("id", Identifier, primary_key=True, autoincrement=True),
    sa.Column(
        "product_id",
        Identifier,
        sa.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    sa.Column("rating", sa.Integer, nullable=False),
    sa.Column("content", sa.String(500), nullable=False),
    sa.Column("helpful_count", sa.Integer, nullable=False, server_default=sa.text("0")),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("version", sa.Integer, nullable=False, server_default=sa.text("1")),
    sa.CheckConstraint("rating BETWEEN 1 AND 5", name="reviews_rating_check"),
    sa.CheckConstraint("helpful_count >= 0", name="reviews_helpful_count_check"),
)

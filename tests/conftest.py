import os
from pathlib import Path

import pytest
import sqlalchemy as sa


def pytest_addoption(parser):
    parser.addoption(
        "--database-url",
        action="store",
        default=os.getenv("TEST_DATABASE_URL"),
        help="Database to run store tests against (default: temporary SQLite file)",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/shared/" in str(test_path):
            item.add_marker(pytest.mark.domain)


@pytest.fixture(scope="session")
def settings(request, tmp_path_factory):
    from shared.config import Settings

    url = request.config.getoption("--database-url")
    if not url:
        url = f"sqlite:///{tmp_path_factory.mktemp('db') / 'product_reviews.db'}"

    return Settings(
        database_url=url,
        environment="test",
        db_timeout_seconds=10,
        db_pool_size=20,
        db_max_overflow=20,
        db_pool_timeout_seconds=30,
    )


@pytest.fixture(scope="session")
def database(settings):
    from shared.db import Database

    database = Database.from_settings(settings)
    database.drop()
    database.setup()

    yield database

    database.drop()
    database.dispose()


@pytest.fixture()
def db(database):
    """The session database, emptied after every test."""
    from shared.schema import products, reviews

    yield database

    with database.engine.begin() as conn:
        conn.execute(sa.delete(reviews))
        conn.execute(sa.delete(products))


@pytest.fixture()
def product_service(db):
    from catalogue.product.service import ProductService

    return ProductService(db)


@pytest.fixture()
def review_service(db):
    from reviews.review.service import ReviewService

    return ReviewService(db)


@pytest.fixture()
def product(product_service):
    return product_service.create(name="Trail Runner 3", category="Footwear", image_url="https://cdn.example.com/tr3.jpg")


@pytest.fixture()
def client(db, settings):
    from app import create_app
    from fastapi.testclient import TestClient

    return TestClient(create_app(settings=settings, database=db))

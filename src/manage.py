"""Product Reviews database management CLI.

Usage:
    python src/manage.py setup-db            # Create all tables
    python src/manage.py drop-db             # Drop all tables
    python src/manage.py reconcile-ratings   # Recompute every product's average rating
    python src/manage.py serve [--port N]    # Run the HTTP API
"""

import argparse
import sys

from shared.config import Settings
from shared.db import Database
from shared.errors import StoreFailure
from shared.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _connect(settings):
    database = Database.from_settings(settings)
    try:
        database.ping()
    except StoreFailure:
        logger.critical("database_unreachable", database_url=database.engine.url.render_as_string(hide_password=True))
        sys.exit(1)
    return database


def setup_database(settings):
    database = _connect(settings)
    print("Creating database schema...")
    database.setup()
    print("Done.")


def drop_database(settings):
    database = _connect(settings)
    print("Dropping database schema...")
    database.drop()
    print("Done.")


def reconcile_ratings(settings):
    from reviews.review.service import ReviewService

    database = _connect(settings)
    touched = ReviewService(database).reconcile_ratings()
    print(f"Recomputed average rating for {touched} product(s).")


def serve(settings, port=None):
    import uvicorn

    uvicorn.run("app:create_app", factory=True, host="0.0.0.0", port=port or settings.port)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Product Reviews database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("reconcile-ratings", help="Recompute average_rating for every product")
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--port", type=int, help="Port to listen on (default: $PORT or 4000)")

    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.environment)

    if args.command == "setup-db":
        setup_database(settings)
    elif args.command == "drop-db":
        drop_database(settings)
    elif args.command == "reconcile-ratings":
        reconcile_ratings(settings)
    elif args.command == "serve":
        serve(settings, args.port)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

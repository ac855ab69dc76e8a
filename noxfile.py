import os

import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]


def _install(session: nox.Session) -> None:
    """Install the project with its test extra into the nox virtualenv."""
    session.install("-e", ".[test]")


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions.

    Set TEST_DATABASE_URL to run the store tests against PostgreSQL.
    """
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no database required)."""
    _install(session)
    session.run("pytest", "-m", "domain")


@nox.session(python="3.12")
def tests_postgres(session: nox.Session) -> None:
    """Run the store-backed tests against the PostgreSQL in TEST_DATABASE_URL."""
    url = session.env.get("TEST_DATABASE_URL") or os.getenv("TEST_DATABASE_URL")
    if not url:
        session.error("TEST_DATABASE_URL must point at a disposable PostgreSQL database")
    _install(session)
    session.run("pytest", "-m", "application or integration", f"--database-url={url}", *session.posargs)


@nox.session(python="3.12")
def loadtest(session: nox.Session) -> None:
    """Headless Locust run against an already running API (default http://localhost:4000)."""
    session.install("-e", ".[loadtest]")
    host = session.posargs[0] if session.posargs else "http://localhost:4000"
    session.run(
        "locust",
        "-f",
        "loadtests/locustfile.py",
        "--headless",
        "--host",
        host,
        "-u",
        "50",
        "-r",
        "5",
        "-t",
        "120s",
    )

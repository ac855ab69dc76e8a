"""Product reviews load testing: Locust entry point.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:4000

    # Helpful-vote contention only:
    locust -f loadtests/locustfile.py HelpfulVoteStorm

    # Headless (CI mode):
    locust -f loadtests/locustfile.py ReviewWriter CatalogueBrowser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.catalogue import CatalogueBrowser, CatalogueEditor  # noqa: F401
from loadtests.scenarios.reviews import HelpfulVoteStorm, ReviewWriter  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log the API error body for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the healthcheck once the run ends so the build under test is recorded."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        resp = requests.get(f"{environment.host}/v1/healthcheck", timeout=5)
        print(f"[LOADTEST] Healthcheck: {resp.text}\n")
    except Exception as e:
        print(f"[LOADTEST] Could not fetch healthcheck: {e}\n")

"""Review load test scenarios.

HelpfulVoteStorm concentrates every user on a handful of reviews so the
helpful counter and the average-rating recompute run under real contention.
After a run, each review's helpful_count must equal the number of
successful POST .../helpful requests recorded for it.
"""

import random

from locust import HttpUser, between, constant_pacing, task

from loadtests.data_generators import product_data, review_data

# Shared hot set, created once by the first user to start
_HOT_REVIEWS: list[tuple[int, int]] = []


class ReviewWriter(HttpUser):
    """Creates a product, reviews it, edits and deletes its own reviews."""

    wait_time = between(0.5, 2)

    def on_start(self):
        resp = self.client.post("/v1/products", json=product_data(), name="POST /v1/products")
        self.product_id = resp.json()["product"]["id"]
        self.review_ids = []

    @task(4)
    def submit_review(self):
        resp = self.client.post(
            f"/v1/products/{self.product_id}/reviews",
            json=review_data(),
            name="POST /v1/products/{id}/reviews",
        )
        if resp.status_code == 201:
            self.review_ids.append(resp.json()["review"]["id"])

    @task(2)
    def edit_review(self):
        if not self.review_ids:
            return
        self.client.patch(
            f"/v1/products/{self.product_id}/reviews/{random.choice(self.review_ids)}",
            json={"rating": random.randint(1, 5)},
            name="PATCH /v1/products/{id}/reviews/{id}",
        )

    @task(1)
    def delete_review(self):
        if not self.review_ids:
            return
        review_id = self.review_ids.pop(random.randrange(len(self.review_ids)))
        self.client.delete(
            f"/v1/products/{self.product_id}/reviews/{review_id}",
            name="DELETE /v1/products/{id}/reviews/{id}",
        )

    @task(2)
    def list_reviews(self):
        self.client.get(
            f"/v1/products/{self.product_id}/reviews",
            params={"sort": "-helpful_count"},
            name="GET /v1/products/{id}/reviews",
        )


class HelpfulVoteStorm(HttpUser):
    """Maximum-rate helpful votes on a small shared set of reviews."""

    wait_time = constant_pacing(0.05)

    def on_start(self):
        if _HOT_REVIEWS:
            return
        resp = self.client.post("/v1/products", json=product_data(), name="[STORM] POST /v1/products")
        product_id = resp.json()["product"]["id"]
        for _ in range(3):
            review = self.client.post(
                f"/v1/products/{product_id}/reviews",
                json=review_data(),
                name="[STORM] POST /v1/products/{id}/reviews",
            ).json()["review"]
            _HOT_REVIEWS.append((product_id, review["id"]))

    @task
    def vote(self):
        product_id, review_id = random.choice(_HOT_REVIEWS)
        self.client.post(
            f"/v1/products/{product_id}/reviews/{review_id}/helpful",
            name="[STORM] POST /v1/products/{id}/reviews/{id}/helpful",
        )

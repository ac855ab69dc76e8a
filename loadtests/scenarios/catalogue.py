"""Catalogue load test scenarios.

CatalogueEditor creates a product and then edits it repeatedly, carrying the
version it last saw so concurrent editors surface as 409 conflicts.
CatalogueBrowser only reads listings.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import listing_params, product_changes, product_data
from loadtests.helpers.state import ProductState


class ProductEditing(SequentialTaskSet):
    def on_start(self):
        self.state = ProductState()

    @task
    def create_product(self):
        with self.client.post("/v1/products", json=product_data(), catch_response=True, name="POST /v1/products") as resp:
            if resp.status_code == 201:
                product = resp.json()["product"]
                self.state.product_id = product["id"]
                self.state.version = product["version"]
            else:
                resp.failure(f"Create product failed: {resp.status_code}")
                self.interrupt()

    @task
    def edit_product(self):
        with self.client.patch(
            f"/v1/products/{self.state.product_id}",
            json=product_changes(),
            headers={"X-Expected-Version": str(self.state.version)},
            catch_response=True,
            name="PATCH /v1/products/{id}",
        ) as resp:
            if resp.status_code == 200:
                self.state.version = resp.json()["product"]["version"]
            elif resp.status_code == 409:
                # Someone else won the race; expected under contention
                resp.success()
            else:
                resp.failure(f"Edit product failed: {resp.status_code}")

    @task
    def display_product(self):
        self.client.get(f"/v1/products/{self.state.product_id}", name="GET /v1/products/{id}")


class CatalogueEditor(HttpUser):
    wait_time = between(0.5, 2)
    tasks = [ProductEditing]


class CatalogueBrowser(HttpUser):
    wait_time = between(0.2, 1)

    @task
    def list_products(self):
        self.client.get("/v1/products", params=listing_params(), name="GET /v1/products")

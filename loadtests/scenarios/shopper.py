"""Student shopper load test scenario.

A SequentialTaskSet journey through the storefront: register, browse,
fill the cart, validate it, check out and read the order history.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import checkout_data, student_data
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import ShopperState

# Losing a race for the last units is a normal outcome under load
EXPECTED_CHECKOUT_CODES = {"INSUFFICIENT_STOCK", "UNAVAILABLE", "VALIDATION_FAILED"}


class ShopperJourney(SequentialTaskSet):
    """Register -> Browse -> Add 1-3 products -> Validate -> Checkout -> History."""

    def on_start(self):
        self.state = ShopperState()

    @task
    def register(self):
        with self.client.post("/users", json=student_data(), catch_response=True, name="POST /users") as resp:
            if resp.status_code == 201:
                self.state.user_id = resp.json()["id"]
            else:
                resp.failure(f"Register failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def browse(self):
        sort = random.choice(["newest", "price_asc", "price_desc", "name"])
        with self.client.get(
            f"/products?sort={sort}&limit=20",
            catch_response=True,
            name="GET /products",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Browse failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.product_ids = [p["id"] for p in resp.json()["products"] if p["quantity"] > 0]
            if not self.state.product_ids:
                resp.success()
                self.interrupt()

    @task
    def view_product(self):
        product_id = random.choice(self.state.product_ids)
        self.client.get(f"/products/{product_id}", name="GET /products/{id}")

    @task
    def fill_cart(self):
        picks = random.sample(self.state.product_ids, k=min(len(self.state.product_ids), random.randint(1, 3)))
        for product_id in picks:
            with self.client.post(
                "/cart/items",
                json={"product_id": product_id, "quantity": 1},
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart = resp.json()
                elif error_code(resp) in EXPECTED_CHECKOUT_CODES:
                    resp.success()
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

        if not self.state.cart or not self.state.cart["items"]:
            self.interrupt()

    @task
    def validate_cart(self):
        with self.client.post(
            "/cart/validate",
            headers=self.state.headers,
            catch_response=True,
            name="POST /cart/validate",
        ) as resp:
            if resp.status_code == 400:
                # Another shopper bought the stock in the meantime
                resp.success()
                self.interrupt()

    @task
    def checkout(self):
        with self.client.post(
            "/orders",
            json=checkout_data(self.state.cart),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
            elif error_code(resp) in EXPECTED_CHECKOUT_CODES:
                resp.success()
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def order_history(self):
        self.client.get("/orders", headers=self.state.headers, name="GET /orders")
        for order_id in self.state.order_ids:
            self.client.get(f"/orders/{order_id}", headers=self.state.headers, name="GET /orders/{id}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Students shopping at a realistic pace."""

    wait_time = between(1, 5)
    tasks = [ShopperJourney]

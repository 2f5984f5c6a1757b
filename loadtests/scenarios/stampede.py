"""Checkout stampede on a single scarce product.

Every user races to buy the same product. An admin account id must be
supplied in ``STOREFRONT_LOADTEST_ADMIN_ID`` (see ``manage.py create-admin``);
it seeds the product when the test starts and reports the final stock
when it stops. Orders placed must never exceed the seeded stock.
"""

import os

import requests
from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import checkout_data, product_data, student_data
from loadtests.helpers.response import error_code, extract_error_detail

SCARCE_STOCK = int(os.environ.get("STOREFRONT_LOADTEST_STOCK", "25"))
ADMIN_ID = os.environ.get("STOREFRONT_LOADTEST_ADMIN_ID")

_scarce = {"product_id": None, "orders": 0}


@events.test_start.add_listener
def seed_scarce_product(environment, **_kwargs):
    if not ADMIN_ID:
        return
    resp = requests.post(
        f"{environment.host}/admin/products",
        json=product_data(quantity=SCARCE_STOCK),
        headers={"X-User-Id": ADMIN_ID},
        timeout=10,
    )
    resp.raise_for_status()
    _scarce["product_id"] = resp.json()["id"]
    print(f"[STAMPEDE] Seeded product {_scarce['product_id']} with {SCARCE_STOCK} units")


@events.test_stop.add_listener
def report_final_stock(environment, **_kwargs):
    if not _scarce["product_id"]:
        return
    resp = requests.get(f"{environment.host}/products/{_scarce['product_id']}", timeout=10)
    remaining = resp.json().get("quantity") if resp.ok else "unknown"
    print(f"[STAMPEDE] Orders placed: {_scarce['orders']}, stock remaining: {remaining}")
    if _scarce["orders"] > SCARCE_STOCK:
        print("[STAMPEDE] OVERSOLD: more orders than seeded stock")


class CheckoutStampedeUser(HttpUser):
    """Register once, then keep trying to buy one unit of the scarce product."""

    wait_time = constant_pacing(0.2)

    def on_start(self):
        resp = self.client.post("/users", json=student_data(), name="[STAMPEDE] POST /users")
        self.headers = {"X-User-Id": resp.json()["id"]} if resp.status_code == 201 else {}

    @task
    def buy_last_units(self):
        if not _scarce["product_id"] or not self.headers:
            return

        with self.client.post(
            "/cart/items",
            json={"product_id": _scarce["product_id"], "quantity": 1},
            headers=self.headers,
            catch_response=True,
            name="[STAMPEDE] POST /cart/items",
        ) as resp:
            if resp.status_code != 200:
                if error_code(resp) in {"INSUFFICIENT_STOCK", "VALIDATION_FAILED"}:
                    resp.success()
                else:
                    resp.failure(extract_error_detail(resp))
                return
            cart = resp.json()

        with self.client.post(
            "/orders",
            json=checkout_data(cart),
            headers=self.headers,
            catch_response=True,
            name="[STAMPEDE] POST /orders",
        ) as resp:
            if resp.status_code == 201:
                _scarce["orders"] += 1
            elif error_code(resp) == "INSUFFICIENT_STOCK":
                resp.success()
                self.client.delete("/cart", headers=self.headers, name="[STAMPEDE] DELETE /cart")
            else:
                resp.failure(extract_error_detail(resp))

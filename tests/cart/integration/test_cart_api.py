"""Integration tests for the cart endpoints via TestClient."""

from factories import auth, load_product, make_product, make_user
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product


def _add(client, user, product, quantity=1, variants=None):
    return client.post(
        "/cart/items",
        json={"product_id": str(product.id), "quantity": quantity, "selected_variants": variants or []},
        headers=auth(user),
    )


class TestCartEndpoints:
    def test_requires_sign_in(self, client):
        response = client.get("/cart")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    def test_unknown_user_is_unauthenticated(self, client):
        response = client.get("/cart", headers={"X-User-Id": "ghost"})
        assert response.status_code == 401

    def test_empty_cart(self, client):
        user = make_user()
        response = client.get("/cart", headers=auth(user))
        assert response.status_code == 200
        assert response.json() == {"items": [], "total_amount": 0, "total_items": 0}

    def test_add_item(self, client):
        user = make_user()
        product = make_product(price=100, quantity=5, variants=[("size", "L", 20)])

        response = _add(client, user, product, 2, [{"kind": "size", "value": "L"}])

        assert response.status_code == 200
        body = response.json()
        assert body["total_amount"] == 240
        assert body["total_items"] == 2
        line = body["items"][0]
        assert line["price"] == 120
        assert line["line_total"] == 240
        assert line["selected_variants"] == [{"kind": "size", "value": "L", "price": 20}]

    def test_add_beyond_stock(self, client):
        user = make_user()
        product = make_product(quantity=1)
        response = _add(client, user, product, 2)
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_STOCK"
        assert error["message"] == "Only 1 units of University Hoodie available"

    def test_add_unavailable_product(self, client):
        user = make_user()
        response = _add(client, user, make_product(is_active=False))
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "UNAVAILABLE"

    def test_add_unknown_product(self, client):
        user = make_user()
        response = client.post("/cart/items", json={"product_id": "missing", "quantity": 1}, headers=auth(user))
        assert response.status_code == 404

    def test_quantity_above_cap_rejected(self, client):
        user = make_user()
        response = _add(client, user, make_product(quantity=50), 11)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"

    def test_update_quantity_beyond_stock_keeps_cart(self, client):
        user = make_user()
        product = make_product(price=100, quantity=3)
        item_id = _add(client, user, product, 2).json()["items"][0]["id"]

        response = client.put(f"/cart/items/{item_id}", json={"quantity": 4}, headers=auth(user))

        assert response.status_code == 409
        cart = client.get("/cart", headers=auth(user)).json()
        assert cart["items"][0]["quantity"] == 2
        assert cart["total_amount"] == 200

    def test_update_to_zero_is_rejected(self, client):
        user = make_user()
        item_id = _add(client, user, make_product()).json()["items"][0]["id"]
        response = client.put(f"/cart/items/{item_id}", json={"quantity": 0}, headers=auth(user))
        assert response.status_code == 400

    def test_remove_twice(self, client):
        user = make_user()
        item_id = _add(client, user, make_product()).json()["items"][0]["id"]

        first = client.delete(f"/cart/items/{item_id}", headers=auth(user))
        second = client.delete(f"/cart/items/{item_id}", headers=auth(user))

        assert first.status_code == second.status_code == 200
        assert second.json()["items"] == []

    def test_clear(self, client):
        user = make_user()
        _add(client, user, make_product(name="Pen"))
        _add(client, user, make_product(name="Cap"))
        response = client.delete("/cart", headers=auth(user))
        assert response.json()["total_items"] == 0

    def test_carts_are_private(self, client):
        owner = make_user()
        other = make_user(name="Ravi", email="ravi@dtu.ac.in")
        _add(client, owner, make_product())
        assert client.get("/cart", headers=auth(other)).json()["items"] == []


class TestValidateEndpoint:
    def test_valid(self, client):
        user = make_user()
        _add(client, user, make_product(price=100, quantity=5), 2)
        response = client.post("/cart/validate", headers=auth(user))
        assert response.status_code == 200
        assert response.json() == {"valid": True, "item_count": 1, "total_items": 2, "total_amount": 200}

    def test_empty(self, client):
        user = make_user()
        response = client.post("/cart/validate", headers=auth(user))
        assert response.status_code == 400
        assert response.json()["error"]["details"] == ["Cart is empty"]

    def test_lists_every_problem(self, client):
        user = make_user()
        pen = make_product(name="Pen")
        mug = make_product(name="Mug", quantity=5)
        _add(client, user, pen)
        _add(client, user, mug, 4)

        repo = current_domain.repository_for(Product)
        stored = load_product(mug.id)
        stored.quantity = 1
        repo.add(stored)
        stored = load_product(pen.id)
        stored.deactivate()
        repo.add(stored)

        response = client.post("/cart/validate", headers=auth(user))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["message"] == "Cart validation failed"
        assert error["details"] == ["Pen is no longer available", "Only 1 units of Mug available"]

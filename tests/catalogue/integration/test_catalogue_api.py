"""Integration tests for browsing and the admin catalogue console."""

from factories import auth, load_product, make_product, make_user
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category


def _admin():
    return make_user(name="Admin", email="admin@dtu.ac.in", role="admin")


class TestBrowsing:
    def test_list_shows_active_products_only(self, client):
        make_product(name="Hoodie")
        make_product(name="Retired Mug", is_active=False)

        body = client.get("/products").json()

        assert [p["name"] for p in body["products"]] == ["Hoodie"]
        assert body["pagination"]["total"] == 1

    def test_filters_and_sort(self, client):
        make_product(name="Pen", price=50)
        make_product(name="Hoodie", price=1500)
        make_product(name="Cap", price=400)

        body = client.get("/products?min_price=100&sort=price_asc").json()
        assert [p["name"] for p in body["products"]] == ["Cap", "Hoodie"]

        body = client.get("/products?q=hood").json()
        assert [p["name"] for p in body["products"]] == ["Hoodie"]

    def test_limit_is_capped(self, client):
        make_product()
        body = client.get("/products?limit=1000").json()
        assert body["pagination"]["limit"] == 100

    def test_product_detail(self, client):
        product = make_product(variants=[("size", "M", 0)])
        body = client.get(f"/products/{product.id}").json()
        assert body["variants"][0]["value"] == "M"
        assert body["images"][0].startswith("https://")

    def test_inactive_product_detail_is_hidden(self, client):
        product = make_product(is_active=False)
        response = client.get(f"/products/{product.id}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_categories(self, client):
        category = Category.create(name="Apparel")
        current_domain.repository_for(Category).add(category)
        body = client.get("/categories").json()
        assert [(c["name"], c["slug"]) for c in body] == [("Apparel", "apparel")]


class TestAdminCatalogue:
    def test_requires_admin(self, client):
        student = make_user()
        response = client.post(
            "/admin/products", json={"name": "X", "description": "Y", "price": 1}, headers=auth(student)
        )
        assert response.status_code == 403

    def test_create_and_edit_product(self, client):
        admin = _admin()
        response = client.post(
            "/admin/products",
            json={"name": "Lanyard", "description": "Woven", "price": 9900, "quantity": 10},
            headers=auth(admin),
        )
        assert response.status_code == 201
        product_id = response.json()["id"]

        client.put(f"/admin/products/{product_id}", json={"is_featured": True}, headers=auth(admin))
        client.patch(f"/admin/products/{product_id}/price", json={"price": 8900}, headers=auth(admin))
        stock = client.post(f"/admin/products/{product_id}/stock", json={"quantity": 5}, headers=auth(admin))

        assert stock.json() == {"product_id": product_id, "quantity": 15}
        product = load_product(product_id)
        assert (product.price, product.is_featured) == (8900, True)

    def test_add_variant(self, client):
        admin = _admin()
        product = make_product()
        response = client.post(
            f"/admin/products/{product.id}/variants",
            json={"kind": "size", "value": "XL", "price": 30},
            headers=auth(admin),
        )
        assert response.status_code == 201
        assert load_product(product.id).find_variant("size", "XL").price == 30

    def test_duplicate_variant(self, client):
        admin = _admin()
        product = make_product(variants=[("size", "XL", 0)])
        response = client.post(
            f"/admin/products/{product.id}/variants", json={"kind": "size", "value": "XL"}, headers=auth(admin)
        )
        assert response.status_code == 400

    def test_deactivate_and_list_all(self, client):
        admin = _admin()
        product = make_product()
        client.patch(f"/admin/products/{product.id}/status", json={"is_active": False}, headers=auth(admin))

        assert client.get("/products").json()["products"] == []
        listing = client.get("/admin/products", headers=auth(admin)).json()
        assert listing["products"][0]["is_active"] is False

    def test_delete_product(self, client):
        admin = _admin()
        product = make_product()
        assert client.delete(f"/admin/products/{product.id}", headers=auth(admin)).json() == {"status": "ok"}
        assert client.get(f"/products/{product.id}").status_code == 404

    def test_categories(self, client):
        admin = _admin()
        response = client.post("/admin/categories", json={"name": "Stationery"}, headers=auth(admin))
        category_id = response.json()["id"]

        duplicate = client.post("/admin/categories", json={"name": "Stationery"}, headers=auth(admin))
        assert duplicate.status_code == 400

        client.delete(f"/admin/categories/{category_id}", headers=auth(admin))
        assert client.get("/categories").json() == []


def test_error_body_shape(client):
    response = client.get("/products/missing")
    assert response.json() == {
        "error": {"code": "NOT_FOUND", "message": "Product missing not found", "details": []},
    }

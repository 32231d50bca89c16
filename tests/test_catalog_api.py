"""Product catalog queries and admin catalog management."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.services.catalog_service import generate_slug


class TestSlug:
    def test_generate_slug(self):
        assert generate_slug("Teclado Mecânico RGB!") == "teclado-mecanico-rgb"
        assert generate_slug("  --  ") == "item"


class TestProductQueries:
    def test_filters(self, client, make_product, make_category):
        keyboards = make_category("Keyboards")
        make_product(name="Mechanical Keyboard", price="199.99", category_id=keyboards.id, featured=True)
        make_product(name="Mouse", price="49.50", description="Wireless, silent keyboard companion")
        make_product(name="Monitor", price="899.00")

        names = lambda r: sorted(p["name"] for p in r.json())

        assert len(client.get("/products").json()) == 3
        assert names(client.get("/products", params={"categoryId": keyboards.id})) == ["Mechanical Keyboard"]
        assert names(client.get("/products", params={"search": "KEYBOARD"})) == ["Mechanical Keyboard", "Mouse"]
        assert names(client.get("/products", params={"minPrice": "50", "maxPrice": "900"})) == [
            "Mechanical Keyboard",
            "Monitor",
        ]
        assert names(client.get("/products", params={"featured": "true"})) == ["Mechanical Keyboard"]

    def test_newest_first(self, client, make_product):
        now = datetime.now(timezone.utc)
        make_product(name="Old", created_at=now - timedelta(days=2))
        make_product(name="New", created_at=now)

        assert [p["name"] for p in client.get("/products").json()] == ["New", "Old"]

    def test_get_by_id_and_slug(self, client, make_product):
        product = make_product(name="Mouse", slug="mouse")

        assert client.get(f"/products/{product.id}").json()["slug"] == "mouse"
        assert client.get("/products/slug/mouse").json()["id"] == product.id
        assert client.get("/products/missing").status_code == 404
        assert client.get("/products/slug/missing").status_code == 404


class TestProductAdmin:
    body = {"name": "Gaming Mouse", "price": 59.9, "stock": 10}

    def test_requires_admin(self, client, make_product):
        product = make_product()
        assert client.post("/products", json=self.body).status_code == 401
        assert client.put(f"/products/{product.id}", json={"stock": 1}).status_code == 401
        assert client.delete(f"/products/{product.id}").status_code == 401

    def test_create_generates_slug(self, admin_client):
        response = admin_client.post("/products", json={**self.body, "images": ["https://img/1.png"]})
        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "gaming-mouse"
        assert body["images"] == ["https://img/1.png"]
        assert Decimal(body["price"]) == Decimal("59.90")

    def test_duplicate_slug(self, admin_client):
        admin_client.post("/products", json=self.body)
        response = admin_client.post("/products", json=self.body)
        assert response.status_code == 400

    def test_rejects_bad_values(self, admin_client):
        assert admin_client.post("/products", json={**self.body, "price": 0}).status_code == 422
        assert admin_client.post("/products", json={**self.body, "stock": -1}).status_code == 422

    def test_update_renames_slug(self, admin_client, make_product):
        product = make_product(name="Mouse", stock=3)
        response = admin_client.put(f"/products/{product.id}", json={"name": "Silent Mouse", "stock": 7})
        assert response.status_code == 200
        assert response.json()["slug"] == "silent-mouse"
        assert response.json()["stock"] == 7

    def test_update_missing(self, admin_client):
        assert admin_client.put("/products/missing", json={"stock": 1}).status_code == 404

    def test_delete(self, admin_client, make_product):
        product = make_product()
        assert admin_client.delete(f"/products/{product.id}").status_code == 200
        assert admin_client.get(f"/products/{product.id}").status_code == 404


class TestCategoriesAndShipping:
    def test_create_requires_admin(self, client):
        assert client.post("/categories", json={"name": "Audio"}).status_code == 401
        assert client.post("/shipping-options", json={"name": "Express", "price": "1.00"}).status_code == 401

    def test_categories(self, admin_client):
        response = admin_client.post("/categories", json={"name": "Audio Gear"})
        assert response.status_code == 201
        assert response.json()["slug"] == "audio-gear"
        assert [c["name"] for c in admin_client.get("/categories").json()] == ["Audio Gear"]

    def test_shipping_options(self, admin_client):
        response = admin_client.post("/shipping-options", json={"name": "Express", "price": "24.90", "deliveryDays": 1})
        assert response.status_code == 201
        options = admin_client.get("/shipping-options").json()
        assert options[0]["name"] == "Express"
        assert options[0]["deliveryDays"] == 1

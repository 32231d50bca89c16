"""Cart and checkout endpoints via TestClient."""

from decimal import Decimal

import fakeredis
import pytest

from app.data.cache import get_redis


def _add(client, product_id, quantity=1):
    return client.post("/cart", json={"productId": product_id, "quantity": quantity})


class TestCartEndpoints:
    def test_empty_cart_sets_cookie(self, client):
        response = client.get("/cart")
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert Decimal(response.json()["total"]) == 0
        cookie = response.headers["set-cookie"]
        assert "cart-session=" in cookie
        assert "HttpOnly" in cookie
        assert "Max-Age=2592000" in cookie

    def test_add_and_get(self, client, make_product):
        product = make_product(name="Keyboard", price="10.00", stock=5)

        response = _add(client, product.id, 2)
        assert response.status_code == 200

        body = client.get("/cart").json()
        assert len(body["items"]) == 1
        item = body["items"][0]
        assert item["productId"] == product.id
        assert item["quantity"] == 2
        assert item["product"]["name"] == "Keyboard"
        assert Decimal(body["total"]) == Decimal("20.00")

    def test_session_cookie_is_reused(self, client, make_product):
        product = make_product(stock=10)
        _add(client, product.id, 1)
        _add(client, product.id, 1)
        assert client.get("/cart").json()["items"][0]["quantity"] == 2

    def test_add_unknown_product(self, client):
        response = _add(client, "missing", 1)
        assert response.status_code == 404

    def test_add_over_stock(self, client, make_product):
        product = make_product(stock=5)
        response = _add(client, product.id, 6)
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]

    def test_add_non_positive_quantity(self, client, make_product):
        product = make_product()
        assert _add(client, product.id, 0).status_code == 422

    def test_set_quantity(self, client, make_product):
        product = make_product(stock=10)
        _add(client, product.id, 1)

        response = client.patch("/cart", json={"productId": product.id, "quantity": 4})
        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 4

        response = client.patch("/cart", json={"productId": product.id, "quantity": 0})
        assert response.json()["items"] == []

    def test_remove_item(self, client, make_product):
        product = make_product()
        _add(client, product.id, 1)

        response = client.delete("/cart", params={"productId": product.id})
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_remove_absent_item_is_ok(self, client):
        response = client.delete("/cart", params={"productId": "nothing"})
        assert response.status_code == 200

    def test_remove_requires_product_id(self, client):
        response = client.delete("/cart")
        assert response.status_code == 400

    def test_clear(self, client, make_product):
        product = make_product()
        _add(client, product.id, 1)

        response = client.delete("/cart/clear")
        assert response.status_code == 200
        assert client.get("/cart").json()["items"] == []

    def test_store_unavailable(self, client):
        server = fakeredis.FakeServer()
        server.connected = False
        client.app.dependency_overrides[get_redis] = lambda: fakeredis.FakeRedis(
            server=server, decode_responses=True
        )

        response = client.get("/cart")
        assert response.status_code == 503


class TestCheckoutEndpoint:
    payload = {"customerName": "Jan Kowalski", "customerEmail": "jan@example.com"}

    def test_checkout(self, client, make_product, db):
        product = make_product(price="10.00", stock=5)
        _add(client, product.id, 2)

        response = client.post("/checkout", json=self.payload)

        assert response.status_code == 201
        body = response.json()
        assert body["orderId"] == body["order"]["id"]
        assert Decimal(body["order"]["total"]) == Decimal("20.00")
        assert body["order"]["status"] == "PENDING"
        assert body["order"]["items"][0]["quantity"] == 2
        assert client.get("/cart").json()["items"] == []

        db.expire_all()
        db.refresh(product)
        assert product.stock == 3

    def test_checkout_without_cart(self, client):
        response = client.post("/checkout", json=self.payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_checkout_invalid_email(self, client, make_product):
        product = make_product()
        _add(client, product.id, 1)
        response = client.post("/checkout", json={"customerName": "Jan", "customerEmail": "nope"})
        assert response.status_code == 422

    def test_checkout_stock_changed(self, client, make_product, db):
        product = make_product(stock=5)
        _add(client, product.id, 3)
        product.stock = 1
        db.commit()

        response = client.post("/checkout", json=self.payload)
        assert response.status_code == 400

    def test_idempotent_replay(self, client, make_product):
        product = make_product(stock=5)
        _add(client, product.id, 1)
        headers = {"Idempotency-Key": "retry-1"}

        first = client.post("/checkout", json=self.payload, headers=headers)
        second = client.post("/checkout", json=self.payload, headers=headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json()["orderId"] == first.json()["orderId"]

    @pytest.mark.parametrize("shipping", ["known", "unknown"])
    def test_shipping_option(self, client, make_product, make_shipping_option, shipping):
        product = make_product(price="10.00", stock=5)
        option = make_shipping_option(price="5.00")
        _add(client, product.id, 1)

        option_id = option.id if shipping == "known" else "does-not-exist"
        response = client.post("/checkout", json={**self.payload, "shippingOptionId": option_id})

        assert response.status_code == 201
        expected = Decimal("15.00") if shipping == "known" else Decimal("10.00")
        assert Decimal(response.json()["order"]["total"]) == expected

    def test_idempotency_key_is_per_session(self, client, make_product):
        product = make_product(stock=5)
        headers = {"Idempotency-Key": "1"}

        _add(client, product.id, 1)
        alice = client.post(
            "/checkout", json={"customerName": "Alice", "customerEmail": "alice@example.com"}, headers=headers
        )
        client.cookies.clear()
        _add(client, product.id, 2)
        bob = client.post(
            "/checkout", json={"customerName": "Bob", "customerEmail": "bob@example.com"}, headers=headers
        )

        assert alice.status_code == 201
        assert bob.status_code == 201
        assert bob.json()["orderId"] != alice.json()["orderId"]
        assert bob.json()["order"]["customerEmail"] == "bob@example.com"
        assert client.get("/cart").json()["items"] == []

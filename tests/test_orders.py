from decimal import Decimal

from conftest import auth_headers
from storefront.data.models import CartItemModel, ProductModel

CHECKOUT = {"shippingAddress": "1 Main St, Springfield", "paymentMethod": "credit_card"}


def fill_cart(client, user, *lines):
    for product, quantity in lines:
        client.post("/api/cart", json={"productId": product.id, "quantity": quantity}, headers=auth_headers(user))


class TestCreateOrder:
    def test_creates_order_from_cart(self, client, db, customer, catalog, notifier):
        fill_cart(client, customer, (catalog["shirt"], 2), (catalog["phone"], 1))

        resp = client.post("/api/orders", json=CHECKOUT, headers=auth_headers(customer))

        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "pending"
        assert body["paymentStatus"] == "PENDING"
        assert body["paymentMethod"] == "credit_card"
        assert body["shippingAddress"] == "1 Main St, Springfield"
        assert Decimal(body["total"]) == Decimal("759.97")
        assert sorted((i["productId"], i["quantity"]) for i in body["items"]) == sorted(
            [(catalog["shirt"].id, 2), (catalog["phone"].id, 1)]
        )

        assert db.query(CartItemModel).count() == 0
        assert notifier.order_confirmations == [("alice@example.com", body["id"])]

    def test_items_keep_purchase_price(self, client, db, customer, catalog):
        fill_cart(client, customer, (catalog["shirt"], 1))
        order_id = client.post("/api/orders", json=CHECKOUT, headers=auth_headers(customer)).json()["id"]

        product = db.get(ProductModel, catalog["shirt"].id)
        product.price = Decimal("49.99")
        db.commit()

        body = client.get(f"/api/orders/{order_id}", headers=auth_headers(customer)).json()
        assert Decimal(body["items"][0]["price"]) == Decimal("29.99")
        assert Decimal(body["total"]) == Decimal("29.99")

    def test_empty_cart(self, client, customer, notifier):
        resp = client.post("/api/orders", json=CHECKOUT, headers=auth_headers(customer))

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cart is empty or not found"
        assert notifier.order_confirmations == []

    def test_requires_shipping_address(self, client, customer, catalog):
        fill_cart(client, customer, (catalog["shirt"], 1))
        resp = client.post("/api/orders", json={"paymentMethod": "card"}, headers=auth_headers(customer))
        assert resp.status_code == 400


class TestReadOrders:
    def test_lists_own_orders_newest_first(self, client, customer, make_user, make_order, catalog):
        first = make_order(customer, [(catalog["shirt"], 1)])
        second = make_order(customer, [(catalog["phone"], 1)])
        make_order(make_user(email="bob@example.com"), [(catalog["shirt"], 3)])

        body = client.get("/api/orders", headers=auth_headers(customer)).json()

        assert [o["id"] for o in body] == [second.id, first.id]
        assert body[0]["items"][0]["product"]["name"] == "Smartphone"

    def test_get_own_order(self, client, customer, make_order, catalog):
        order = make_order(customer, [(catalog["shirt"], 1)])
        resp = client.get(f"/api/orders/{order.id}", headers=auth_headers(customer))
        assert resp.status_code == 200
        assert resp.json()["id"] == order.id

    def test_foreign_order(self, client, customer, make_user, make_order, catalog):
        order = make_order(customer, [(catalog["shirt"], 1)])
        bob = make_user(email="bob@example.com")

        resp = client.get(f"/api/orders/{order.id}", headers=auth_headers(bob))
        assert resp.status_code == 403

    def test_missing_order(self, client, customer):
        resp = client.get("/api/orders/31337", headers=auth_headers(customer))
        assert resp.status_code == 404

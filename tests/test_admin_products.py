from conftest import auth_headers
from storefront.data.models import ProductModel


def form(catalog, **overrides):
    data = {
        "name": "Wool Scarf",
        "description": "Warm",
        "price": "24.50",
        "categoryId": str(catalog["clothing"].id),
    }
    data.update(overrides)
    return data


class TestAdminProducts:
    def test_create_from_form(self, client, admin, catalog):
        resp = client.post("/api/admin/products", data=form(catalog), headers=auth_headers(admin))

        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Wool Scarf"
        assert body["imageUrl"] == ""
        assert body["category"]["name"] == "Clothing"

    def test_uploaded_image_is_recorded_as_placeholder(self, client, admin, catalog):
        resp = client.post(
            "/api/admin/products",
            data=form(catalog),
            files={"image": ("scarf.png", b"\x89PNG", "image/png")},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 201
        assert resp.json()["imageUrl"] == "/placeholder.jpg"

    def test_missing_fields(self, client, admin, catalog):
        resp = client.post(
            "/api/admin/products", data=form(catalog, price=""), headers=auth_headers(admin)
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Missing required fields"

    def test_non_numeric_price(self, client, admin, catalog):
        resp = client.post(
            "/api/admin/products", data=form(catalog, price="cheap"), headers=auth_headers(admin)
        )
        assert resp.status_code == 400

    def test_list_newest_first(self, client, admin, catalog):
        created = client.post("/api/admin/products", data=form(catalog), headers=auth_headers(admin)).json()
        body = client.get("/api/admin/products", headers=auth_headers(admin)).json()
        assert body[0]["id"] == created["id"]

    def test_update(self, client, db, admin, catalog):
        shirt = catalog["shirt"]
        resp = client.put(
            f"/api/admin/products/{shirt.id}",
            data=form(catalog, name="Premium Tee", price="34.99"),
            headers=auth_headers(admin),
        )

        assert resp.status_code == 200
        db.expire_all()
        stored = db.get(ProductModel, shirt.id)
        assert stored.name == "Premium Tee"
        # no upload keeps the old image
        assert stored.image_url == "https://img.example.com/shirt.jpg"

    def test_update_missing(self, client, admin, catalog):
        resp = client.put("/api/admin/products/999", data=form(catalog), headers=auth_headers(admin))
        assert resp.status_code == 404

    def test_delete(self, client, db, admin, catalog):
        resp = client.delete(f"/api/admin/products/{catalog['phone'].id}", headers=auth_headers(admin))

        assert resp.status_code == 200
        assert resp.json() == {"message": "Product deleted successfully"}
        assert client.get(f"/api/admin/products/{catalog['phone'].id}", headers=auth_headers(admin)).status_code == 404

    def test_customer_is_rejected(self, client, db, customer, catalog):
        resp = client.delete(f"/api/admin/products/{catalog['phone'].id}", headers=auth_headers(customer))

        assert resp.status_code == 403
        assert db.get(ProductModel, catalog["phone"].id) is not None

from conftest import auth_headers


def test_stats_with_no_orders(client, admin, catalog):
    resp = client.get("/api/admin/stats", headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.json() == {"totalUsers": 1, "totalProducts": 2, "totalOrders": 0, "totalRevenue": 0}


def test_stats_sum_order_totals(client, admin, customer, catalog, make_order):
    make_order(customer, [(catalog["shirt"], 2)])
    make_order(customer, [(catalog["phone"], 1)])

    body = client.get("/api/admin/stats", headers=auth_headers(admin)).json()

    assert body["totalUsers"] == 2
    assert body["totalOrders"] == 2
    assert abs(body["totalRevenue"] - 759.97) < 1e-6


def test_stats_requires_admin(client, customer):
    assert client.get("/api/admin/stats").status_code == 401
    assert client.get("/api/admin/stats", headers=auth_headers(customer)).status_code == 403

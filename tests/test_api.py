from decimal import Decimal


def ids(items):
    return [item["id"] for item in items]


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert "version" in res.json()


class TestUsers:

    def test_create_user(self, client):
        res = client.post("/users", json={"name": "Ana", "email": "ana@x.com"})
        assert res.status_code == 201
        body = res.json()
        assert body["id"] > 0
        assert body["created_at"]

    def test_duplicate_email_conflicts(self, client):
        client.post("/users", json={"name": "Ana", "email": "ana@x.com"})
        res = client.post("/users", json={"name": "Other Ana", "email": "ana@x.com"})
        assert res.status_code == 409
        assert "detail" in res.json()

    def test_list_users_filters(self, seeded_client):
        body = seeded_client.get("/users", params={"name": "silva"}).json()
        assert body["total"] == 1
        assert body["items"][0]["email"] == "joao.silva@email.com"

    def test_list_users_pagination(self, seeded_client):
        body = seeded_client.get("/users", params={"with_orders": True, "per_page": 4}).json()
        assert (body["total"], body["pages"], len(body["items"])) == (6, 2, 4)
        second = seeded_client.get(
            "/users", params={"with_orders": True, "per_page": 4, "page": 2}
        ).json()
        assert ids(second["items"]) == [5, 6]

    def test_list_users_created_after(self, seeded_client):
        body = seeded_client.get("/users", params={"created_after": "2024-03-01T00:00:00"}).json()
        assert ids(body["items"]) == [7, 8]

    def test_get_missing_user(self, seeded_client):
        assert seeded_client.get("/users/999").status_code == 404

    def test_user_orders(self, seeded_client):
        assert ids(seeded_client.get("/users/1/orders").json()) == [1, 2]

    def test_delete_user_cascades(self, seeded_client):
        assert seeded_client.delete("/users/1").status_code == 204
        assert seeded_client.get("/users/1").status_code == 404
        assert seeded_client.get("/orders", params={"user_id": 1}).json()["total"] == 0
        assert seeded_client.get("/reviews", params={"user_id": 1}).json() == []


class TestProducts:

    def test_create_product_keeps_decimal_price(self, client):
        res = client.post("/products", json={"name": "Cable", "price": "19.90"})
        assert res.status_code == 201
        body = res.json()
        assert Decimal(str(body["price"])) == Decimal("19.90")
        assert body["stock"] == 0

    def test_list_products_by_price(self, seeded_client):
        body = seeded_client.get("/products", params={"min_price": 400, "max_price": 700}).json()
        assert ids(body["items"]) == [3, 5, 6, 8]

    def test_list_products_in_low_stock(self, seeded_client):
        body = seeded_client.get("/products", params={"in_stock": True, "low_stock": 5}).json()
        assert ids(body["items"]) == [7, 8]

    def test_update_product(self, seeded_client):
        res = seeded_client.patch("/products/6", json={"stock": 12})
        assert res.status_code == 200
        assert res.json()["stock"] == 12
        assert res.json()["name"] == "Webcam Logitech C920"

    def test_review_stats(self, seeded_client):
        body = seeded_client.get("/products/3/reviews/stats").json()
        assert body["count"] == 3
        assert body["maximum"] == 5
        assert seeded_client.get("/products/999/reviews/stats").status_code == 404

    def test_delete_product_removes_its_reviews(self, seeded_client):
        assert seeded_client.delete("/products/3").status_code == 204
        assert seeded_client.get("/reviews", params={"product_id": 3}).json() == []
        assert seeded_client.get("/products/3").status_code == 404


class TestOrders:

    def test_example_scenario_over_http(self, client):
        user = client.post("/users", json={"name": "Ana", "email": "ana@x.com"}).json()
        mouse = client.post("/products", json={"name": "Mouse", "price": "50.00", "stock": 10}).json()
        order = client.post("/orders", json={"user_id": user["id"], "total": "50.00"}).json()
        assert order["status"] == "CREATED"

        res = client.post(
            f"/orders/{order['id']}/items",
            json={"product_id": mouse["id"], "quantity": 1, "subtotal": "50.00"},
        )
        assert res.status_code == 201
        assert res.json()["order_id"] == order["id"]

        detail = client.get(f"/orders/{order['id']}").json()
        assert [i["product_id"] for i in detail["items"]] == [mouse["id"]]

        assert client.delete(f"/users/{user['id']}").status_code == 204
        assert client.get(f"/orders/{order['id']}").status_code == 404
        assert client.get("/products").json()["total"] == 1

    def test_create_order_for_missing_user(self, client):
        res = client.post("/orders", json={"user_id": 999, "total": "1.00"})
        assert res.status_code == 404

    def test_list_orders_filters(self, seeded_client):
        body = seeded_client.get("/orders", params={"status": "PAID", "min_total": 1000}).json()
        assert ids(body["items"]) == [2, 4, 6, 7]

    def test_status_changes_are_not_checked(self, seeded_client):
        res = seeded_client.patch("/orders/5/status", json={"status": "CREATED"})
        assert res.status_code == 200
        assert res.json()["status"] == "CREATED"

    def test_unknown_status_is_rejected(self, seeded_client):
        assert seeded_client.patch("/orders/5/status", json={"status": "SHIPPED"}).status_code == 422

    def test_remove_item(self, seeded_client):
        assert seeded_client.delete("/orders/2/items/3").status_code == 204
        detail = seeded_client.get("/orders/2").json()
        assert ids(detail["items"]) == [2, 4]

    def test_remove_item_of_another_order(self, seeded_client):
        assert seeded_client.delete("/orders/2/items/5").status_code == 404

    def test_delete_order(self, seeded_client):
        assert seeded_client.delete("/orders/1").status_code == 204
        assert seeded_client.get("/orders/1").status_code == 404
        assert ids(seeded_client.get("/users/1/orders").json()) == [2]


class TestReviews:

    def test_create_review(self, seeded_client):
        res = seeded_client.post(
            "/reviews", json={"user_id": 7, "product_id": 3, "rating": 4, "comment": "ok"}
        )
        assert res.status_code == 201
        assert (res.json()["user_id"], res.json()["product_id"]) == (7, 3)

    def test_duplicate_review_conflicts(self, seeded_client):
        res = seeded_client.post("/reviews", json={"user_id": 1, "product_id": 3, "rating": 1})
        assert res.status_code == 409

    def test_list_reviews(self, seeded_client):
        assert len(seeded_client.get("/reviews", params={"has_comment": True}).json()) == 6
        found = seeded_client.get("/reviews", params={"product_id": 5, "min_rating": 4}).json()
        assert [r["user_id"] for r in found] == [1, 6]

    def test_get_and_delete_review(self, seeded_client):
        assert seeded_client.get("/reviews/1/3").json()["rating"] == 5
        assert seeded_client.delete("/reviews/1/3").status_code == 204
        assert seeded_client.get("/reviews/1/3").status_code == 404


class TestReports:

    def test_orders_by_status(self, seeded_client):
        assert seeded_client.get("/reports/orders-by-status").json() == [
            {"status": "CANCELLED", "count": 1},
            {"status": "CREATED", "count": 2},
            {"status": "PAID", "count": 5},
        ]

    def test_top_users(self, seeded_client):
        body = seeded_client.get("/reports/top-users", params={"limit": 2}).json()
        assert [u["user_id"] for u in body] == [5, 3]
        assert Decimal(str(body[0]["total_sales"])) == Decimal("4200")

    def test_inventory_value(self, seeded_client):
        body = seeded_client.get("/reports/inventory-value").json()
        assert Decimal(str(body["inventory_value"])) == Decimal("302450")

    def test_top_selling_and_revenue(self, seeded_client):
        top = seeded_client.get("/reports/top-selling-products", params={"limit": 2}).json()
        assert [p["product_id"] for p in top] == [5, 10]
        revenue = seeded_client.get("/reports/revenue-by-product").json()
        assert revenue[0]["product_id"] == 2

    def test_top_rated_products(self, seeded_client):
        body = seeded_client.get("/reports/top-rated-products").json()
        assert [p["product_id"] for p in body] == [3, 5]

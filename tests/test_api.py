#!/usr/bin/env python3
"""
HTTP API Test Suite

PURPOSE:
    Exercises the FastAPI app end to end with TestClient: admin sign-in,
    the session guard on every admin route, and the JSON shapes of each
    screen's endpoint. Database and session store are swapped for
    in-memory versions through dependency overrides.

USAGE:
    Run from project root: python -m pytest tests/test_api.py -v
"""

import unittest
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import requests

from support import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    add_admin,
    add_order,
    add_product,
    add_user,
    clear_overrides,
    make_client,
    make_session_factory,
)

from bakery_admin.data.models import OrderStatus, UserRole


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.factory = make_session_factory()
        self.db = self.factory()
        self.admin = add_admin(self.db)
        self.client, self.sessions = make_client(self.factory)

    def tearDown(self):
        clear_overrides()
        self.db.close()

    def login(self):
        response = self.client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        self.assertEqual(response.status_code, 200, response.text)
        return {"Authorization": f"Bearer {response.json()['token']}"}


class TestAuthApi(ApiTestCase):

    def test_health_is_public(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_login_and_me(self):
        headers = self.login()
        response = self.client.get("/auth/me", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], ADMIN_EMAIL)

    def test_login_sets_session_cookie(self):
        self.client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        self.assertEqual(self.client.get("/auth/me").status_code, 200)

    def test_wrong_password(self):
        response = self.client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid credentials")
        self.assertEqual(response.json()["code"], "AUTH_FAILED")

    def test_non_admin_login_forbidden(self):
        add_user(self.db, name="Asha", email="asha@example.com", password="customer-pass")
        response = self.client.post("/auth/login", json={"email": "asha@example.com", "password": "customer-pass"})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Unauthorized access")

    def test_admin_routes_require_session(self):
        for path in ("/products", "/orders", "/customers", "/dashboard/stats", "/analytics",
                     "/reports/daily", "/stock", "/settings", "/predictions", "/auth/me"):
            response = self.client.get(path)
            self.assertEqual(response.status_code, 401, path)

    def test_unknown_token(self):
        response = self.client.get("/products", headers={"Authorization": "Bearer made-up"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Session expired")

    def test_logout_ends_session(self):
        headers = self.login()
        self.assertEqual(self.client.post("/auth/logout", headers=headers).status_code, 200)
        self.assertEqual(self.client.get("/auth/me", headers=headers).status_code, 401)

    def test_revoked_admin_is_forbidden(self):
        headers = self.login()
        token = headers["Authorization"].split()[1]
        self.admin.role = UserRole.user
        self.db.commit()
        self.assertEqual(self.client.get("/auth/me", headers=headers).status_code, 403)
        self.assertIsNone(self.sessions.get_session(token))


    def test_deleted_admin_is_signed_out(self):
        headers = self.login()
        token = headers["Authorization"].split()[1]
        self.db.delete(self.admin)
        self.db.commit()
        response = self.client.get("/auth/me", headers=headers)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Account no longer exists")
        self.assertIsNone(self.sessions.get_session(token))


class TestProductsApi(ApiTestCase):

    def test_crud(self):
        headers = self.login()
        created = self.client.post("/products", headers=headers, json={
            "name": "Red Velvet Cake", "category": "cakes", "price": 700, "quantity": 3, "is_new": True,
        })
        self.assertEqual(created.status_code, 201, created.text)
        product = created.json()
        self.assertTrue(product["in_stock"])
        self.assertEqual(product["created_by"], ADMIN_EMAIL)

        updated = self.client.put(f"/products/{product['id']}", headers=headers, json={
            "name": "Red Velvet Cake", "category": "cakes", "price": 650, "quantity": 0,
        })
        self.assertEqual(updated.json()["price"], 650)
        self.assertFalse(updated.json()["in_stock"])

        listing = self.client.get("/products", headers=headers, params={"category": "cakes"}).json()
        self.assertEqual(listing["total"], 1)
        self.assertEqual(listing["category_counts"]["cakes"], 1)

        deleted = self.client.delete(f"/products/{product['id']}", headers=headers)
        self.assertEqual(deleted.json()["message"], "Product deleted successfully")
        self.assertEqual(self.client.get(f"/products/{product['id']}", headers=headers).status_code, 404)

    def test_validation_error_shape(self):
        headers = self.login()
        response = self.client.post("/products", headers=headers, json={"name": "Tart", "category": "cakes"})
        self.assertEqual(response.status_code, 422)
        body = response.json()
        self.assertEqual(body["detail"], "Valid price is required")
        self.assertEqual(body["details"]["field"], "price")

    def test_categories(self):
        headers = self.login()
        add_product(self.db, name="Sourdough Loaf", category="breads")
        categories = self.client.get("/products/categories", headers=headers).json()
        breads = next(c for c in categories if c["id"] == "breads")
        self.assertEqual((breads["name"], breads["count"]), ("Breads", 1))


class TestOrdersApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.cake = add_product(self.db, name="Chocolate Cake", price=250.0, quantity=10)

    def test_create_and_advance_order(self):
        headers = self.login()
        created = self.client.post("/orders", headers=headers, json={
            "items": [{"product_id": self.cake.id, "quantity": 1}],
            "customer_name": "Walk-in",
            "address": {"email": "walkin@example.com"},
        })
        self.assertEqual(created.status_code, 201, created.text)
        order = created.json()
        self.assertEqual(order["total"], 290.0)
        self.assertEqual(order["short_id"], order["id"][-8:])

        response = self.client.patch(f"/orders/{order['id']}/status", headers=headers, json={"status": "confirmed"})
        self.assertEqual(response.status_code, 200, response.text)
        detail = response.json()
        self.assertEqual(detail["order_status"], "confirmed")
        self.assertEqual(detail["status_label"], "Order Confirmed")
        self.assertEqual(detail["next_statuses"], ["processing", "cancelled"])

    def test_invalid_transition_is_conflict(self):
        headers = self.login()
        order = add_order(self.db, [("Chocolate Cake", 250.0, 1, self.cake)], status=OrderStatus.delivered)
        response = self.client.patch(f"/orders/{order.id}/status", headers=headers, json={"status": "cancelled"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["details"]["allowed"], [])

    def test_list_and_paging(self):
        headers = self.login()
        for _ in range(3):
            add_order(self.db, [("Chocolate Cake", 250.0, 1, self.cake)])
        body = self.client.get("/orders", headers=headers, params={"page_size": 2}).json()
        self.assertEqual((len(body["items"]), body["total"], body["has_more"]), (2, 3, True))

    def test_statuses(self):
        headers = self.login()
        statuses = {s["value"]: s for s in self.client.get("/orders/statuses", headers=headers).json()}
        self.assertEqual(statuses["shipped"]["next_statuses"], ["delivered", "cancelled"])
        self.assertEqual(statuses["pending"]["label"], "Order Pending")
        self.assertEqual(statuses["shipped"]["step"], 3)
        self.assertIsNone(statuses["cancelled"]["step"])

    def test_missing_order(self):
        headers = self.login()
        response = self.client.get("/orders/does-not-exist", headers=headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Order not found")


class TestScreensApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.asha = add_user(self.db, name="Asha", email="asha@example.com")
        self.cake = add_product(self.db, name="Chocolate Cake", price=30.0, quantity=10)
        add_order(self.db, [("Chocolate Cake", 30.0, 2, self.cake)], status=OrderStatus.delivered,
                  created_at=datetime(2025, 6, 9, 10, 15), user=self.asha)
        add_order(self.db, [("Chocolate Cake", 30.0, 1, self.cake)], status=OrderStatus.pending,
                  created_at=datetime(2025, 6, 10, 9, 0), user=self.asha)

    def test_dashboard_stats(self):
        stats = self.client.get("/dashboard/stats", headers=self.login()).json()
        self.assertEqual(stats["orders"]["total"], 2)
        self.assertEqual(stats["orders"]["completed"], 1)
        self.assertEqual(stats["customers"]["total"], 1)
        self.assertEqual(stats["revenue"]["total"], 90.0)

    def test_dashboard_stats_skip_cancelled_orders(self):
        add_order(self.db, [("Chocolate Cake", 30.0, 5, self.cake)], status=OrderStatus.cancelled,
                  created_at=datetime(2025, 6, 11, 12, 0), user=self.asha)
        add_product(self.db, name="Plum Cake", price=400.0, quantity=0)

        stats = self.client.get("/dashboard/stats", headers=self.login()).json()
        self.assertEqual(stats["revenue"], {"total": 90.0, "formatted": "$90.00"})
        self.assertEqual(stats["orders"], {"total": 2, "completed": 1, "pending": 1})
        self.assertEqual(stats["products"], {"total": 2, "in_stock": 1, "out_of_stock": 1})
        self.assertEqual(stats["customers"], {"total": 1})

    def test_analytics(self):
        body = self.client.get("/analytics", headers=self.login(), params={"date": "2025-06-09"}).json()
        self.assertTrue(body["single_day"])
        self.assertEqual(body["summary"]["total_revenue"], 70.0)
        self.assertEqual(body["orders_by_hour"]["datasets"][0]["data"][10], 1)

    def test_analytics_rows_sorted(self):
        rows = self.client.get("/analytics/rows", headers=self.login(),
                               params={"sort_key": "quantity", "sort_dir": "asc"}).json()
        self.assertEqual([r["quantity"] for r in rows], [1, 2])

    def test_heatmaps(self):
        headers = self.login()
        weekly = self.client.get("/analytics/heatmaps/weekly", headers=headers,
                                 params={"year": 2025, "month": 6, "week": 2}).json()
        self.assertEqual(sum(p["v"] for p in weekly["points"]), 2)
        monthly = self.client.get("/analytics/heatmaps/monthly", headers=headers, params={"year": 2025}).json()
        self.assertEqual(monthly["max_value"], 2)
        bad = self.client.get("/analytics/heatmaps/weekly", headers=headers,
                              params={"year": 2025, "month": 6, "week": 6})
        self.assertEqual(bad.status_code, 422)
        for path in ("/analytics/heatmaps/weekly", "/analytics/heatmaps/monthly"):
            out_of_range = self.client.get(path, headers=headers, params={"year": 10000})
            self.assertEqual(out_of_range.status_code, 422, path)

    def test_daily_report_and_csv(self):
        headers = self.login()
        rows = self.client.get("/reports/daily", headers=headers).json()
        self.assertEqual([r["date"] for r in rows], ["2025-06-10", "2025-06-09"])

        response = self.client.get("/reports/daily.csv", headers=headers, params={"date": "2025-06-09"})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/csv"))
        self.assertIn("attachment", response.headers["content-disposition"])
        self.assertEqual(len(response.text.strip().split("\n")), 2)

    def test_stock(self):
        body = self.client.get("/stock", headers=self.login(),
                               params={"date": "2025-06-12", "range": "week"}).json()
        self.assertEqual(body["range"], "week")
        cake = next(p for p in body["products"] if p["name"] == "Chocolate Cake")
        self.assertEqual((cake["sold"], cake["available"]), (3, 7))

    def test_customers(self):
        headers = self.login()
        customers = self.client.get("/customers", headers=headers).json()
        self.assertEqual([(c["name"], c["order_count"]) for c in customers], [("Asha", 2)])
        patched = self.client.patch(f"/customers/{self.asha.id}", headers=headers, json={"phone": "12345"})
        self.assertEqual(patched.json()["phone"], "12345")

    def test_settings(self):
        headers = self.login()
        self.assertEqual(self.client.get("/settings", headers=headers).json()["currency"], "INR")
        saved = self.client.put("/settings", headers=headers, json={"store_name": "Toshan Bakery"})
        self.assertEqual(saved.json()["store_name"], "Toshan Bakery")
        bad = self.client.put("/settings", headers=headers, json={"minimum_order_amount": 99999})
        self.assertEqual(bad.status_code, 422)

    @patch("bakery_admin.services.predictions.requests.get")
    def test_predictions(self, mock_get):
        headers = self.login()
        today = date.today().isoformat()
        mock_get.return_value = MagicMock(json=MagicMock(return_value=[]))
        refreshed = self.client.post("/predictions", headers=headers)
        self.assertEqual(refreshed.status_code, 200)
        self.assertEqual(refreshed.json(), [])
        self.assertEqual(self.client.get("/predictions", headers=headers, params={"date": today}).json(), [])

    @patch("bakery_admin.services.predictions.requests.get", side_effect=requests.ConnectionError("down"))
    def test_prediction_upstream_failure(self, mock_get):
        response = self.client.post("/predictions", headers=self.login())
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["code"], "UPSTREAM_ERROR")


if __name__ == "__main__":
    unittest.main(verbosity=2)

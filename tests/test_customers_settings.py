#!/usr/bin/env python3
"""
Customers and Store Settings Test Suite

USAGE:
    Run from project root: python -m pytest tests/test_customers_settings.py -v
"""

import unittest
from datetime import datetime, timedelta

from support import add_admin, add_order, add_user, make_session_factory

from bakery_admin.app.exceptions import NotFoundError, ValidationError
from bakery_admin.schemas.customer_models import CustomerUpdate
from bakery_admin.schemas.settings_models import StoreSettingsModel, StoreSettingsUpdate
from bakery_admin.services.customers import CustomerDirectory
from bakery_admin.services.store_settings import SETTINGS_KEY, SettingsStore
from bakery_admin.data.models import StoreSettings


class TestCustomerDirectory(unittest.TestCase):

    def setUp(self):
        self.db = make_session_factory()()
        self.directory = CustomerDirectory(self.db)
        now = datetime.now()
        self.zara = add_user(self.db, name="Zara", email="zara@example.com", created_at=now - timedelta(days=3))
        self.asha = add_user(self.db, name="asha", email="asha@example.com", created_at=now)
        self.admin = add_admin(self.db)
        add_order(self.db, [("Cake", 10.0, 1)], user=self.zara)
        add_order(self.db, [("Cake", 10.0, 1)], user=self.zara)

    def tearDown(self):
        self.db.close()

    def test_admins_are_not_customers(self):
        emails = [c["email"] for c in self.directory.list_customers()]
        self.assertNotIn(self.admin.email, emails)
        self.assertEqual(len(emails), 2)

    def test_sort_options(self):
        recent = [c["name"] for c in self.directory.list_customers(sort_by="recent")]
        self.assertEqual(recent, ["asha", "Zara"])
        by_name = [c["name"] for c in self.directory.list_customers(sort_by="name")]
        self.assertEqual(by_name, ["asha", "Zara"])
        by_orders = self.directory.list_customers(sort_by="orders")
        self.assertEqual((by_orders[0]["name"], by_orders[0]["order_count"]), ("Zara", 2))

    def test_search(self):
        found = self.directory.list_customers(search="ZARA@")
        self.assertEqual([c["id"] for c in found], [self.zara.id])

    def test_unknown_sort(self):
        with self.assertRaises(ValidationError):
            self.directory.list_customers(sort_by="spend")

    def test_get_admin_as_customer_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.directory.get_customer(self.admin.id)

    def test_update_customer(self):
        record = self.directory.update_customer(
            self.asha.id,
            CustomerUpdate(name="Asha Rao", phone=" 98765 43210 ", address={"city": "Pune"}),
        )
        self.assertEqual(record["name"], "Asha Rao")
        self.assertEqual(record["phone"], "98765 43210")
        self.assertEqual(record["address"]["city"], "Pune")

    def test_update_rejects_blank_name(self):
        with self.assertRaises(ValidationError):
            self.directory.update_customer(self.asha.id, CustomerUpdate(name="  "))

    def test_update_rejects_duplicate_email(self):
        with self.assertRaises(ValidationError) as ctx:
            self.directory.update_customer(self.asha.id, CustomerUpdate(email="ZARA@example.com"))
        self.assertEqual(ctx.exception.message, "Email is already in use")


class TestSettingsStore(unittest.TestCase):

    def setUp(self):
        self.db = make_session_factory()()
        self.store = SettingsStore(self.db)

    def tearDown(self):
        self.db.close()

    def test_defaults_when_nothing_saved(self):
        settings = self.store.get()
        self.assertEqual(settings, StoreSettingsModel())
        self.assertEqual(settings.timezone, "Asia/Kolkata")
        self.assertEqual(settings.free_delivery_threshold, 500)

    def test_partial_save_keeps_other_fields(self):
        self.store.save(StoreSettingsUpdate(store_name="Toshan Bakery"))
        self.store.save(StoreSettingsUpdate(delivery_charges=25))
        settings = self.store.get()
        self.assertEqual(settings.store_name, "Toshan Bakery")
        self.assertEqual(settings.delivery_charges, 25)
        self.assertEqual(settings.currency, "INR")

    def test_min_above_max_rejected(self):
        with self.assertRaises(ValidationError):
            self.store.save(StoreSettingsUpdate(minimum_order_amount=20000))
        self.assertEqual(self.store.get().minimum_order_amount, 0)

    def test_negative_amount_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.store.save(StoreSettingsUpdate(delivery_charges=-5))
        self.assertEqual(ctx.exception.details.get("field"), "delivery_charges")

    def test_unknown_stored_keys_dropped(self):
        self.db.add(StoreSettings(key=SETTINGS_KEY, document={"store_name": "Old", "legacyFlag": True}))
        self.db.commit()
        settings = self.store.get()
        self.assertEqual(settings.store_name, "Old")
        self.assertNotIn("legacyFlag", settings.model_dump())


if __name__ == "__main__":
    unittest.main(verbosity=2)

"""
Tests for the pure business rules.
"""
from datetime import date, datetime, timezone
import unittest

import bcrypt

from carwash.core.commission import split_price, validate_commission
from carwash.core.conditions import evaluate_condition, period_start, validate_condition
from carwash.core.reports import group_key, recent_month_keys, report_range
from carwash.core.staff import hash_password, permissions_for_role, washer_status
from carwash.core.stock import StockStatus, insufficient_stock_message, stock_status
from carwash.notifications.sms import format_nigerian_phone


class TestCommission(unittest.TestCase):

    def test_pair_must_sum_to_100(self):
        """40/61 is not a valid split"""
        self.assertEqual(
            validate_commission(40, 61),
            "Washer and company commission percentages must equal 100%",
        )
        self.assertIsNone(validate_commission(40, 60))
        self.assertIsNone(validate_commission(0, 100))

    def test_washer_percentage_range(self):
        self.assertIsNotNone(validate_commission(-10, 110))
        self.assertIsNotNone(validate_commission(110, -10))

    def test_split_price(self):
        washer, company = split_price(5000, 40, 60)
        self.assertAlmostEqual(washer, 2000)
        self.assertAlmostEqual(company, 3000)


class TestConditions(unittest.TestCase):

    def test_at_least_five_visits(self):
        condition = {"operator": ">=", "value": 5}
        self.assertTrue(evaluate_condition(condition, 5))
        self.assertFalse(evaluate_condition(condition, 4))

    def test_all_operators(self):
        cases = [
            ("<=", 3, 3, True), ("<=", 3, 4, False),
            ("=", 3, 3, True), ("=", 3, 2, False),
            (">", 3, 4, True), (">", 3, 3, False),
            ("<", 3, 2, True), ("<", 3, 3, False),
        ]
        for op, value, actual, expected in cases:
            with self.subTest(op=op, actual=actual):
                self.assertEqual(evaluate_condition({"operator": op, "value": value}, actual), expected)

    def test_unknown_operator_never_qualifies(self):
        self.assertFalse(evaluate_condition({"operator": "!=", "value": 1}, 5))
        self.assertFalse(evaluate_condition({"value": 1}, 5))

    def test_validate_condition(self):
        self.assertIsNone(validate_condition({"operator": ">=", "value": 10, "period": "monthly"}))
        self.assertEqual(validate_condition({"operator": ">="}), "Invalid condition format")
        self.assertEqual(validate_condition({"value": 3}), "Invalid condition format")
        self.assertIsNotNone(validate_condition({"operator": "~", "value": 3}))
        self.assertIsNotNone(validate_condition({"operator": ">=", "value": 3, "period": "hourly"}))

    def test_period_start(self):
        now = datetime(2024, 3, 15, 13, 45, tzinfo=timezone.utc)
        self.assertIsNone(period_start("all_time", now))
        self.assertIsNone(period_start(None, now))
        self.assertEqual(period_start("daily", now), datetime(2024, 3, 15, tzinfo=timezone.utc))
        self.assertEqual(period_start("weekly", now), datetime(2024, 3, 8, 13, 45, tzinfo=timezone.utc))


class TestStockStatus(unittest.TestCase):

    def test_classification(self):
        self.assertEqual(stock_status(10, 10), StockStatus.LOW)
        self.assertEqual(stock_status(15, 10), StockStatus.MEDIUM)
        self.assertEqual(stock_status(20, 10), StockStatus.MEDIUM)
        self.assertEqual(stock_status(25, 10), StockStatus.GOOD)
        self.assertEqual(stock_status(0, 0), StockStatus.LOW)

    def test_insufficient_message(self):
        self.assertEqual(
            insufficient_stock_message("Wax", 2, 5),
            "Insufficient stock for Wax. Available: 2, Requested: 5",
        )


class TestPhoneFormatting(unittest.TestCase):

    def test_nigerian_formats(self):
        for raw in ("08169530309", "8169530309", "2348169530309", "+2348169530309", "0816 953 0309"):
            with self.subTest(raw=raw):
                self.assertEqual(format_nigerian_phone(raw), "+2348169530309")

    def test_other_numbers(self):
        self.assertEqual(format_nigerian_phone("+447911123456"), "+447911123456")
        self.assertEqual(format_nigerian_phone("447911123456"), "+447911123456")


class TestStaffRules(unittest.TestCase):

    def test_permissions(self):
        self.assertIn("manage_admins", permissions_for_role("super_admin"))
        self.assertEqual(len(permissions_for_role("super_admin")), 7)
        self.assertNotIn("manage_admins", permissions_for_role("admin"))
        self.assertEqual(permissions_for_role("car_washer"), ["view_reports"])

    def test_washer_status(self):
        self.assertEqual(washer_status(False, True), "inactive")
        self.assertEqual(washer_status(True, False), "on_leave")
        self.assertEqual(washer_status(True, True), "active")

    def test_password_hash(self):
        hashed = hash_password("secret1")
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(bcrypt.checkpw(b"secret1", hashed.encode("utf-8")))
        self.assertFalse(bcrypt.checkpw(b"secret2", hashed.encode("utf-8")))


class TestReportHelpers(unittest.TestCase):

    def test_month_keys_cross_year(self):
        now = datetime(2024, 2, 10, tzinfo=timezone.utc)
        self.assertEqual(recent_month_keys(4, now), ["2024-02", "2024-01", "2023-12", "2023-11"])

    def test_group_keys(self):
        value = datetime(2024, 5, 16, 9, 0, tzinfo=timezone.utc)  # a Thursday
        self.assertEqual(group_key(value, "daily"), "2024-05-16")
        self.assertEqual(group_key(value, "weekly"), "2024-05-13")
        self.assertEqual(group_key(value, "monthly"), "2024-05")

    def test_custom_range(self):
        start, end = report_range("custom", date(2024, 1, 1), date(2024, 1, 31))
        self.assertEqual(start, datetime(2024, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(end, datetime(2024, 2, 1, tzinfo=timezone.utc))
        with self.assertRaises(ValueError):
            report_range("custom")
        with self.assertRaises(ValueError):
            report_range("fortnight")


if __name__ == "__main__":
    unittest.main()

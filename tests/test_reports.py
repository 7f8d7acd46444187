"""
Tests for the financial report, payment report and dashboard metrics.
"""
import unittest

from tests.base import ApiTestCase


class TestReports(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.service = self.create_service(price=5000, washer=40, company=60)
        self.washer = self.create_washer()
        self.create_customer(plate="REP001")

    def paid_visit(self):
        return self.complete_visit("REP001", [self.service["id"]], washer_id=self.washer["id"], paid=True)

    def stock_sale(self, quantity=3):
        admin = self.create_admin()
        item = self.create_item(name="Air Freshener", stock=10, cost=500)
        self.post("/sales", {
            "adminId": admin["id"],
            "items": [{"inventoryId": item["id"], "quantity": quantity}],
            "paymentMethod": "pos",
        })

    def test_1_financial_report(self):
        self.paid_visit()
        self.stock_sale()

        data = self.get("/financial-reports", period=3)
        self.assertEqual(len(data["reports"]), 3)
        current = data["reports"][0]
        self.assertEqual(current["carWashRevenue"], 3000)
        self.assertEqual(current["productSalesRevenue"], 1500)
        self.assertEqual(current["transactionCount"], 2)
        self.assertEqual(data["summary"]["totalRevenue"], 4500)
        self.assertEqual(data["summary"]["netProfit"], 4500)
        self.assertEqual(data["reports"][1]["totalRevenue"], 0)

    def test_2_payment_report(self):
        self.paid_visit()
        self.check_in("REP001", [self.service["id"]])
        self.stock_sale()

        data = self.get("/payment-reports", reportType="daily", period="today")
        self.assertEqual(len(data["reports"]), 1)
        summary = data["summary"]
        self.assertEqual(summary["carWashRevenue"], 5000)
        self.assertEqual(summary["stockSalesRevenue"], 1500)
        self.assertEqual(summary["pendingPayments"], 1)
        self.assertEqual(summary["pendingAmount"], 5000)
        self.assertEqual(summary["paymentMethods"]["cash"], 5000)
        self.assertEqual(summary["paymentMethods"]["pos"], 1500)
        self.assertEqual(summary["totalTransactions"], 2)

    def test_3_payment_report_view_mode(self):
        self.paid_visit()
        self.stock_sale()

        wash_only = self.get("/payment-reports", period="today", viewMode="car-wash-only")["summary"]
        self.assertEqual((wash_only["carWashRevenue"], wash_only["stockSalesRevenue"]), (5000, 0))
        sales_only = self.get("/payment-reports", period="today", viewMode="stock-sales-only")["summary"]
        self.assertEqual((sales_only["carWashRevenue"], sales_only["stockSalesRevenue"]), (0, 1500))

    def test_4_payment_report_arguments(self):
        data = self.get("/payment-reports", period="custom", expected=400)
        self.assertEqual(data["error"], "startDate and endDate are required for a custom period")
        self.get("/payment-reports", period="custom", startDate="2024-02-01", endDate="2024-01-01", expected=400)
        self.get("/payment-reports", viewMode="everything", expected=400)

        data = self.get("/payment-reports", period="custom", startDate="2024-01-01", endDate="2024-01-31")
        self.assertEqual(data["reports"], [])

    def test_5_dashboard_metrics(self):
        self.paid_visit()
        self.check_in("REP001", [self.service["id"]])
        self.create_item(name="Wax", stock=2, min_level=5)

        metrics = self.get("/dashboard-metrics")["metrics"]
        self.assertEqual(metrics["income"]["daily"]["carWashIncome"], 5000)
        self.assertEqual(metrics["carCount"]["daily"], 2)
        self.assertEqual(metrics["activeWashers"], 1)
        self.assertEqual(metrics["pendingCheckIns"], 1)
        self.assertEqual([i["name"] for i in metrics["lowStockItems"]], ["Wax"])
        self.assertEqual(metrics["recentActivities"][0]["type"], "low_stock")
        self.assertEqual(metrics["topWashers"][0]["earnings"], 2000)


if __name__ == "__main__":
    unittest.main()

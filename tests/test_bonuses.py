"""
Tests for bonus issuance, item rewards, SMS notification and the lifecycle.
"""
import unittest

from tests.base import ApiTestCase, FakeSMSClient


class TestBonuses(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.customer = self.create_customer()

    def item_bonus(self, item_id, expected=201, quantity=1):
        return self.post("/bonuses", {
            "type": "customer",
            "recipientId": self.customer["id"],
            "amount": 1500,
            "reason": "Loyal customer",
            "rewardType": "item",
            "itemId": item_id,
            "quantity": quantity,
        }, expected=expected)

    def test_1_item_bonus_out_of_stock(self):
        """An item bonus with no stock is rejected and stock is untouched"""
        item = self.create_item(stock=0, min_level=0, max_level=10)
        data = self.item_bonus(item["id"], expected=400)
        self.assertFalse(data["success"])
        self.assertIn("Insufficient stock", data["error"])

        self.assertEqual(self.get(f"/inventory/{item['id']}")["item"]["currentStock"], 0)
        self.assertEqual(self.get("/bonuses")["bonuses"], [])
        self.assertEqual(self.sms.sent, [])

    def test_2_item_bonus_takes_stock(self):
        """An item bonus with stock 3 leaves 2 and exactly one bonus"""
        item = self.create_item(stock=3, min_level=1, max_level=10)
        data = self.item_bonus(item["id"])
        self.assertEqual(data["bonus"]["status"], "pending")
        self.assertEqual(data["bonus"]["rewardType"], "item")
        self.assertEqual(data["bonus"]["quantity"], 1)

        self.assertEqual(self.get(f"/inventory/{item['id']}")["item"]["currentStock"], 2)
        self.assertEqual(len(self.get("/bonuses")["bonuses"]), 1)

    def test_3_item_bonus_needs_known_item(self):
        self.item_bonus(4242, expected=404)

    def test_4_customer_bonus_sends_one_sms(self):
        data = self.post("/bonuses", {
            "type": "customer",
            "recipientId": self.customer["id"],
            "amount": 1000,
            "reason": "Referral",
        })
        self.assertTrue(data["smsSent"])
        self.assertEqual(len(self.sms.sent), 1)
        phone, message = self.sms.sent[0]
        self.assertEqual(phone, "08012345678")
        self.assertIn("Referral", message)

    def test_5_sms_failure_keeps_pending_bonus(self):
        """If the SMS provider fails the bonus still exists, pending"""
        # the dependency override reads self.sms per request
        self.sms = FakeSMSClient(fail=True)

        data = self.post("/bonuses", {
            "type": "customer",
            "recipientId": self.customer["id"],
            "amount": 1000,
            "reason": "Referral",
        })
        self.assertTrue(data["success"])
        self.assertFalse(data["smsSent"])
        self.assertEqual(len(self.sms.sent), 1)

        bonuses = self.get("/bonuses")["bonuses"]
        self.assertEqual(len(bonuses), 1)
        self.assertEqual(bonuses[0]["status"], "pending")
        self.assertEqual(bonuses[0]["recipientName"], "Ada Obi")

    def test_6_washer_bonus_sends_no_sms(self):
        washer = self.create_washer()
        data = self.post("/bonuses", {
            "type": "washer",
            "recipientId": washer["id"],
            "amount": 2500,
            "reason": "Most cars washed",
        })
        self.assertNotIn("smsSent", data)
        self.assertEqual(self.sms.sent, [])

    def test_7_recipient_must_exist(self):
        data = self.post("/bonuses", {
            "type": "washer",
            "recipientId": self.customer["id"] + 100,
            "amount": 100,
            "reason": "Nobody",
        }, expected=400)
        self.assertEqual(data["error"], "Recipient not found")

    def test_8_amount_must_be_positive(self):
        self.post("/bonuses", {
            "type": "customer",
            "recipientId": self.customer["id"],
            "amount": 0,
            "reason": "Nothing",
        }, expected=400)

    def test_9_lifecycle(self):
        bonus = self.post("/bonuses", {
            "type": "customer",
            "recipientId": self.customer["id"],
            "amount": 700,
            "reason": "Birthday",
        })["bonus"]
        path = f"/bonuses/{bonus['id']}"

        self.patch(path, {"action": "approve"}, expected=400)
        approved = self.patch(path, {"action": "approve", "approvedBy": 1})["bonus"]
        self.assertEqual(approved["status"], "approved")
        self.assertIsNotNone(approved["approvedAt"])

        paid = self.patch(path, {"action": "pay"})["bonus"]
        self.assertEqual(paid["status"], "paid")
        self.assertIsNotNone(paid["paidAt"])

        response = self.client.delete(f"{self.API}{path}")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Cannot delete a paid bonus")

    def test_10_delete_pending(self):
        bonus = self.post("/bonuses", {
            "type": "customer",
            "recipientId": self.customer["id"],
            "amount": 300,
            "reason": "Oops",
        })["bonus"]
        response = self.client.delete(f"{self.API}/bonuses/{bonus['id']}")
        self.assertEqual(response.status_code, 200)
        self.get(f"/bonuses/{bonus['id']}", expected=404)


class TestWorkerBonuses(ApiTestCase):

    def test_1_requires_worker(self):
        response = self.client.get("/api/worker/bonuses")
        self.assertEqual(response.status_code, 400)
        response = self.client.get("/api/worker/bonuses", params={"workerId": 999})
        self.assertEqual(response.status_code, 404)

    def test_2_summary(self):
        washer = self.create_washer()
        ids = []
        for amount in (1000, 2000, 3000):
            ids.append(self.post("/bonuses", {
                "type": "washer",
                "recipientId": washer["id"],
                "amount": amount,
                "reason": "Great work",
            })["bonus"]["id"])
        self.patch(f"/bonuses/{ids[1]}", {"action": "approve", "approvedBy": 1})
        self.patch(f"/bonuses/{ids[2]}", {"action": "pay"})

        response = self.client.get("/api/worker/bonuses", params={"workerId": washer["id"]})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["worker"]["name"], "Tunde Bello")
        summary = data["summary"]
        self.assertEqual(summary["totalBonuses"], 3)
        self.assertEqual(summary["totalAmount"], 6000)
        self.assertEqual(summary["pendingBonuses"], 1)
        self.assertEqual(summary["pendingAmount"], 1000)
        self.assertEqual(summary["approvedAmount"], 2000)
        self.assertEqual(summary["paidAmount"], 3000)
        self.assertEqual(summary["rejectedBonuses"], 0)

        response = self.client.get("/api/worker/bonuses", params={"workerId": washer["id"], "status": "paid"})
        self.assertEqual(len(response.json()["bonuses"]), 1)


if __name__ == "__main__":
    unittest.main()

"""
Tests for staff accounts, payment requests and tools.
"""
import unittest

from tests.base import ApiTestCase, FakeEmailClient


class TestWashers(ApiTestCase):

    def test_1_create_emails_credentials(self):
        data = self.post("/washers", {
            "name": "Tunde Bello",
            "email": "tunde@example.com",
            "phone": "08098765432",
            "hourlyRate": 500,
        })
        self.assertTrue(data["emailSent"])
        self.assertNotIn("temporaryPassword", data)
        self.assertEqual(data["washer"]["status"], "active")
        self.assertEqual(data["washer"]["totalEarnings"], 0)

        (to_email, name, temp_password), = self.mailer.credentials
        self.assertEqual((to_email, name), ("tunde@example.com", "Tunde Bello"))
        self.assertEqual(len(temp_password), 10)

    def test_2_email_failure_returns_password(self):
        self.mailer = FakeEmailClient(fail=True)
        data = self.post("/washers", {"name": "Tunde", "email": "t@example.com", "phone": "0801"})
        self.assertFalse(data["emailSent"])
        self.assertEqual(data["temporaryPassword"], self.mailer.credentials[0][2])

    def test_3_duplicate_email(self):
        self.create_washer()
        data = self.post("/washers", {"name": "Other", "email": "tunde@example.com", "phone": "0802"}, expected=400)
        self.assertEqual(data["error"], "A user with this email already exists")

    def test_4_status_filter(self):
        self.create_washer(name="Active One", email="a@example.com")
        on_leave = self.create_washer(name="On Leave", email="b@example.com")
        gone = self.create_washer(name="Gone", email="c@example.com")

        self.patch(f"/washers/{on_leave['id']}", {"isAvailable": False})
        response = self.client.delete(f"{self.API}/washers/{gone['id']}")
        self.assertEqual(response.status_code, 200)

        statuses = {w["name"]: w["status"] for w in self.get("/washers")["washers"]}
        self.assertEqual(statuses, {"Active One": "active", "On Leave": "on_leave", "Gone": "inactive"})
        leave = self.get("/washers", status="on_leave")["washers"]
        self.assertEqual([w["name"] for w in leave], ["On Leave"])

    def test_5_earnings_credited_on_payment(self):
        washer = self.create_washer()
        service = self.create_service(price=5000, washer=40, company=60)
        self.create_customer(plate="EARN01")
        self.complete_visit("EARN01", [service["id"]], washer_id=washer["id"], paid=True)

        data = self.get(f"/washers/{washer['id']}")["washer"]
        self.assertEqual(data["totalEarnings"], 2000)


class TestAdmins(ApiTestCase):

    def test_1_permissions_follow_role(self):
        admin = self.create_admin()
        self.assertEqual(admin["role"], "admin")
        self.assertIn("manage_services", admin["permissions"])
        self.assertNotIn("manage_admins", admin["permissions"])

        boss = self.create_admin(email="boss@example.com", role="super_admin")
        self.assertIn("manage_admins", boss["permissions"])

        response = self.client.put(f"{self.API}/admins/{admin['id']}", json={
            "name": "Grace Eze",
            "phone": "08011112222",
            "role": "super_admin",
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn("system_settings", response.json()["admin"]["permissions"])

    def test_2_validation(self):
        payload = {"name": "Grace", "email": "g@example.com", "phone": "0801", "password": "abc"}
        data = self.post("/admins", payload, expected=400)
        self.assertEqual(data["error"], "Password must be at least 6 characters long")

        payload.update(password="secret1", nextOfKin=[{"name": "Mum", "phone": " ", "address": "Lagos"}])
        data = self.post("/admins", payload, expected=400)
        self.assertEqual(data["error"], "Next of kin name, phone and address are required")

        payload["nextOfKin"][0]["phone"] = "0803"
        admin = self.post("/admins", payload)["admin"]
        self.assertEqual(admin["nextOfKin"], [{"name": "Mum", "phone": "0803", "address": "Lagos"}])

    def test_3_deactivate(self):
        admin = self.create_admin()
        response = self.client.delete(f"{self.API}/admins/{admin['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertFalse(self.get(f"/admins/{admin['id']}")["admin"]["isActive"])
        self.get("/admins/999", expected=404)


class TestPaymentRequests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.washer = self.create_washer()

    def request(self, amount, expected=201, **extra):
        payload = {"washerId": self.washer["id"], "requestedAmount": amount, **extra}
        return self.post("/payment-requests", payload, expected=expected)

    def earn(self, price):
        service = self.create_service(name=f"Wash {price}", price=price, washer=50, company=50)
        self.create_customer(plate=f"PAY{int(price)}")
        self.complete_visit(f"PAY{int(price)}", [service["id"]], washer_id=self.washer["id"], paid=True)

    def test_1_request_within_earnings(self):
        self.earn(6000)
        data = self.request(2000, materialDeductions=500, toolDeductions=500)["paymentRequest"]
        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["totalEarnings"], 3000)
        self.assertEqual(data["washerName"], "Tunde Bello")

    def test_2_request_exceeding_earnings(self):
        self.earn(6000)
        data = self.request(2600, materialDeductions=500, expected=400)
        self.assertEqual(
            data["error"],
            "Requested amount plus deductions (3,100.00) exceeds available earnings (3,000.00)",
        )

    def test_3_one_pending_request(self):
        self.request(1000, isAdvance=True)
        data = self.request(500, isAdvance=True, expected=400)
        self.assertEqual(data["error"], "You already have a pending payment request")

    def test_4_advance_limits(self):
        data = self.request(2500, isAdvance=True, expected=400)
        self.assertEqual(data["error"], "Advance amount cannot exceed 2,000")

        self.earn(6000)
        data = self.request(500, isAdvance=True, expected=400)
        self.assertEqual(data["error"], "Advances are only available when earnings are 2,000 or less")

    def test_5_review_and_delete(self):
        pending = self.request(1500, isAdvance=True)["paymentRequest"]
        path = f"/payment-requests/{pending['id']}"

        approved = self.patch(path, {"status": "approved", "reviewedBy": 1})["paymentRequest"]
        self.assertEqual(approved["approvedAmount"], 1500)
        self.assertIsNotNone(approved["reviewedAt"])

        response = self.client.delete(f"{self.API}{path}")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Only pending payment requests can be deleted")

        paid = self.patch(path, {"status": "paid", "paymentMethod": "cash"})["paymentRequest"]
        self.assertIsNotNone(paid["paidAt"])
        self.patch(path, {"status": "rejected"}, expected=400)

    def test_6_delete_pending(self):
        pending = self.request(100, isAdvance=True)["paymentRequest"]
        response = self.client.delete(f"{self.API}/payment-requests/{pending['id']}")
        self.assertEqual(response.status_code, 200)
        self.get(f"/payment-requests/{pending['id']}", expected=404)


class TestTools(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.washer = self.create_washer()
        self.post("/worker-tools", {"name": "Bucket", "toolType": "equipment", "quantity": 3, "replacementCost": 1200})

    def assign(self, quantity, expected=201, name="Bucket"):
        payload = {"washerId": self.washer["id"], "toolName": name, "toolType": "equipment", "quantity": quantity}
        return self.post("/washer-tools", payload, expected=expected)

    def stock(self):
        return self.get("/worker-tools")["tools"][0]["quantity"]

    def test_1_restock_adds_quantity(self):
        self.post("/worker-tools", {"name": "Bucket", "toolType": "equipment", "quantity": 2})
        self.assertEqual(self.stock(), 5)

    def test_2_assign_and_return(self):
        assignment = self.assign(2, name="bucket")["tool"]
        self.assertEqual(assignment["toolName"], "Bucket")
        self.assertEqual(self.stock(), 1)

        data = self.assign(2, expected=400)
        self.assertEqual(data["error"], "Insufficient quantity for Bucket. Available: 1, Requested: 2")

        summary = self.get("/washer-tools", washerId=self.washer["id"])["summary"]
        self.assertEqual(summary, {"totalAssigned": 1, "outstanding": 1, "outstandingValue": 2400})

        response = self.client.put(f"{self.API}/washer-tools", json={"washerToolId": assignment["id"], "isReturned": True})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["tool"]["isReturned"])
        self.assertEqual(self.stock(), 3)

        response = self.client.put(f"{self.API}/washer-tools", json={"washerToolId": assignment["id"], "isReturned": True})
        self.assertEqual(response.status_code, 400)

    def test_3_unknown_tool(self):
        self.assign(1, name="Hose", expected=404)

    def test_4_tool_charges(self):
        charge = self.post("/tool-charges", {
            "toolName": "Bucket",
            "workerId": self.washer["id"],
            "chargeAmount": 1200,
            "reason": "Lost",
        })["toolCharge"]
        self.assertEqual(charge["workerName"], "Tunde Bello")
        self.assertEqual(charge["status"], "pending")

        self.patch(f"/tool-charges/{charge['id']}", {"status": "paid"})
        self.post("/tool-charges", {
            "toolName": "Brush",
            "workerId": self.washer["id"],
            "chargeAmount": 300,
            "reason": "Damaged",
        })

        data = self.get("/tool-charges")
        self.assertEqual(data["summary"], {"totalCharges": 2, "totalAmount": 1500, "pendingAmount": 300})
        self.post("/tool-charges", {"toolName": "X", "workerId": 999, "chargeAmount": 1, "reason": "r"}, expected=404)


if __name__ == "__main__":
    unittest.main()

"""
Tests for check-ins: commission split, passcodes and washer earnings.
"""
import unittest

from tests.base import ApiTestCase


class TestCheckIns(ApiTestCase):

    def test_1_create_check_in(self):
        """Check-ins total their services and start pending"""
        wash = self.create_service(name="Wash", price=3000)
        vacuum = self.create_service(name="Vacuum", price=1500, category="vacuum")
        self.create_customer(plate="KJA100")

        data = self.post("/check-ins", {
            "licensePlate": "kja100",
            "vehicleType": "sedan",
            "washType": "delayed",
            "services": [wash["id"], vacuum["id"]],
        })
        check_in = data["checkIn"]
        self.assertEqual(check_in["status"], "pending")
        self.assertEqual(check_in["paymentStatus"], "pending")
        self.assertEqual(check_in["totalAmount"], 4500)
        self.assertEqual(len(check_in["services"]), 2)
        self.assertEqual(len(check_in["passcode"]), 4)
        self.assertIsNotNone(check_in["customerId"])

    def test_2_requires_services(self):
        payload = {"licensePlate": "X1", "vehicleType": "suv", "washType": "instant", "services": []}
        self.post("/check-ins", payload, expected=400)
        payload["services"] = [12345]
        self.post("/check-ins", payload, expected=400)

    def test_3_completion_splits_income(self):
        """Completing a check-in records the washer and company shares"""
        wash = self.create_service(name="Wash", price=5000, washer=40, company=60)
        polish = self.create_service(name="Polish", price=2000, washer=30, company=70)
        washer = self.create_washer()

        check_in = self.complete_visit("NEW001", [wash["id"], polish["id"]], washer_id=washer["id"])
        self.assertEqual(check_in["status"], "completed")
        self.assertAlmostEqual(check_in["washerIncome"], 2600)
        self.assertAlmostEqual(check_in["companyIncome"], 4400)
        self.assertIsNotNone(check_in["actualCompletionTime"])

    def test_4_missing_service_is_skipped(self):
        """A service deleted from the catalog contributes no income"""
        wash = self.create_service(name="Wash", price=5000)
        extra = self.create_service(name="Extra", price=1000)
        check_in = self.check_in("GONE01", [wash["id"], extra["id"]])
        response = self.client.delete(f"{self.API}/services/{extra['id']}")
        self.assertEqual(response.status_code, 200)

        updated = self.patch(f"/check-ins/{check_in['id']}", {"status": "completed"})["checkIn"]
        self.assertAlmostEqual(updated["companyIncome"], 3000)
        self.assertAlmostEqual(updated["washerIncome"], 2000)
        self.assertEqual(updated["totalAmount"], 6000)

    def test_5_passcode_needed_for_delayed_wash(self):
        wash = self.create_service()
        check_in = self.check_in("PASS01", [wash["id"]], wash_type="delayed")

        data = self.patch(f"/check-ins/{check_in['id']}", {"status": "completed"}, expected=400)
        self.assertFalse(data["success"])
        data = self.patch(f"/check-ins/{check_in['id']}", {"status": "completed", "passcode": "wrong"}, expected=400)

        data = self.patch(
            f"/check-ins/{check_in['id']}",
            {"status": "completed", "passcode": check_in["passcode"]},
        )
        self.assertEqual(data["checkIn"]["status"], "completed")

    def test_6_washer_can_complete_without_passcode(self):
        wash = self.create_service()
        check_in = self.check_in("PASS02", [wash["id"]], wash_type="delayed")
        data = self.patch(f"/check-ins/{check_in['id']}", {"status": "completed", "completedByWasher": True})
        self.assertEqual(data["checkIn"]["status"], "completed")

    def test_7_payment_credits_washer(self):
        """Taking payment adds the washer's share to their earnings once"""
        wash = self.create_service(price=5000)
        washer = self.create_washer()
        check_in = self.complete_visit("PAY001", [wash["id"]], washer_id=washer["id"])

        data = self.patch(f"/check-ins/{check_in['id']}", {"paymentStatus": "paid", "paymentMethod": "pos"})
        self.assertEqual(data["checkIn"]["status"], "paid")
        self.assertEqual(data["checkIn"]["paymentMethod"], "pos")
        self.assertIsNotNone(data["checkIn"]["paidAt"])

        self.patch(f"/check-ins/{check_in['id']}", {"paymentStatus": "paid"})
        profile = self.get(f"/washers/{washer['id']}")["washer"]
        self.assertAlmostEqual(profile["totalEarnings"], 2000)

    def test_8_customer_totals_cached(self):
        wash = self.create_service(price=2500)
        customer = self.create_customer(plate="TOT001")
        self.complete_visit("TOT001", [wash["id"]])

        data = self.get("/customers", search="TOT001")
        self.assertEqual(data["customers"][0]["id"], customer["id"])
        self.assertEqual(data["customers"][0]["totalVisits"], 1)
        self.assertEqual(data["customers"][0]["totalSpent"], 2500)

    def test_9_invalid_status(self):
        wash = self.create_service()
        check_in = self.check_in("BAD001", [wash["id"]])
        self.patch(f"/check-ins/{check_in['id']}", {"status": "washing"}, expected=400)
        self.get("/check-ins/9999", expected=404)

    def test_10_list_filters(self):
        wash = self.create_service()
        self.check_in("LST001", [wash["id"]])
        self.complete_visit("LST002", [wash["id"]])
        data = self.get("/check-ins", status="completed")
        self.assertEqual([c["licensePlate"] for c in data["checkIns"]], ["LST002"])
        data = self.get("/check-ins", search="lst")
        self.assertEqual(len(data["checkIns"]), 2)

    def test_11_status_paid_takes_payment(self):
        """Moving a check-in to paid records the payment and credits the washer"""
        wash = self.create_service(price=5000)
        washer = self.create_washer()
        check_in = self.complete_visit("PAY002", [wash["id"]], washer_id=washer["id"])

        data = self.patch(f"/check-ins/{check_in['id']}", {"status": "paid"})
        self.assertEqual(data["checkIn"]["status"], "paid")
        self.assertEqual(data["checkIn"]["paymentStatus"], "paid")
        self.assertIsNotNone(data["checkIn"]["paidAt"])

        self.patch(f"/check-ins/{check_in['id']}", {"status": "paid"})
        profile = self.get(f"/washers/{washer['id']}")["washer"]
        self.assertAlmostEqual(profile["totalEarnings"], 2000)

    def test_12_send_key_code_sms(self):
        wash = self.create_service()
        self.create_customer(plate="KEY001")
        admin = self.create_admin()
        check_in = self.check_in("KEY001", [wash["id"]], wash_type="delayed")
        path = f"{self.API}/check-ins/{check_in['id']}/send-sms"
        headers = {"X-Admin-ID": str(admin["id"])}

        response = self.client.post(path, json={"phoneNumber": "08012345678"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Admin ID not provided in headers")
        response = self.client.post(path, json={}, headers=headers)
        self.assertEqual(response.json()["error"], "Phone number is required")
        response = self.client.post(path, json={"phoneNumber": "080"}, headers={"X-Admin-ID": "999"})
        self.assertEqual(response.status_code, 404)

        response = self.client.post(path, json={"phoneNumber": "08012345678"}, headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["message"], "Key code sent successfully via SMS")
        phone, message = self.sms.sent[-1]
        self.assertEqual(phone, "08012345678")
        self.assertIn(f"Hi Ada Obi! Your car wash key code is: {check_in['passcode']}.", message)

        self.sms.fail = True
        response = self.client.post(path, json={"phoneNumber": "08012345678"}, headers=headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["errorCode"], "SMS_SEND_FAILED")
        self.assertFalse(response.json()["success"])


if __name__ == "__main__":
    unittest.main()

"""
Shared setup for API tests: a fresh SQLite schema per test and recording
notification clients in place of the real providers.
"""
import os
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine

import carwash.models  # noqa: F401
from carwash.database import Base
from carwash.main import app
from carwash.notifications.email import EmailError, get_email_client
from carwash.notifications.sms import SMSError, get_sms_client

SYNC_DATABASE_URL = os.environ["DATABASE_URL"].replace("+aiosqlite", "")


class FakeSMSClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def send(self, phone_number, message):
        self.sent.append((phone_number, message))
        if self.fail:
            raise SMSError("provider unavailable")
        return {"status": "success"}


class FakeEmailClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.credentials = []

    def send_credentials(self, to_email, name, temp_password, login_url):
        self.credentials.append((to_email, name, temp_password))
        if self.fail:
            raise EmailError("provider unavailable")


class ApiTestCase(unittest.TestCase):
    API = "/api/admin"

    def setUp(self):
        self.engine = create_engine(SYNC_DATABASE_URL)
        Base.metadata.drop_all(self.engine)
        Base.metadata.create_all(self.engine)

        self.sms = FakeSMSClient()
        self.mailer = FakeEmailClient()
        app.dependency_overrides[get_sms_client] = lambda: self.sms
        app.dependency_overrides[get_email_client] = lambda: self.mailer
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    # Request helpers

    def post(self, path, payload, expected=201):
        response = self.client.post(f"{self.API}{path}", json=payload)
        self.assertEqual(response.status_code, expected, response.text)
        return response.json()

    def get(self, path, expected=200, **params):
        response = self.client.get(f"{self.API}{path}", params=params)
        self.assertEqual(response.status_code, expected, response.text)
        return response.json()

    def patch(self, path, payload, expected=200):
        response = self.client.patch(f"{self.API}{path}", json=payload)
        self.assertEqual(response.status_code, expected, response.text)
        return response.json()

    # Fixtures

    def create_service(self, name="Full Wash", price=5000.0, washer=40.0, company=60.0, **extra):
        payload = {
            "name": name,
            "category": "exterior",
            "basePrice": price,
            "estimatedDuration": 30,
            "washerCommissionPercentage": washer,
            "companyCommissionPercentage": company,
            **extra,
        }
        return self.post("/services", payload)["service"]

    def create_customer(self, name="Ada Obi", phone="08012345678", plate="abc123xy"):
        payload = {
            "name": name,
            "phone": phone,
            "licensePlate": plate,
            "vehicleType": "sedan",
            "vehicleColor": "black",
        }
        return self.post("/customers", payload)["customer"]

    def create_washer(self, name="Tunde Bello", email="tunde@example.com"):
        payload = {"name": name, "email": email, "phone": "08098765432", "hourlyRate": 500}
        return self.post("/washers", payload)["washer"]

    def create_admin(self, email="admin@example.com", role="admin"):
        payload = {"name": "Grace Eze", "email": email, "phone": "08011112222", "password": "secret1", "role": role}
        return self.post("/admins", payload)["admin"]

    def create_item(self, name="Car Shampoo", stock=10, min_level=5, max_level=100, cost=1500.0):
        payload = {
            "name": name,
            "category": "chemicals",
            "currentStock": stock,
            "minStockLevel": min_level,
            "maxStockLevel": max_level,
            "unit": "bottle",
            "costPerUnit": cost,
        }
        return self.post("/inventory", payload)["item"]

    def check_in(self, plate, service_ids, washer_id=None, wash_type="instant"):
        payload = {
            "licensePlate": plate,
            "vehicleType": "sedan",
            "washType": wash_type,
            "services": service_ids,
            "assignedWasherId": washer_id,
        }
        return self.post("/check-ins", payload)["checkIn"]

    def complete_visit(self, plate, service_ids, washer_id=None, paid=False):
        """Check a vehicle in and complete it; optionally take payment too."""
        check_in = self.check_in(plate, service_ids, washer_id=washer_id)
        update = {"status": "completed"}
        if paid:
            update.update({"paymentStatus": "paid", "paymentMethod": "cash"})
        return self.patch(f"/check-ins/{check_in['id']}", update)["checkIn"]

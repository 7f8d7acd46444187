"""
Tests for milestones and customer achievements.
"""
from datetime import datetime, timedelta, timezone
import unittest
from unittest.mock import patch

from carwash.core import achievements
from carwash.models.check_in import CheckIn
from tests.base import ApiTestCase


class TestMilestones(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.service = self.create_service(price=2000)
        self.customer = self.create_customer(plate="MIL001")

    def create_milestone(self, name="Five Visits", type="visits", operator=">=", value=5, reward=None, **extra):
        payload = {
            "name": name,
            "description": f"{name} milestone",
            "type": type,
            "condition": {"operator": operator, "value": value},
            "reward": reward,
            "createdBy": 1,
            **extra,
        }
        return self.post("/milestones", payload)["milestone"]

    def visits(self, count):
        for _ in range(count):
            self.complete_visit("MIL001", [self.service["id"]])

    def check(self, expected=200, **payload):
        payload.setdefault("customerId", self.customer["id"])
        response = self.client.post(f"{self.API}/milestone-achievements", json=payload)
        self.assertEqual(response.status_code, expected, response.text)
        return response.json()

    def test_1_create_and_list(self):
        milestone = self.create_milestone()
        self.assertEqual(milestone["condition"], {"operator": ">=", "value": 5, "period": "all_time"})
        self.assertTrue(milestone["isActive"])

        self.create_milestone(name="Big Spender", type="spending", value=50000, isActive=False)
        data = self.get("/milestones", isActive="true")
        self.assertEqual([m["name"] for m in data["milestones"]], ["Five Visits"])
        data = self.get("/milestones", type="spending")
        self.assertEqual(len(data["milestones"]), 1)

    def test_2_condition_validated(self):
        payload = {
            "name": "Broken",
            "description": "No operator",
            "type": "visits",
            "condition": {"value": 3},
            "createdBy": 1,
        }
        data = self.post("/milestones", payload, expected=400)
        self.assertEqual(data["error"], "Invalid condition format")

    def test_3_threshold(self):
        """>= 5 is met at five visits, not at four"""
        self.visits(4)
        self.create_milestone()
        self.assertEqual(self.check()["newAchievements"], 0)

        # the fifth completed visit triggers the check itself
        self.visits(1)
        achievements = self.get("/milestone-achievements", customerId=self.customer["id"])["achievements"]
        self.assertEqual(len(achievements), 1)
        self.assertEqual(achievements[0]["achievedValue"], 5)
        data = self.check()
        self.assertEqual(data["newAchievements"], 0)
        self.assertEqual(data["message"], "0 new milestone(s) achieved")
        self.assertEqual(data["customerStats"]["totalVisits"], 5)

    def test_4_check_is_idempotent(self):
        """Checking twice, or with forceCheck, records the achievement once"""
        self.visits(1)
        self.create_milestone(name="First Visit", value=1)

        self.assertEqual(self.check()["newAchievements"], 1)
        self.assertEqual(self.check()["newAchievements"], 0)
        forced = self.check(forceCheck=True)
        self.assertEqual(forced["newAchievements"], 0)
        self.assertEqual(len(forced["qualifiedMilestoneIds"]), 1)

        data = self.get("/milestone-achievements", customerId=self.customer["id"])
        self.assertEqual(data["total"], 1)
        self.assertEqual(data["achievements"][0]["milestoneName"], "First Visit")
        self.assertEqual(data["achievements"][0]["customerName"], "Ada Obi")

    def test_5_spending_milestone(self):
        self.visits(1)
        self.create_milestone(name="Spent 4000", type="spending", value=4000)
        self.assertEqual(self.check()["newAchievements"], 0)
        self.visits(1)
        achievements = self.get("/milestone-achievements")["achievements"]
        self.assertEqual([a["achievedValue"] for a in achievements], [4000])

    def test_6_completing_a_check_in_checks_milestones(self):
        self.create_milestone(name="First Visit", value=1)
        self.visits(1)
        data = self.get("/milestone-achievements", customerId=self.customer["id"])
        self.assertEqual(data["total"], 1)

    def test_7_bonus_reward_issues_bonus_and_sms(self):
        self.visits(2)
        self.create_milestone(
            name="Two Visits",
            value=2,
            reward={"type": "bonus", "value": 1000, "description": "Thanks for coming back"},
        )
        self.assertEqual(self.check()["newAchievements"], 1)

        bonuses = self.get("/bonuses")["bonuses"]
        self.assertEqual(len(bonuses), 1)
        self.assertEqual(bonuses[0]["amount"], 1000)
        self.assertEqual(bonuses[0]["milestone"], "Two Visits")
        self.assertEqual(bonuses[0]["status"], "pending")
        self.assertEqual(len(self.sms.sent), 1)

    def test_8_check_all_customers(self):
        self.visits(1)
        other = self.create_customer(name="Bola", phone="08022223333", plate="MIL002")
        self.complete_visit("MIL002", [self.service["id"]])
        self.create_milestone(name="First Visit", value=1)

        data = self.check(customerId=None, allCustomers=True)
        self.assertEqual(data["customersChecked"], 2)
        self.assertEqual(data["newAchievements"], 2)
        self.assertEqual(data["failed"], [])
        self.assertEqual(self.get("/milestone-achievements", customerId=other["id"])["total"], 1)

    def test_9_customer_required(self):
        self.check(expected=400, customerId=None)
        self.check(expected=404, customerId=9999)

    def test_10_qualifying_customers(self):
        self.visits(3)
        self.create_customer(name="Bola", phone="08022223333", plate="MIL002")
        milestone = self.create_milestone(name="Three Visits", value=3)

        response = self.client.put(f"{self.API}/milestone-achievements", json={"milestoneId": milestone["id"]})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([c["name"] for c in data["customers"]], ["Ada Obi"])
        self.assertEqual(self.get("/milestone-achievements")["total"], 0)

    def test_11_claim_reward(self):
        self.visits(1)
        self.create_milestone(name="First Visit", value=1)
        self.check()
        achievement = self.get("/milestone-achievements")["achievements"][0]
        path = f"/milestone-achievements/{achievement['id']}"

        self.patch(path, {"notes": "no admin"}, expected=400)
        claimed = self.patch(path, {"claimedBy": 1, "notes": "Free wash given"})["achievement"]
        self.assertTrue(claimed["rewardClaimed"])
        self.assertIsNotNone(claimed["claimedAt"])
        self.patch(path, {"claimedBy": 1}, expected=400)

        unclaimed = self.get("/milestone-achievements", rewardClaimed="false")
        self.assertEqual(unclaimed["total"], 0)
        self.get("/milestone-achievements/999", expected=404)

    def test_12_update_and_delete(self):
        milestone = self.create_milestone()
        response = self.client.put(
            f"{self.API}/milestones/{milestone['id']}",
            json={"condition": {"operator": ">", "value": 10}, "isActive": False},
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()["milestone"]
        self.assertEqual(updated["condition"]["operator"], ">")
        self.assertFalse(updated["isActive"])

        response = self.client.delete(f"{self.API}/milestones/{milestone['id']}")
        self.assertEqual(response.status_code, 200)
        self.get(f"/milestones/{milestone['id']}", expected=404)

    def test_13_sweep_continues_after_a_failing_customer(self):
        """One customer's failure is rolled back; the others keep their bonus and SMS"""
        self.visits(1)
        other = self.create_customer(name="Bola", phone="08022223333", plate="MIL002")
        self.complete_visit("MIL002", [self.service["id"]])
        self.create_milestone(
            name="First Visit",
            value=1,
            reward={"type": "bonus", "value": 500, "description": "Welcome bonus"},
        )

        original = achievements.check_customer_milestones

        async def fail_for_bola(db, customer, force_check=False):
            check = await original(db, customer, force_check=force_check)
            if customer.name == "Bola":
                raise RuntimeError("database hiccup")
            return check

        with patch.object(achievements, "check_customer_milestones", fail_for_bola):
            data = self.check(customerId=None, allCustomers=True, forceCheck=True)

        self.assertEqual(data["customersChecked"], 1)
        self.assertEqual(data["newAchievements"], 1)
        self.assertEqual(data["failed"], [other["id"]])
        self.assertNotIn("notices", data)
        self.assertEqual([phone for phone, _ in self.sms.sent], ["08012345678"])
        self.assertIn("Welcome bonus", self.sms.sent[0][1])

        self.assertEqual(self.get("/milestone-achievements", customerId=other["id"])["total"], 0)
        bonuses = self.get("/bonuses")["bonuses"]
        self.assertEqual([b["recipientId"] for b in bonuses], [self.customer["id"]])

    def test_14_weekly_milestone_ignores_older_visits(self):
        first = self.complete_visit("MIL001", [self.service["id"]])
        self.complete_visit("MIL001", [self.service["id"]])
        with self.engine.begin() as conn:
            conn.execute(
                CheckIn.__table__.update()
                .where(CheckIn.__table__.c.id == first["id"])
                .values(check_in_time=datetime.now(timezone.utc) - timedelta(days=10))
            )

        weekly = self.create_milestone(
            name="Twice This Week", value=2, condition={"operator": ">=", "value": 2, "period": "weekly"}
        )
        ever = self.create_milestone(name="Twice Ever", value=2)
        self.assertEqual(weekly["condition"]["period"], "weekly")

        data = self.check()
        self.assertEqual(data["newAchievements"], 1)
        self.assertEqual(data["qualifiedMilestoneIds"], [ever["id"]])

        # a second visit inside the window completes the weekly milestone
        self.visits(1)
        data = self.get("/milestone-achievements", customerId=self.customer["id"])
        names = sorted(a["milestoneName"] for a in data["achievements"])
        self.assertEqual(names, ["Twice Ever", "Twice This Week"])

    def test_15_null_condition_rejected(self):
        milestone = self.create_milestone()
        response = self.client.put(f"{self.API}/milestones/{milestone['id']}", json={"condition": None})
        self.assertEqual(response.status_code, 400, response.text)
        self.assertEqual(response.json()["error"], "condition cannot be null")
        self.assertEqual(self.get(f"/milestones/{milestone['id']}")["milestone"]["condition"]["value"], 5)


if __name__ == "__main__":
    unittest.main()

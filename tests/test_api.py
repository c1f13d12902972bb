import os
import unittest

os.environ["REMINDER_LOOP_ENABLED"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from helpers import RecordingSender, make_engine  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.domain.appointments.router import get_notification_sender  # noqa: E402
from app.domain.scheduling.router import get_availability_service  # noqa: E402
from app.main import app  # noqa: E402

DAY = "2030-03-04"


class TestBookingApi(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.sender = RecordingSender()

        def override_get_db():
            db = Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_notification_sender] = lambda: self.sender
        self.client = TestClient(app, raise_server_exceptions=False)

        self.headers = {"X-Tenant-Id": "kc"}
        self.assertEqual(
            self.client.post("/tenants", json={"tenant_key": "kc", "business_name": "KC Lash"}).status_code, 201
        )
        self.professional_id = self.client.post(
            "/professionals", json={"name": "Ana"}, headers=self.headers
        ).json()["id"]
        self.lash_id = self.client.post(
            "/services", json={"name": "Lash lifting", "duration": 60, "price": 120.0}, headers=self.headers
        ).json()["id"]
        response = self.client.put(
            f"/professionals/{self.professional_id}/services",
            json={"service_ids": [self.lash_id]},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)

    def tearDown(self):
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def book(self, start="10:00", **overrides):
        body = {
            "professional_id": self.professional_id,
            "service_ids": [self.lash_id],
            "date": DAY,
            "start_time": start,
            "client_name": "Joana",
            "client_phone": "+55 (11) 98888-7777",
        }
        body.update(overrides)
        return self.client.post("/appointments", json=body, headers=self.headers)

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "healthy"})

    def test_slots(self):
        response = self.client.get(
            "/availability/slots",
            params={"professional_id": self.professional_id, "date": DAY, "service_ids": [self.lash_id]},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200)
        slots = response.json()["slots"]
        self.assertEqual(slots[0], "09:00")
        self.assertEqual(slots[-1], "17:00")

    def test_booking_round_trip(self):
        response = self.book()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["end_time"], "11:00:00")
        self.assertEqual(body["client_phone"], "+5511988887777")
        self.assertEqual(body["professional_name"], "Ana")
        self.assertEqual(body["total_price"], 120.0)
        self.assertEqual(len(self.sender.sent), 1)

        slots = self.client.get(
            "/availability/slots",
            params={"professional_id": self.professional_id, "date": DAY},
            headers=self.headers,
        ).json()["slots"]
        self.assertNotIn("10:00", slots)
        self.assertNotIn("10:30", slots)
        self.assertIn("11:00", slots)

    def test_conflict_is_409_with_details(self):
        self.book(client_name="Maria")
        response = self.book("10:30")

        self.assertEqual(response.status_code, 409)
        body = response.json()
        self.assertEqual(body["status"], 409)
        self.assertEqual(body["kind"], "appointment_conflict")
        self.assertEqual(body["existing_client"], "Maria")
        self.assertEqual(body["existing"], {"start": "10:00", "end": "11:00"})
        self.assertEqual(body["requested"], {"start": "10:30", "end": "11:30"})
        self.assertIn("timestamp", body)

    def test_business_rule_is_400(self):
        response = self.book("17:30")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["kind"], "business")

    def test_missing_tenant_header(self):
        response = self.client.get("/appointments")
        self.assertEqual(response.status_code, 400)
        self.assertIn("X-Tenant-Id", response.json()["message"])

    def test_not_found_is_404(self):
        response = self.client.get("/appointments/999", headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["resource"], "Appointment")

        response = self.client.delete("/appointments/999", headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.sender.sent, [])

    def test_cancel(self):
        appointment_id = self.book().json()["id"]
        self.assertEqual(self.client.delete(f"/appointments/{appointment_id}", headers=self.headers).status_code, 204)
        self.assertEqual(self.client.get("/appointments", headers=self.headers).json(), [])

    def test_schema_violation_is_400(self):
        response = self.book(service_ids=[])
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["message"], "validation failed")
        self.assertIn("service_ids", body["errors"])

    def test_start_time_with_seconds_is_400(self):
        response = self.book("10:00:30")
        self.assertEqual(response.status_code, 400)
        self.assertIn("start_time", response.json()["errors"])
        self.assertEqual(self.client.get("/appointments", headers=self.headers).json(), [])

    def test_duplicate_and_forbidden_blocks(self):
        self.client.post("/tenants", json={"tenant_key": "other", "business_name": "Other"})
        created = self.client.post(
            "/blocked-days/specific", json={"date": DAY, "reason": "Holiday"}, headers=self.headers
        )
        self.assertEqual(created.status_code, 201)

        duplicate = self.client.post(
            "/blocked-days/specific", json={"date": DAY, "reason": "Holiday"}, headers=self.headers
        )
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(duplicate.json()["kind"], "duplicate_block")

        forbidden = self.client.delete(
            f"/blocked-days/{created.json()['id']}", headers={"X-Tenant-Id": "other"}
        )
        self.assertEqual(forbidden.status_code, 403)

    def test_invalid_interval_block_is_400(self):
        response = self.client.post(
            "/blocked-time-slots/specific",
            json={"date": DAY, "start_time": "13:00", "end_time": "12:00", "reason": "Lunch"},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["kind"], "invalid_interval")

    def test_unexpected_error_is_500(self):
        def broken_service():
            raise RuntimeError("database went away")

        app.dependency_overrides[get_availability_service] = broken_service
        response = self.client.get(
            "/availability/slots",
            params={"professional_id": self.professional_id, "date": DAY},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["message"], "internal server error")


if __name__ == "__main__":
    unittest.main()

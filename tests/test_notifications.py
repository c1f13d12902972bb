import json
import unittest
from datetime import date, time

import httpx

from app.models import Appointment, Service
from app.services.notification_service import build_payload, format_amount, notify
from app.services.whatsapp_service import NotificationKind, WhatsAppSender


def make_appointment(**overrides):
    data = dict(
        id=7,
        tenant_id="KC",
        professional_id=1,
        date=date(2030, 3, 4),
        start_time=time(9, 5),
        end_time=time(10, 35),
        client_name="Joana",
        client_phone="+5511988887777",
    )
    data.update(overrides)
    appointment = Appointment(**data)
    appointment.services = [
        Service(id=1, tenant_id="KC", name="Lash lifting", duration=60, price=120.0),
        Service(id=2, tenant_id="KC", name="Brow design", duration=30, price=5.5),
    ]
    return appointment


class TestPayload(unittest.TestCase):
    def test_format_amount(self):
        self.assertEqual(format_amount(12.5), "R$ 12,50")
        self.assertEqual(format_amount(0), "R$ 0,00")

    def test_build_payload(self):
        payload = build_payload(make_appointment())
        self.assertEqual(
            payload.model_dump(),
            {
                "phone": "5511988887777",
                "clientName": "Joana",
                "date": "04/03/2030",
                "time": "09:05",
                "serviceNames": "Lash lifting, Brow design",
                "tenantId": "kc",
                "amount": "R$ 125,50",
            },
        )

    def test_phone_without_plus_kept(self):
        self.assertEqual(build_payload(make_appointment(client_phone="5511988887777")).phone, "5511988887777")


class TestWhatsAppSender(unittest.TestCase):
    def setUp(self):
        self.requests = []

    def sender(self, status_code=200):
        def handler(request):
            self.requests.append(request)
            return httpx.Response(status_code, json={"ok": status_code < 400})

        return WhatsAppSender(base_url="http://gateway.test/whatsapp/", transport=httpx.MockTransport(handler))

    def test_endpoints_per_kind(self):
        sender = self.sender()
        payload = build_payload(make_appointment())
        for kind in NotificationKind:
            self.assertTrue(sender.send(kind, payload))

        self.assertEqual(
            [r.url.path for r in self.requests],
            ["/whatsapp/agendamento", "/whatsapp/lembrete", "/whatsapp/cancelamento"],
        )
        self.assertTrue(all(r.method == "POST" for r in self.requests))
        self.assertEqual(json.loads(self.requests[0].content)["clientName"], "Joana")

    def test_gateway_error_status(self):
        self.assertFalse(self.sender(500).send(NotificationKind.REMINDER, build_payload(make_appointment())))

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        sender = WhatsAppSender(base_url="http://gateway.test", transport=httpx.MockTransport(handler))
        self.assertFalse(sender.send(NotificationKind.REMINDER, build_payload(make_appointment())))


class TestNotify(unittest.TestCase):
    def test_sender_exception_is_swallowed(self):
        class Exploding:
            def send(self, kind, payload):
                raise RuntimeError("boom")

        self.assertFalse(notify(Exploding(), NotificationKind.CANCELLATION, make_appointment()))

    def test_delivery_result_returned(self):
        class Accepting:
            def send(self, kind, payload):
                return True

        self.assertTrue(notify(Accepting(), NotificationKind.BOOKING_CREATED, make_appointment()))


if __name__ == "__main__":
    unittest.main()

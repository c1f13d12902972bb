import asyncio
import unittest
from datetime import datetime, timedelta
from unittest import mock

from helpers import RecordingSender, SalonTestCase, hm

from app.domain.tenants.repository import ProfessionalRepository, TenantRepository
from app.models import Appointment
from app.reminders import reminder_loop, run_reminder_sweep
from app.services.whatsapp_service import NotificationKind


class TestReminderSweep(SalonTestCase):
    def setUp(self):
        super().setUp()
        self.now = datetime.combine(self.day, hm("09:00"))

    def sweep(self, sender=None, now=None):
        return run_reminder_sweep(
            self.db, sender=sender or self.sender, now=now or self.now, lookahead=timedelta(hours=2)
        )

    def reminded_clients(self):
        return [payload.clientName for _, payload in self.sender.sent]

    def test_window_bounds_are_inclusive(self):
        self.add_appointment(hm("08:30"), hm("09:00"), client="Past")
        self.add_appointment(hm("09:00"), hm("09:30"), client="Now")
        self.add_appointment(hm("11:00"), hm("11:30"), client="Limit")
        self.add_appointment(hm("11:30"), hm("12:00"), client="Later")

        summary = self.sweep()

        self.assertEqual(self.reminded_clients(), ["Now", "Limit"])
        self.assertEqual(set(self.sender.kinds()), {NotificationKind.REMINDER})
        self.assertEqual(summary["candidates"], 2)
        self.assertEqual(summary["sent"], 2)

    def test_other_dates_ignored(self):
        self.add_appointment(hm("10:00"), hm("10:30"), day=self.day + timedelta(days=1), client="Tomorrow")
        self.add_appointment(hm("10:00"), hm("10:30"), day=self.day - timedelta(days=1), client="Yesterday")
        self.sweep()
        self.assertEqual(self.sender.sent, [])

    def test_window_crossing_midnight(self):
        self.add_appointment(hm("00:30"), hm("01:00"), day=self.day + timedelta(days=1), client="Night owl")
        self.sweep(now=datetime.combine(self.day, hm("23:00")))
        self.assertEqual(self.reminded_clients(), ["Night owl"])

    def test_reminder_sent_once(self):
        appointment = self.add_appointment(hm("10:00"), hm("10:30"))
        self.sweep()
        self.sweep()
        self.assertEqual(len(self.sender.sent), 1)
        self.db.refresh(appointment)
        self.assertTrue(appointment.reminder_sent)

    def test_failed_delivery_retried_next_tick(self):
        appointment = self.add_appointment(hm("10:00"), hm("10:30"))

        summary = self.sweep(sender=RecordingSender(deliver=False))
        self.assertEqual(summary["failed"], 1)
        self.db.refresh(appointment)
        self.assertFalse(appointment.reminder_sent)

        self.sweep(sender=RecordingSender(raise_error=True))
        self.db.refresh(appointment)
        self.assertFalse(appointment.reminder_sent)

        self.sweep()
        self.db.refresh(appointment)
        self.assertTrue(appointment.reminder_sent)

    def test_inactive_tenant_skipped(self):
        TenantRepository.create(self.db, tenant_key="closed", business_name="Closed", active=False)
        stranger = ProfessionalRepository.create(self.db, "closed", name="Bia", active=True)
        self.add_appointment(hm("10:00"), hm("10:30"), tenant_id="closed", professional=stranger)

        summary = self.sweep()

        self.assertEqual(summary["tenants"], 1)
        self.assertEqual(self.sender.sent, [])
        self.assertFalse(self.db.query(Appointment).one().reminder_sent)

    def test_payload(self):
        self.add_appointment(hm("10:00"), hm("11:30"), [self.lash, self.brow], phone="+5511912345678")
        self.sweep()
        payload = self.sender.sent[0][1]
        self.assertEqual(payload.phone, "5511912345678")
        self.assertEqual(payload.serviceNames, "Lash lifting, Brow design")
        self.assertEqual(payload.amount, "R$ 170,50")


class TestReminderLoop(unittest.TestCase):
    def run_loop(self, tick, stop_after):
        """Run the ticker with ``tick`` in place of the real sweep until it has been called ``stop_after`` times"""
        calls = []

        async def main():
            stop_event = asyncio.Event()
            loop = asyncio.get_running_loop()

            def sweep(sender=None):
                calls.append(sender)
                try:
                    return tick(len(calls))
                finally:
                    if len(calls) == stop_after:
                        loop.call_soon_threadsafe(stop_event.set)

            with mock.patch("app.reminders.run_scheduled_sweep", side_effect=sweep):
                await asyncio.wait_for(reminder_loop(stop_event, interval_seconds=0.01), timeout=5)

        asyncio.run(main())
        return calls

    def test_loop_ticks_until_stopped(self):
        calls = self.run_loop(lambda n: {}, stop_after=3)
        self.assertEqual(len(calls), 3)

    def test_failing_tick_does_not_stop_loop(self):
        def flaky(n):
            if n == 1:
                raise RuntimeError("database unavailable")
            return {}

        calls = self.run_loop(flaky, stop_after=2)
        self.assertEqual(len(calls), 2)


if __name__ == "__main__":
    unittest.main()

import unittest
from datetime import timedelta

from helpers import SalonTestCase, hm

from app.domain.blocks.service import BlockService
from app.domain.tenants.repository import ProfessionalRepository, TenantRepository
from app.domain.working_hours.schemas import WorkingHoursUpdate
from app.domain.working_hours.service import WorkingHoursService
from app.errors import BookingError, ErrorKind


class TestDayBlocks(SalonTestCase):
    def setUp(self):
        super().setUp()
        self.service = BlockService(self.db)
        TenantRepository.create(self.db, tenant_key="other", business_name="Other", active=True)

    def test_specific_date_closes_only_that_date(self):
        self.service.block_specific_date("kc", self.day, "Holiday")
        self.assertTrue(self.service.is_day_blocked("kc", self.day))
        self.assertFalse(self.service.is_day_blocked("kc", self.day + timedelta(days=7)))
        self.assertFalse(self.service.is_day_blocked("other", self.day))

    def test_recurring_weekday_closes_every_week(self):
        self.service.block_recurring_day("kc", self.day.weekday(), "Closed on Mondays")
        for weeks in range(4):
            self.assertTrue(self.service.is_day_blocked("kc", self.day + timedelta(weeks=weeks)))
        self.assertFalse(self.service.is_day_blocked("kc", self.day + timedelta(days=1)))

    def test_specific_block_reported_before_recurring(self):
        self.service.block_recurring_day("kc", self.day.weekday(), "Weekly")
        self.service.block_specific_date("kc", self.day, "Holiday")
        self.assertEqual(self.service.get_day_block("kc", self.day).reason, "Holiday")

    def test_duplicate_specific_date(self):
        self.service.block_specific_date("kc", self.day, "Holiday")
        with self.assertRaises(BookingError) as ctx:
            self.service.block_specific_date("kc", self.day, "Again")
        self.assertEqual(ctx.exception.kind, ErrorKind.DUPLICATE_BLOCK)
        self.assertEqual(ctx.exception.status_code, 409)

    def test_duplicate_recurring_day(self):
        self.service.block_recurring_day("kc", 6, "Sunday")
        with self.assertRaises(BookingError) as ctx:
            self.service.block_recurring_day("kc", 6, "Sunday again")
        self.assertEqual(ctx.exception.kind, ErrorKind.DUPLICATE_BLOCK)

    def test_same_date_in_other_tenant_is_not_duplicate(self):
        self.service.block_specific_date("kc", self.day, "Holiday")
        self.service.block_specific_date("other", self.day, "Holiday")
        self.assertEqual(len(self.service.get_blocked_days("other")), 1)

    def test_unblock_missing(self):
        with self.assertRaises(BookingError) as ctx:
            self.service.unblock_day("kc", 999)
        self.assertEqual(ctx.exception.kind, ErrorKind.NOT_FOUND)

    def test_unblock_other_tenant_forbidden(self):
        block = self.service.block_specific_date("other", self.day, "Holiday")
        with self.assertRaises(BookingError) as ctx:
            self.service.unblock_day("kc", block.id)
        self.assertEqual(ctx.exception.kind, ErrorKind.FORBIDDEN)
        self.assertTrue(self.service.is_day_blocked("other", self.day))

    def test_unblock_reopens_day(self):
        block = self.service.block_specific_date("kc", self.day, "Holiday")
        self.service.unblock_day("kc", block.id)
        self.assertFalse(self.service.is_day_blocked("kc", self.day))

    def test_listing_by_kind(self):
        self.service.block_specific_date("kc", self.day, "Holiday")
        self.service.block_recurring_day("kc", 6, "Sunday")
        self.assertEqual(len(self.service.get_blocked_days("kc")), 2)
        self.assertEqual([b.reason for b in self.service.get_specific_blocked_dates("kc")], ["Holiday"])
        self.assertEqual([b.day_of_week for b in self.service.get_recurring_blocked_days("kc")], [6])

    def test_available_dates_skip_closed_days(self):
        self.service.block_specific_date("kc", self.day + timedelta(days=2), "Holiday")
        self.service.block_recurring_day("kc", 6, "Sunday")

        available = self.service.get_available_dates("kc", self.day, self.day + timedelta(days=6))

        self.assertEqual(len(available), 5)
        self.assertNotIn(self.day + timedelta(days=2), available)
        self.assertTrue(all(d.weekday() != 6 for d in available))

    def test_available_dates_reversed_range(self):
        with self.assertRaises(BookingError) as ctx:
            self.service.get_available_dates("kc", self.day, self.day - timedelta(days=1))
        self.assertEqual(ctx.exception.kind, ErrorKind.BUSINESS)


class TestIntervalBlocks(SalonTestCase):
    def setUp(self):
        super().setUp()
        self.service = BlockService(self.db)
        self.colleague = ProfessionalRepository.create(self.db, "kc", name="Carla", active=True)

    def test_start_must_precede_end(self):
        for start, end in (("13:00", "12:00"), ("12:00", "12:00")):
            with self.assertRaises(BookingError) as ctx:
                self.service.block_interval("kc", self.day, hm(start), hm(end), "Lunch")
            self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_INTERVAL)
            self.assertEqual(ctx.exception.status_code, 400)

    def test_must_fit_working_hours(self):
        with self.assertRaises(BookingError) as ctx:
            self.service.block_interval("kc", self.day, hm("17:30"), hm("18:30"), "Late")
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_INTERVAL)
        self.assertEqual(ctx.exception.requested.start, hm("17:30"))

    def test_whole_working_day_can_be_blocked(self):
        block = self.service.block_interval("kc", self.day, hm("09:00"), hm("18:00"), "Training")
        self.assertEqual(block.end_time, hm("18:00"))

    def test_professional_working_hours_bound_their_blocks(self):
        WorkingHoursService(self.db).configure(
            "kc",
            WorkingHoursUpdate(start_time=hm("12:00"), end_time=hm("20:00")),
            professional_id=self.professional.id,
        )
        block = self.service.block_interval(
            "kc", self.day, hm("19:00"), hm("20:00"), "Gym", professional_id=self.professional.id
        )
        self.assertEqual(block.professional_id, self.professional.id)

        with self.assertRaises(BookingError):
            self.service.block_interval("kc", self.day, hm("19:00"), hm("20:00"), "Gym")

    def test_overlapping_block_conflicts(self):
        self.service.block_interval("kc", self.day, hm("12:00"), hm("13:00"), "Lunch")
        with self.assertRaises(BookingError) as ctx:
            self.service.block_interval("kc", self.day, hm("12:30"), hm("14:00"), "Meeting")

        error = ctx.exception
        self.assertEqual(error.kind, ErrorKind.CONFLICTING_BLOCK)
        self.assertEqual((error.existing.start, error.existing.end), (hm("12:00"), hm("13:00")))
        self.assertEqual((error.requested.start, error.requested.end), (hm("12:30"), hm("14:00")))

    def test_touching_blocks_allowed(self):
        self.service.block_interval("kc", self.day, hm("12:00"), hm("13:00"), "Lunch")
        self.service.block_interval("kc", self.day, hm("13:00"), hm("14:00"), "Meeting")
        self.service.block_interval("kc", self.day, hm("11:00"), hm("12:00"), "Setup")
        self.assertEqual(len(self.service.get_blocked_intervals("kc", self.day)), 3)

    def test_same_interval_on_other_date_allowed(self):
        self.service.block_interval("kc", self.day, hm("12:00"), hm("13:00"), "Lunch")
        self.service.block_interval("kc", self.day + timedelta(days=1), hm("12:00"), hm("13:00"), "Lunch")

    def test_recurring_overlap_conflicts(self):
        self.service.block_recurring_interval("kc", 0, hm("12:00"), hm("13:00"), "Lunch")
        with self.assertRaises(BookingError) as ctx:
            self.service.block_recurring_interval("kc", 0, hm("11:30"), hm("12:30"), "Brunch")
        self.assertEqual(ctx.exception.kind, ErrorKind.CONFLICTING_BLOCK)
        self.service.block_recurring_interval("kc", 1, hm("11:30"), hm("12:30"), "Brunch")

    def test_blocked_intervals_merge_specific_and_recurring(self):
        self.service.block_recurring_interval("kc", self.day.weekday(), hm("12:00"), hm("13:00"), "Lunch")
        self.service.block_interval("kc", self.day, hm("09:00"), hm("10:00"), "Late opening")

        blocks = self.service.get_blocked_intervals("kc", self.day)
        self.assertEqual([b.start_time for b in blocks], [hm("09:00"), hm("12:00")])

        next_week = self.service.get_blocked_intervals("kc", self.day + timedelta(weeks=1))
        self.assertEqual([b.start_time for b in next_week], [hm("12:00")])

    def test_professional_block_only_applies_to_them(self):
        self.service.block_interval(
            "kc", self.day, hm("15:00"), hm("16:00"), "Dentist", professional_id=self.professional.id
        )
        self.assertTrue(
            self.service.is_interval_blocked("kc", self.day, hm("15:30"), hm("16:30"), self.professional.id)
        )
        self.assertFalse(
            self.service.is_interval_blocked("kc", self.day, hm("15:30"), hm("16:30"), self.colleague.id)
        )
        self.assertFalse(self.service.is_interval_blocked("kc", self.day, hm("15:30"), hm("16:30")))

    def test_tenant_block_applies_to_everyone(self):
        self.service.block_interval("kc", self.day, hm("12:00"), hm("13:00"), "Lunch")
        self.assertTrue(self.service.is_time_slot_blocked("kc", self.day, hm("12:00"), self.colleague.id))
        self.assertFalse(self.service.is_time_slot_blocked("kc", self.day, hm("13:00"), self.colleague.id))

    def test_tenant_and_professional_blocks_do_not_conflict(self):
        self.service.block_interval("kc", self.day, hm("12:00"), hm("13:00"), "Lunch")
        self.service.block_interval(
            "kc", self.day, hm("12:30"), hm("13:30"), "Call", professional_id=self.professional.id
        )
        self.assertEqual(len(self.service.get_blocked_intervals("kc", self.day, self.professional.id)), 2)

    def test_interval_touching_block_is_not_blocked(self):
        self.service.block_interval("kc", self.day, hm("12:00"), hm("13:00"), "Lunch")
        self.assertFalse(self.service.is_interval_blocked("kc", self.day, hm("11:00"), hm("12:00")))
        self.assertFalse(self.service.is_interval_blocked("kc", self.day, hm("13:00"), hm("14:00")))
        self.assertTrue(self.service.is_interval_blocked("kc", self.day, hm("11:30"), hm("12:30")))

    def test_block_for_professional_of_other_tenant(self):
        TenantRepository.create(self.db, tenant_key="other", business_name="Other", active=True)
        stranger = ProfessionalRepository.create(self.db, "other", name="Bia", active=True)
        with self.assertRaises(BookingError) as ctx:
            self.service.block_interval(
                "kc", self.day, hm("12:00"), hm("13:00"), "Lunch", professional_id=stranger.id
            )
        self.assertEqual(ctx.exception.kind, ErrorKind.FORBIDDEN)

    def test_unblock_interval_ownership(self):
        TenantRepository.create(self.db, tenant_key="other", business_name="Other", active=True)
        foreign = self.service.block_interval("other", self.day, hm("12:00"), hm("13:00"), "Lunch")

        with self.assertRaises(BookingError) as ctx:
            self.service.unblock_interval("kc", foreign.id)
        self.assertEqual(ctx.exception.kind, ErrorKind.FORBIDDEN)

        with self.assertRaises(BookingError) as ctx:
            self.service.unblock_interval("kc", 999)
        self.assertEqual(ctx.exception.kind, ErrorKind.NOT_FOUND)

        self.service.unblock_interval("other", foreign.id)
        self.assertEqual(self.service.get_blocked_intervals("other", self.day), [])


if __name__ == "__main__":
    unittest.main()

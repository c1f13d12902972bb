"""
Block service - Day closures and interval blocks for a tenant

Day blocks close a whole calendar date or a weekday every week.
Interval blocks close [start, end) on a date or a weekday, either for the
whole tenant or for one professional.
"""

import logging
from datetime import date, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import BookingError, TimeInterval
from ...models import BlockedDay, BlockedTimeSlot
from ..scheduling.time_calculator import contains, overlaps
from ..tenants.service import ProfessionalService
from ..working_hours.service import WorkingHoursService
from .repository import BlockedDayRepository, BlockedTimeSlotRepository

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class BlockService:
    """Service layer for day and interval blocks"""

    def __init__(self, db: Session):
        self.db = db
        self.days = BlockedDayRepository()
        self.slots = BlockedTimeSlotRepository()
        self.working_hours = WorkingHoursService(db)

    # ========================================================================
    # DAY BLOCKS
    # ========================================================================

    def get_day_block(self, tenant_id: str, day: date) -> Optional[BlockedDay]:
        """The specific-date block if any, otherwise the recurring weekday block"""
        return self.days.find_specific(self.db, tenant_id, day) or self.days.find_recurring(
            self.db, tenant_id, day.weekday()
        )

    def is_day_blocked(self, tenant_id: str, day: date) -> bool:
        return self.get_day_block(tenant_id, day) is not None

    def block_specific_date(self, tenant_id: str, day: date, reason: str) -> BlockedDay:
        if self.days.find_specific(self.db, tenant_id, day):
            raise BookingError.duplicate_block(f"Date {day.isoformat()} is already blocked")

        block = self.days.create(
            self.db, tenant_id=tenant_id, specific_date=day, recurring=False, reason=reason
        )
        logger.info(f"✅ Blocked {day.isoformat()} for tenant {tenant_id}: {reason}")
        return block

    def block_recurring_day(self, tenant_id: str, day_of_week: int, reason: str) -> BlockedDay:
        if self.days.find_recurring(self.db, tenant_id, day_of_week):
            raise BookingError.duplicate_block(
                f"{WEEKDAY_NAMES[day_of_week]} is already blocked every week"
            )

        block = self.days.create(
            self.db, tenant_id=tenant_id, day_of_week=day_of_week, recurring=True, reason=reason
        )
        logger.info(f"✅ Blocked every {WEEKDAY_NAMES[day_of_week]} for tenant {tenant_id}: {reason}")
        return block

    def unblock_day(self, tenant_id: str, block_id: int) -> None:
        block = self.days.get_by_id(self.db, block_id)
        if not block:
            raise BookingError.not_found("BlockedDay", block_id)
        if block.tenant_id != tenant_id:
            logger.warning(f"⚠️ Tenant {tenant_id} tried to remove day block {block_id} of {block.tenant_id}")
            raise BookingError.forbidden("BlockedDay", block_id)

        self.days.delete(self.db, block)
        logger.info(f"✅ Day block {block_id} removed for tenant {tenant_id}")

    def get_blocked_days(self, tenant_id: str) -> list[BlockedDay]:
        return self.days.get_all(self.db, tenant_id)

    def get_specific_blocked_dates(self, tenant_id: str) -> list[BlockedDay]:
        return self.days.get_all(self.db, tenant_id, recurring=False)

    def get_recurring_blocked_days(self, tenant_id: str) -> list[BlockedDay]:
        return self.days.get_all(self.db, tenant_id, recurring=True)

    def get_available_dates(self, tenant_id: str, start: date, end: date) -> list[date]:
        """Every date in [start, end] that is not closed"""
        if start > end:
            raise BookingError.business("start date must not be after end date")

        specific = {b.specific_date for b in self.get_specific_blocked_dates(tenant_id)}
        weekdays = {b.day_of_week for b in self.get_recurring_blocked_days(tenant_id)}

        available = []
        current = start
        while current <= end:
            if current not in specific and current.weekday() not in weekdays:
                available.append(current)
            current += timedelta(days=1)
        return available

    # ========================================================================
    # INTERVAL BLOCKS
    # ========================================================================

    def _validate_interval(
        self, tenant_id: str, start: time, end: time, professional_id: Optional[int]
    ) -> None:
        requested = TimeInterval(start, end)
        if start >= end:
            raise BookingError.invalid_interval("start must be before end", requested=requested)

        if professional_id is not None:
            ProfessionalService(self.db).validate_professional_belongs_to_tenant(professional_id, tenant_id)

        hours = self.working_hours.resolve(tenant_id, professional_id)
        if not hours.contains_interval(start, end):
            raise BookingError.invalid_interval(
                f"Blocked interval ({requested}) must be within working hours ({hours})",
                requested=requested,
            )

    def block_interval(
        self,
        tenant_id: str,
        day: date,
        start: time,
        end: time,
        reason: str,
        professional_id: Optional[int] = None,
    ) -> BlockedTimeSlot:
        """Block [start, end) on one specific date"""
        self._validate_interval(tenant_id, start, end, professional_id)

        conflicts = self.slots.find_conflicting_on_date(
            self.db, tenant_id, day, start, end, professional_id
        )
        if conflicts:
            existing = conflicts[0]
            raise BookingError.conflicting_block(
                TimeInterval(start, end), TimeInterval(existing.start_time, existing.end_time)
            )

        block = self.slots.create(
            self.db,
            tenant_id=tenant_id,
            professional_id=professional_id,
            specific_date=day,
            recurring=False,
            start_time=start,
            end_time=end,
            reason=reason,
        )
        logger.info(f"✅ Blocked {start:%H:%M}-{end:%H:%M} on {day.isoformat()} for tenant {tenant_id}")
        return block

    def block_recurring_interval(
        self,
        tenant_id: str,
        day_of_week: int,
        start: time,
        end: time,
        reason: str,
        professional_id: Optional[int] = None,
    ) -> BlockedTimeSlot:
        """Block [start, end) on the same weekday every week"""
        self._validate_interval(tenant_id, start, end, professional_id)

        conflicts = self.slots.find_conflicting_recurring(
            self.db, tenant_id, day_of_week, start, end, professional_id
        )
        if conflicts:
            existing = conflicts[0]
            raise BookingError.conflicting_block(
                TimeInterval(start, end), TimeInterval(existing.start_time, existing.end_time)
            )

        block = self.slots.create(
            self.db,
            tenant_id=tenant_id,
            professional_id=professional_id,
            day_of_week=day_of_week,
            recurring=True,
            start_time=start,
            end_time=end,
            reason=reason,
        )
        logger.info(
            f"✅ Blocked {start:%H:%M}-{end:%H:%M} every {WEEKDAY_NAMES[day_of_week]} for tenant {tenant_id}"
        )
        return block

    def unblock_interval(self, tenant_id: str, block_id: int) -> None:
        block = self.slots.get_by_id(self.db, block_id)
        if not block:
            raise BookingError.not_found("BlockedTimeSlot", block_id)
        if block.tenant_id != tenant_id:
            logger.warning(
                f"⚠️ Tenant {tenant_id} tried to remove interval block {block_id} of {block.tenant_id}"
            )
            raise BookingError.forbidden("BlockedTimeSlot", block_id)

        self.slots.delete(self.db, block)
        logger.info(f"✅ Interval block {block_id} removed for tenant {tenant_id}")

    def get_blocked_intervals(
        self, tenant_id: str, day: date, professional_id: Optional[int] = None
    ) -> list[BlockedTimeSlot]:
        """Specific-date blocks for ``day`` plus recurring blocks for its weekday, by start time"""
        blocks = self.slots.get_specific_for_date(self.db, tenant_id, day, professional_id)
        blocks += self.slots.get_recurring_for_weekday(self.db, tenant_id, day.weekday(), professional_id)
        return sorted(blocks, key=lambda b: (b.start_time, b.end_time))

    def is_time_slot_blocked(
        self, tenant_id: str, day: date, value: time, professional_id: Optional[int] = None
    ) -> bool:
        return any(
            contains(value, b.start_time, b.end_time)
            for b in self.get_blocked_intervals(tenant_id, day, professional_id)
        )

    def is_interval_blocked(
        self, tenant_id: str, day: date, start: time, end: time, professional_id: Optional[int] = None
    ) -> bool:
        return any(
            overlaps(start, end, b.start_time, b.end_time)
            for b in self.get_blocked_intervals(tenant_id, day, professional_id)
        )

    def get_specific_blocked_intervals(self, tenant_id: str) -> list[BlockedTimeSlot]:
        return self.slots.get_all(self.db, tenant_id, recurring=False)

    def get_recurring_blocked_intervals(self, tenant_id: str) -> list[BlockedTimeSlot]:
        return self.slots.get_all(self.db, tenant_id, recurring=True)

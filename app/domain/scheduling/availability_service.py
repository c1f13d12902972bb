"""
Availability service - Offerable start times for a professional on a date

Algorithm:
1. A closed day offers nothing.
2. Resolve working hours and the total duration of the requested services.
3. Enumerate candidate starts on the working-hours grid. The closing instant is
   a candidate only when no duration is known.
4. Drop a candidate when it lies inside a blocked interval or an existing
   appointment, or when (with a duration) the service would reach a block that
   has not ended yet, or finish after closing.

This is a point-in-time read without locks; booking re-validates everything.
"""

import logging
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from ..appointments.repository import AppointmentRepository
from ..blocks.service import BlockService
from ..catalog.service import CatalogService
from ..tenants.service import ProfessionalService, TenantService
from ..working_hours.service import WorkingHoursService
from .time_calculator import contains, end_minutes, enumerate_slots, overlaps, to_minutes

logger = logging.getLogger(__name__)


def is_slot_offerable(
    slot: time,
    total_duration: int,
    work_end: time,
    blocked: list[tuple[time, time]],
    booked: list[tuple[time, time]],
) -> bool:
    if any(contains(slot, start, end) for start, end in blocked):
        return False
    if any(contains(slot, start, end) for start, end in booked):
        return False

    if total_duration > 0:
        slot_minutes = to_minutes(slot)
        finish = end_minutes(slot, total_duration)
        # Reaching a block's start counts as running into it
        for start, end in blocked:
            if finish >= to_minutes(start) and slot_minutes < to_minutes(end):
                return False
        if finish > to_minutes(work_end):
            return False

    return True


class AvailabilityService:
    """Composes working hours, blocks and the appointment ledger"""

    def __init__(self, db: Session):
        self.db = db
        self.tenants = TenantService(db)
        self.professionals = ProfessionalService(db)
        self.working_hours = WorkingHoursService(db)
        self.blocks = BlockService(db)
        self.catalog = CatalogService(db)
        self.appointments = AppointmentRepository()

    def compute_available_slots(
        self,
        tenant_id: str,
        professional_id: int,
        day: date,
        service_ids: Optional[list[int]] = None,
    ) -> list[time]:
        """Ascending, duplicate-free list of start times a client may book"""
        self.tenants.get_active_tenant(tenant_id)
        self.professionals.get_active_professional(professional_id, tenant_id)

        total_duration = self.catalog.total_duration(service_ids, tenant_id)
        return self._available_slots(tenant_id, professional_id, day, total_duration)

    def _available_slots(
        self, tenant_id: str, professional_id: int, day: date, total_duration: int
    ) -> list[time]:
        if self.blocks.is_day_blocked(tenant_id, day):
            logger.info(f"🔍 {day.isoformat()} is closed for tenant {tenant_id}")
            return []

        hours = self.working_hours.resolve(tenant_id, professional_id)
        candidates = enumerate_slots(
            hours.start_time,
            hours.end_time,
            hours.slot_interval_minutes,
            include_closing=total_duration == 0,
        )

        blocked = [
            (b.start_time, b.end_time)
            for b in self.blocks.get_blocked_intervals(tenant_id, day, professional_id)
        ]
        booked = [
            (a.start_time, a.end_time)
            for a in self.appointments.get_by_professional_and_date(self.db, professional_id, day)
        ]

        available = [
            slot
            for slot in candidates
            if is_slot_offerable(slot, total_duration, hours.end_time, blocked, booked)
        ]
        logger.info(
            f"🔍 {len(available)}/{len(candidates)} slots free for professional {professional_id} "
            f"on {day.isoformat()} (duration={total_duration} min)"
        )
        return available

    def is_time_slot_available(
        self, tenant_id: str, professional_id: int, day: date, start: time, duration_minutes: int
    ) -> bool:
        """Whether [start, start + duration) could be booked right now"""
        self.tenants.get_active_tenant(tenant_id)
        self.professionals.get_active_professional(professional_id, tenant_id)

        if self.blocks.is_day_blocked(tenant_id, day):
            return False

        finish = end_minutes(start, duration_minutes)
        hours = self.working_hours.resolve(tenant_id, professional_id)
        if to_minutes(start) < to_minutes(hours.start_time) or finish > to_minutes(hours.end_time):
            return False

        start_minutes = to_minutes(start)
        for block in self.blocks.get_blocked_intervals(tenant_id, day, professional_id):
            if overlaps(start_minutes, finish, to_minutes(block.start_time), to_minutes(block.end_time)):
                return False

        for appointment in self.appointments.get_by_professional_and_date(self.db, professional_id, day):
            if overlaps(
                start_minutes, finish, to_minutes(appointment.start_time), to_minutes(appointment.end_time)
            ):
                return False

        return True

    def get_date_availability_info(
        self,
        tenant_id: str,
        professional_id: int,
        day: date,
        service_ids: Optional[list[int]] = None,
    ) -> dict:
        """Slot counts and occupancy for one date"""
        self.tenants.get_active_tenant(tenant_id)
        self.professionals.get_active_professional(professional_id, tenant_id)

        day_block = self.blocks.get_day_block(tenant_id, day)
        if day_block is not None:
            return {
                "date": day,
                "total_slots": 0,
                "available_slots": 0,
                "fully_blocked": True,
                "block_reason": day_block.reason,
                "occupied_slots": 0,
                "occupancy_rate": 0.0,
                "is_available": False,
            }

        total_duration = self.catalog.total_duration(service_ids, tenant_id)
        hours = self.working_hours.resolve(tenant_id, professional_id)
        total = len(
            enumerate_slots(
                hours.start_time,
                hours.end_time,
                hours.slot_interval_minutes,
                include_closing=total_duration == 0,
            )
        )
        available = len(self._available_slots(tenant_id, professional_id, day, total_duration))
        occupied = total - available

        return {
            "date": day,
            "total_slots": total,
            "available_slots": available,
            "fully_blocked": False,
            "block_reason": None,
            "occupied_slots": occupied,
            "occupancy_rate": round(occupied / total * 100, 2) if total else 0.0,
            "is_available": available > 0,
        }

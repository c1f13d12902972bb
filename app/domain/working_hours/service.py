"""
Working hours service - Resolves the effective schedule for a tenant or professional

Lookup order: the professional's own row, then the tenant-wide row, then the
built-in default. The default is a plain value and is never written to the database.
"""

import logging
from dataclasses import dataclass
from datetime import time
from typing import Optional

from sqlalchemy.orm import Session

from ...config import (
    DEFAULT_SLOT_INTERVAL_MINUTES,
    DEFAULT_WORK_END,
    DEFAULT_WORK_START,
    MAX_SLOT_INTERVAL_MINUTES,
    MIN_SLOT_INTERVAL_MINUTES,
)
from ...errors import BookingError, TimeInterval
from ...models import WorkingHours
from ..scheduling.time_calculator import parse_hhmm
from ..tenants.service import ProfessionalService
from .repository import WorkingHoursRepository
from .schemas import WorkingHoursUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveWorkingHours:
    start_time: time
    end_time: time
    slot_interval_minutes: int
    configured: bool = False
    professional_id: Optional[int] = None

    def contains_interval(self, start: time, end: time) -> bool:
        return start >= self.start_time and end <= self.end_time

    def contains_time(self, value: time) -> bool:
        """Inclusive of the closing instant"""
        return self.start_time <= value <= self.end_time

    def __str__(self) -> str:
        return f"{self.start_time:%H:%M} - {self.end_time:%H:%M}"


def default_working_hours() -> EffectiveWorkingHours:
    return EffectiveWorkingHours(
        start_time=parse_hhmm(DEFAULT_WORK_START),
        end_time=parse_hhmm(DEFAULT_WORK_END),
        slot_interval_minutes=DEFAULT_SLOT_INTERVAL_MINUTES,
    )


def _effective(row: WorkingHours) -> EffectiveWorkingHours:
    return EffectiveWorkingHours(
        start_time=row.start_time,
        end_time=row.end_time,
        slot_interval_minutes=row.slot_interval_minutes,
        configured=True,
        professional_id=row.professional_id,
    )


def validate_working_hours(start: time, end: time, slot_interval_minutes: int) -> None:
    if start >= end:
        raise BookingError.invalid_interval(
            "Working hours start must be before end", requested=TimeInterval(start, end)
        )
    if not MIN_SLOT_INTERVAL_MINUTES <= slot_interval_minutes <= MAX_SLOT_INTERVAL_MINUTES:
        raise BookingError.business(
            f"Slot interval must be between {MIN_SLOT_INTERVAL_MINUTES} and "
            f"{MAX_SLOT_INTERVAL_MINUTES} minutes"
        )


class WorkingHoursService:
    """Service layer for working hours"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WorkingHoursRepository()

    def resolve(self, tenant_id: str, professional_id: Optional[int] = None) -> EffectiveWorkingHours:
        """Never fails: missing configuration resolves to the default"""
        if professional_id is not None:
            row = self.repo.get(self.db, tenant_id, professional_id)
            if row:
                return _effective(row)

        row = self.repo.get(self.db, tenant_id)
        if row:
            return _effective(row)

        return default_working_hours()

    def configure(
        self, tenant_id: str, data: WorkingHoursUpdate, professional_id: Optional[int] = None
    ) -> WorkingHours:
        """Create or replace the schedule for this scope"""
        validate_working_hours(data.start_time, data.end_time, data.slot_interval_minutes)
        if professional_id is not None:
            ProfessionalService(self.db).validate_professional_belongs_to_tenant(professional_id, tenant_id)

        row = self.repo.get(self.db, tenant_id, professional_id)
        if row is None:
            row = WorkingHours(tenant_id=tenant_id, professional_id=professional_id, active=True)

        row.start_time = data.start_time
        row.end_time = data.end_time
        row.slot_interval_minutes = data.slot_interval_minutes

        saved = self.repo.save(self.db, row)
        scope = f"professional {professional_id}" if professional_id else "tenant-wide"
        logger.info(
            f"✅ Working hours for {tenant_id} ({scope}) set to "
            f"{saved.start_time:%H:%M}-{saved.end_time:%H:%M} every {saved.slot_interval_minutes} min"
        )
        return saved

    def delete(self, tenant_id: str, professional_id: Optional[int] = None) -> None:
        """Remove configuration for this scope so the next fallback applies"""
        row = self.repo.get(self.db, tenant_id, professional_id)
        if not row:
            raise BookingError.not_found("WorkingHours", professional_id or tenant_id)
        self.repo.delete(self.db, row)
        logger.info(f"✅ Working hours removed for {tenant_id} (professional={professional_id})")

    def is_within_working_hours(
        self, tenant_id: str, value: time, professional_id: Optional[int] = None
    ) -> bool:
        return self.resolve(tenant_id, professional_id).contains_time(value)

    def is_interval_within_working_hours(
        self, tenant_id: str, start: time, end: time, professional_id: Optional[int] = None
    ) -> bool:
        return self.resolve(tenant_id, professional_id).contains_interval(start, end)

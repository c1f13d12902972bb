"""
Appointment service - Validates and commits bookings, cancels them

Booking pipeline, first failure aborts:
tenant active -> professional active in tenant -> day open -> services exist
-> professional performs all services -> inside working hours -> interval not
blocked -> no overlap with the professional's appointments -> commit.

Validation and commit run under a per (professional, date) lock so two
overlapping requests cannot both pass the overlap check. The confirmation
message is sent after the commit and its failure never undoes the booking.
"""

import logging
from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import BookingError, TimeInterval
from ...locks import booking_lock
from ...models import Appointment
from ...services.notification_service import get_default_sender, notify
from ...services.whatsapp_service import NotificationKind
from ..blocks.service import BlockService
from ..catalog.service import CatalogService, QualificationService
from ..scheduling.time_calculator import end_minutes, from_minutes, overlaps, to_minutes
from ..tenants.service import ProfessionalService, TenantService
from ..working_hours.service import WorkingHoursService
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for bookings"""

    def __init__(self, db: Session, sender=None):
        self.db = db
        self.repo = AppointmentRepository()
        self.sender = sender or get_default_sender()
        self.tenants = TenantService(db)
        self.professionals = ProfessionalService(db)
        self.blocks = BlockService(db)
        self.catalog = CatalogService(db)
        self.qualifications = QualificationService(db)
        self.working_hours = WorkingHoursService(db)

    # ========================================================================
    # BOOKING
    # ========================================================================

    def create_appointment(
        self,
        tenant_id: str,
        professional_id: int,
        service_ids: list[int],
        day: date,
        start_time: time,
        client_name: str,
        client_phone: str,
    ) -> Appointment:
        logger.info(
            f"📥 Booking request: tenant={tenant_id} professional={professional_id} "
            f"date={day.isoformat()} start={start_time:%H:%M} services={service_ids}"
        )

        try:
            if start_time.second or start_time.microsecond:
                # End times are computed in whole minutes
                raise BookingError.invalid_interval(
                    f"start time must be on a whole minute: {start_time.isoformat()}"
                )
            with booking_lock(professional_id, day):
                appointment = self._validate_and_commit(
                    tenant_id, professional_id, service_ids, day, start_time, client_name, client_phone
                )
        except BookingError as e:
            logger.warning(f"⚠️ Booking rejected ({e.kind.value}): {e.message}")
            raise

        logger.info(
            f"✅ Appointment {appointment.id} booked for {appointment.client_name} "
            f"{appointment.start_time:%H:%M}-{appointment.end_time:%H:%M} on {day.isoformat()}"
        )

        notify(self.sender, NotificationKind.BOOKING_CREATED, appointment)
        return appointment

    def _validate_and_commit(
        self,
        tenant_id: str,
        professional_id: int,
        service_ids: list[int],
        day: date,
        start_time: time,
        client_name: str,
        client_phone: str,
    ) -> Appointment:
        self.tenants.get_active_tenant(tenant_id)
        self.professionals.get_active_professional(professional_id, tenant_id)

        if self.blocks.is_day_blocked(tenant_id, day):
            raise BookingError.business(f"date closed: {day.isoformat()} is not open for bookings")

        services = self.catalog.get_services_by_ids(service_ids, tenant_id)

        if not self.qualifications.professional_executes_all_services(
            professional_id, [s.id for s in services]
        ):
            raise BookingError.business("professional cannot perform all requested services")

        total_duration = sum(s.duration for s in services)
        finish = end_minutes(start_time, total_duration)
        hours = self.working_hours.resolve(tenant_id, professional_id)
        if to_minutes(start_time) < to_minutes(hours.start_time) or finish > to_minutes(hours.end_time):
            until = from_minutes(finish).strftime("%H:%M") if finish < 24 * 60 else "next day"
            raise BookingError.business(
                f"outside working hours: requested {start_time:%H:%M} - {until}, "
                f"working hours {hours}"
            )

        end_time = from_minutes(finish)
        requested = TimeInterval(start_time, end_time)

        if self.blocks.is_interval_blocked(tenant_id, day, start_time, end_time, professional_id):
            raise BookingError.business(f"time interval blocked: {requested}")

        for existing in self.repo.get_by_professional_and_date(self.db, professional_id, day):
            if overlaps(start_time, end_time, existing.start_time, existing.end_time):
                raise BookingError.conflict(
                    requested,
                    TimeInterval(existing.start_time, existing.end_time),
                    existing.client_name,
                )

        return self.repo.create(
            self.db,
            services,
            tenant_id=tenant_id,
            professional_id=professional_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            client_name=client_name,
            client_phone=client_phone,
            reminder_sent=False,
        )

    def cancel_appointment(self, tenant_id: str, appointment_id: int) -> None:
        """Delete the appointment after a best-effort cancellation message"""
        appointment = self.get_appointment(tenant_id, appointment_id)

        notify(self.sender, NotificationKind.CANCELLATION, appointment)

        self.repo.delete(self.db, appointment)
        logger.info(f"✅ Appointment {appointment_id} cancelled for tenant {tenant_id}")

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_appointment(self, tenant_id: str, appointment_id: int) -> Appointment:
        appointment = self.repo.get_by_id_and_tenant(self.db, appointment_id, tenant_id)
        if not appointment:
            raise BookingError.not_found("Appointment", appointment_id)
        return appointment

    def get_all_appointments(self, tenant_id: str) -> list[Appointment]:
        return self.repo.get_by_tenant(self.db, tenant_id)

    def get_appointments_by_date(self, tenant_id: str, day: date) -> list[Appointment]:
        return self.repo.get_by_tenant_and_date(self.db, tenant_id, day)

    def get_future_appointments_by_phone(
        self, tenant_id: str, phone: str, today: Optional[date] = None
    ) -> list[Appointment]:
        """Today onwards, soonest first"""
        today = today or date.today()
        appointments = self.repo.get_by_tenant_and_phone(self.db, tenant_id, phone)
        upcoming = [a for a in appointments if a.date >= today]
        return sorted(upcoming, key=lambda a: (a.date, a.start_time))

    def get_past_appointments_by_phone(
        self, tenant_id: str, phone: str, today: Optional[date] = None
    ) -> list[Appointment]:
        """Before today, most recent first"""
        today = today or date.today()
        appointments = self.repo.get_by_tenant_and_phone(self.db, tenant_id, phone)
        past = [a for a in appointments if a.date < today]
        return sorted(past, key=lambda a: (a.date, a.start_time), reverse=True)

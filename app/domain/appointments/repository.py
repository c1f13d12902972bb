"""Appointment repository - The only writer of appointment rows"""

from datetime import date, time
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, selectinload

from ...models import Appointment, Service


class AppointmentRepository:
    """Repository for committed appointments"""

    @staticmethod
    def get_by_id_and_tenant(db: Session, appointment_id: int, tenant_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.tenant_id == tenant_id)
            .first()
        )

    @staticmethod
    def get_by_tenant(db: Session, tenant_id: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.tenant_id == tenant_id)
            .order_by(Appointment.date, Appointment.start_time)
            .all()
        )

    @staticmethod
    def get_by_tenant_and_date(db: Session, tenant_id: str, day: date) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.tenant_id == tenant_id, Appointment.date == day)
            .order_by(Appointment.start_time)
            .all()
        )

    @staticmethod
    def get_by_tenant_and_phone(db: Session, tenant_id: str, phone: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.tenant_id == tenant_id, Appointment.client_phone == phone)
            .all()
        )

    @staticmethod
    def get_by_professional_and_date(db: Session, professional_id: int, day: date) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.professional_id == professional_id, Appointment.date == day)
            .order_by(Appointment.start_time)
            .all()
        )

    @staticmethod
    def find_appointments_to_remind(
        db: Session,
        tenant_id: str,
        now_date: date,
        now_time: time,
        limit_date: date,
        limit_time: time,
    ) -> list[Appointment]:
        """Unreminded appointments whose (date, start) lies in [now, limit], compared date first"""
        return (
            db.query(Appointment)
            .options(selectinload(Appointment.services))
            .filter(
                Appointment.tenant_id == tenant_id,
                Appointment.reminder_sent.is_(False),
                or_(
                    Appointment.date > now_date,
                    and_(Appointment.date == now_date, Appointment.start_time >= now_time),
                ),
                or_(
                    Appointment.date < limit_date,
                    and_(Appointment.date == limit_date, Appointment.start_time <= limit_time),
                ),
            )
            .order_by(Appointment.date, Appointment.start_time)
            .all()
        )

    @staticmethod
    def create(db: Session, services: list[Service], **appointment_data) -> Appointment:
        """Insert the appointment and its service links in one commit"""
        appointment = Appointment(**appointment_data)
        appointment.services = list(services)
        db.add(appointment)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(appointment)
        return appointment

    @staticmethod
    def mark_reminder_sent(db: Session, appointment: Appointment) -> None:
        appointment.reminder_sent = True
        db.commit()

    @staticmethod
    def delete(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()

"""Catalog repository - Database operations for services and professional qualifications"""

from datetime import date, time
from typing import Optional

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.orm import Session

from ...models import (
    Appointment,
    Professional,
    Service,
    appointment_services,
    professional_services,
)


class ServiceRepository:
    """Repository for service catalog database operations"""

    @staticmethod
    def get_by_tenant(db: Session, tenant_id: str) -> list[Service]:
        return db.query(Service).filter(Service.tenant_id == tenant_id).order_by(Service.name).all()

    @staticmethod
    def get_by_id_and_tenant(db: Session, service_id: int, tenant_id: str) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(Service.id == service_id, Service.tenant_id == tenant_id)
            .first()
        )

    @staticmethod
    def get_by_ids_and_tenant(db: Session, service_ids: list[int], tenant_id: str) -> list[Service]:
        if not service_ids:
            return []
        return (
            db.query(Service)
            .filter(Service.id.in_(service_ids), Service.tenant_id == tenant_id)
            .all()
        )

    @staticmethod
    def create(db: Session, tenant_id: str, **service_data) -> Service:
        service = Service(tenant_id=tenant_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def has_future_appointments(db: Session, service_id: int, today: date, now_time: time) -> bool:
        """True when an appointment on a later date, or today at/after now, books this service"""
        query = (
            db.query(Appointment.id)
            .join(appointment_services, appointment_services.c.appointment_id == Appointment.id)
            .filter(
                appointment_services.c.service_id == service_id,
                or_(
                    Appointment.date > today,
                    and_(Appointment.date == today, Appointment.start_time >= now_time),
                ),
            )
        )
        return db.query(query.exists()).scalar()

    @staticmethod
    def delete_with_references(db: Session, service: Service) -> None:
        """Drop professional links and past appointment links, then the service, in one commit"""
        service.professionals.clear()
        db.execute(delete(appointment_services).where(appointment_services.c.service_id == service.id))
        db.delete(service)
        db.commit()


class QualificationRepository:
    """Repository for the professional <-> service association"""

    @staticmethod
    def replace_links(db: Session, professional: Professional, services: list[Service]) -> Professional:
        professional.services = list(services)
        db.commit()
        db.refresh(professional)
        return professional

    @staticmethod
    def remove_link(db: Session, professional: Professional, service: Service) -> None:
        professional.services.remove(service)
        db.commit()

    @staticmethod
    def count_linked(db: Session, professional_id: int, service_ids: list[int]) -> int:
        stmt = (
            select(func.count())
            .select_from(professional_services)
            .where(
                professional_services.c.professional_id == professional_id,
                professional_services.c.service_id.in_(service_ids),
            )
        )
        return db.execute(stmt).scalar_one()

    @staticmethod
    def professionals_with_all_services(
        db: Session, service_ids: list[int], tenant_id: str
    ) -> list[int]:
        """Ids of active professionals of the tenant linked to every one of ``service_ids``"""
        stmt = (
            select(Professional.id)
            .join(professional_services, professional_services.c.professional_id == Professional.id)
            .where(
                Professional.tenant_id == tenant_id,
                Professional.active.is_(True),
                professional_services.c.service_id.in_(service_ids),
            )
            .group_by(Professional.id)
            .having(func.count(func.distinct(professional_services.c.service_id)) == len(service_ids))
            .order_by(Professional.id)
        )
        return list(db.execute(stmt).scalars())

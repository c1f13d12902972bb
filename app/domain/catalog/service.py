"""Catalog service - Business logic for offered services and who can perform them"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import BookingError
from ...models import Professional, Service
from ..tenants.repository import ProfessionalRepository
from .repository import QualificationRepository, ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


def unique_ids(ids: Optional[list[int]]) -> list[int]:
    """Drop repeated ids, keeping first-seen order"""
    return list(dict.fromkeys(ids or []))


class CatalogService:
    """Service layer for the tenant's service catalog"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, tenant_id: str) -> list[Service]:
        return self.repo.get_by_tenant(self.db, tenant_id)

    def get_service(self, service_id: int, tenant_id: str) -> Service:
        service = self.repo.get_by_id_and_tenant(self.db, service_id, tenant_id)
        if not service:
            raise BookingError.not_found("Service", service_id)
        return service

    def get_services_by_ids(self, service_ids: list[int], tenant_id: str) -> list[Service]:
        """Fetch every requested service, failing on the first id the tenant does not own"""
        ids = unique_ids(service_ids)
        found = {s.id: s for s in self.repo.get_by_ids_and_tenant(self.db, ids, tenant_id)}
        for service_id in ids:
            if service_id not in found:
                raise BookingError.not_found("Service", service_id)
        return [found[service_id] for service_id in ids]

    def total_duration(self, service_ids: Optional[list[int]], tenant_id: str) -> int:
        """Sum of durations in minutes; unknown ids are skipped"""
        ids = unique_ids(service_ids)
        found = {s.id: s for s in self.repo.get_by_ids_and_tenant(self.db, ids, tenant_id)}
        total = 0
        for service_id in ids:
            service = found.get(service_id)
            if service is None:
                logger.warning(f"⚠️ Service {service_id} not found for tenant {tenant_id}, ignoring its duration")
                continue
            total += service.duration
        return total

    def create_service(self, tenant_id: str, data: ServiceCreate) -> Service:
        logger.info(f"📥 Creating service {data.name} for tenant {tenant_id}")
        return self.repo.create(
            self.db, tenant_id, name=data.name, duration=data.duration, price=data.price
        )

    def update_service(self, service_id: int, tenant_id: str, data: ServiceUpdate) -> Service:
        """Only name, duration and price can change"""
        service = self.get_service(service_id, tenant_id)
        return self.repo.update(
            self.db, service, name=data.name, duration=data.duration, price=data.price
        )

    def delete_service(self, service_id: int, tenant_id: str, now: Optional[datetime] = None) -> None:
        """
        Delete a service unless an upcoming appointment still books it.
        Links to past appointments and to professionals are removed with it.
        """
        service = self.get_service(service_id, tenant_id)
        now = now or datetime.now()

        if self.repo.has_future_appointments(self.db, service.id, now.date(), now.time()):
            logger.warning(f"⚠️ Refusing to delete service {service.name}: future appointments use it")
            raise BookingError.business(
                f"Cannot delete service '{service.name}' because future appointments use it. "
                "Cancel or change those appointments first."
            )

        self.repo.delete_with_references(self.db, service)
        logger.info(f"✅ Service {service_id} deleted for tenant {tenant_id}")


class QualificationService:
    """Which professionals may perform which services"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = QualificationRepository()
        self.professionals = ProfessionalRepository()
        self.catalog = CatalogService(db)

    def _get_professional(self, professional_id: int, tenant_id: str) -> Professional:
        professional = self.professionals.get_by_id_and_tenant(self.db, professional_id, tenant_id)
        if not professional:
            raise BookingError.business("Professional not found or not part of this tenant")
        return professional

    def link_services(self, professional_id: int, service_ids: list[int], tenant_id: str) -> Professional:
        """Replace the professional's qualifications with exactly ``service_ids``"""
        professional = self._get_professional(professional_id, tenant_id)

        ids = unique_ids(service_ids)
        services = self.catalog.repo.get_by_ids_and_tenant(self.db, ids, professional.tenant_id)
        if len(services) != len(ids):
            raise BookingError.business("Some services do not exist or belong to another tenant")

        professional = self.repo.replace_links(self.db, professional, services)
        logger.info(f"✅ Linked {len(services)} services to professional {professional.name}")
        return professional

    def unlink_service(self, professional_id: int, service_id: int, tenant_id: str) -> None:
        professional = self._get_professional(professional_id, tenant_id)

        link = next((s for s in professional.services if s.id == service_id), None)
        if link is None:
            raise BookingError.business("Professional is not linked to this service")

        self.repo.remove_link(self.db, professional, link)
        logger.info(f"✅ Service {service_id} unlinked from professional {professional.name}")

    def get_services_for_professional(self, professional_id: int, tenant_id: str) -> list[Service]:
        return list(self._get_professional(professional_id, tenant_id).services)

    def professional_executes_all_services(self, professional_id: int, service_ids: list[int]) -> bool:
        """All-or-nothing qualification check; an empty request never qualifies"""
        ids = unique_ids(service_ids)
        if not ids:
            return False
        return self.repo.count_linked(self.db, professional_id, ids) == len(ids)

    def get_professionals_by_services(self, service_ids: Optional[list[int]], tenant_id: str) -> list[int]:
        ids = unique_ids(service_ids)
        if not ids:
            return [p.id for p in self.professionals.get_by_tenant(self.db, tenant_id, active_only=True)]
        return self.repo.professionals_with_all_services(self.db, ids, tenant_id)

"""Tenant service - Business logic for tenants and professionals"""

import logging

from sqlalchemy.orm import Session

from ...errors import BookingError
from ...models import Professional, Tenant
from .repository import ProfessionalRepository, TenantRepository
from .schemas import ProfessionalCreate, ProfessionalUpdate, TenantCreate, TenantUpdate

logger = logging.getLogger(__name__)


class TenantService:
    """Service layer for tenant business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TenantRepository()

    def get_all_tenants(self) -> list[Tenant]:
        return self.repo.get_all(self.db)

    def get_all_active_tenant_keys(self) -> list[str]:
        return self.repo.get_active_keys(self.db)

    def get_tenant(self, tenant_pk: int) -> Tenant:
        tenant = self.repo.get_by_id(self.db, tenant_pk)
        if not tenant:
            raise BookingError.not_found("Tenant", tenant_pk)
        return tenant

    def get_tenant_by_key(self, tenant_key: str) -> Tenant:
        tenant = self.repo.get_by_key(self.db, tenant_key)
        if not tenant:
            raise BookingError.not_found("Tenant", tenant_key)
        return tenant

    def get_active_tenant(self, tenant_key: str) -> Tenant:
        """Tenant that may take bookings; unknown and inactive tenants are both rejected"""
        tenant = self.repo.get_by_key(self.db, tenant_key)
        if not tenant or not tenant.active:
            logger.warning(f"⚠️ Tenant {tenant_key} is unknown or inactive")
            raise BookingError.business("tenant or professional invalid")
        return tenant

    def create_tenant(self, data: TenantCreate) -> Tenant:
        logger.info(f"📥 Creating tenant: {data.tenant_key}")

        if self.repo.get_by_key(self.db, data.tenant_key):
            raise BookingError.business(f"Tenant key already in use: {data.tenant_key}")

        tenant = self.repo.create(
            self.db,
            tenant_key=data.tenant_key,
            business_name=data.business_name,
            contact_email=data.contact_email,
            contact_phone=data.contact_phone,
            active=True,
        )
        logger.info(f"✅ Tenant created: {tenant.tenant_key} (id={tenant.id})")
        return tenant

    def update_tenant(self, tenant_pk: int, data: TenantUpdate) -> Tenant:
        tenant = self.get_tenant(tenant_pk)
        return self.repo.update(
            self.db,
            tenant,
            business_name=data.business_name,
            contact_email=data.contact_email,
            contact_phone=data.contact_phone,
        )

    def set_tenant_active(self, tenant_pk: int, active: bool) -> Tenant:
        tenant = self.get_tenant(tenant_pk)
        tenant.active = active
        self.db.commit()
        self.db.refresh(tenant)
        logger.info(f"✅ Tenant {tenant.tenant_key} {'activated' if active else 'deactivated'}")
        return tenant


class ProfessionalService:
    """Service layer for professionals of a tenant"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfessionalRepository()

    def get_professionals(self, tenant_id: str) -> list[Professional]:
        return self.repo.get_by_tenant(self.db, tenant_id)

    def get_active_professionals(self, tenant_id: str) -> list[Professional]:
        return self.repo.get_by_tenant(self.db, tenant_id, active_only=True)

    def get_professional(self, professional_id: int, tenant_id: str) -> Professional:
        professional = self.repo.get_by_id_and_tenant(self.db, professional_id, tenant_id)
        if not professional:
            raise BookingError.not_found("Professional", professional_id)
        return professional

    def get_active_professional(self, professional_id: int, tenant_id: str) -> Professional:
        """Professional that may take bookings for this tenant"""
        professional = self.repo.get_by_id_and_tenant(self.db, professional_id, tenant_id)
        if not professional or not professional.active:
            logger.warning(
                f"⚠️ Professional {professional_id} is unknown, inactive or outside tenant {tenant_id}"
            )
            raise BookingError.business("tenant or professional invalid")
        return professional

    def validate_professional_belongs_to_tenant(self, professional_id: int, tenant_id: str) -> None:
        professional = self.repo.get_by_id(self.db, professional_id)
        if not professional:
            raise BookingError.not_found("Professional", professional_id)
        if professional.tenant_id != tenant_id:
            raise BookingError.forbidden("Professional", professional_id)

    def create_professional(self, tenant_id: str, data: ProfessionalCreate) -> Professional:
        logger.info(f"📥 Creating professional {data.name} for tenant {tenant_id}")
        return self.repo.create(
            self.db,
            tenant_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            active=True,
        )

    def update_professional(
        self, professional_id: int, tenant_id: str, data: ProfessionalUpdate
    ) -> Professional:
        professional = self.get_professional(professional_id, tenant_id)
        return self.repo.update(
            self.db, professional, name=data.name, email=data.email, phone=data.phone
        )

    def set_professional_active(self, professional_id: int, tenant_id: str, active: bool) -> Professional:
        professional = self.get_professional(professional_id, tenant_id)
        professional.active = active
        self.db.commit()
        self.db.refresh(professional)
        logger.info(
            f"✅ Professional {professional.name} {'activated' if active else 'deactivated'}"
        )
        return professional

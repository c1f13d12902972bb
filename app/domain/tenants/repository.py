"""Tenant repository - Database operations for tenants and professionals"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Professional, Tenant


class TenantRepository:
    """Repository for tenant database operations"""

    @staticmethod
    def get_by_id(db: Session, tenant_pk: int) -> Optional[Tenant]:
        return db.query(Tenant).filter(Tenant.id == tenant_pk).first()

    @staticmethod
    def get_by_key(db: Session, tenant_key: str) -> Optional[Tenant]:
        return db.query(Tenant).filter(Tenant.tenant_key == tenant_key).first()

    @staticmethod
    def get_all(db: Session) -> list[Tenant]:
        return db.query(Tenant).order_by(Tenant.tenant_key).all()

    @staticmethod
    def get_active_keys(db: Session) -> list[str]:
        """Keys of every active tenant, used by the reminder sweep"""
        rows = (
            db.query(Tenant.tenant_key)
            .filter(Tenant.active.is_(True))
            .order_by(Tenant.tenant_key)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def create(db: Session, **tenant_data) -> Tenant:
        tenant = Tenant(**tenant_data)
        db.add(tenant)
        db.commit()
        db.refresh(tenant)
        return tenant

    @staticmethod
    def update(db: Session, tenant: Tenant, **updates) -> Tenant:
        """Update a tenant with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(tenant, key):
                setattr(tenant, key, value)

        db.commit()
        db.refresh(tenant)
        return tenant


class ProfessionalRepository:
    """Repository for professional database operations"""

    @staticmethod
    def get_by_id(db: Session, professional_id: int) -> Optional[Professional]:
        return db.query(Professional).filter(Professional.id == professional_id).first()

    @staticmethod
    def get_by_id_and_tenant(db: Session, professional_id: int, tenant_id: str) -> Optional[Professional]:
        return (
            db.query(Professional)
            .filter(Professional.id == professional_id, Professional.tenant_id == tenant_id)
            .first()
        )

    @staticmethod
    def get_by_tenant(db: Session, tenant_id: str, active_only: bool = False) -> list[Professional]:
        query = db.query(Professional).filter(Professional.tenant_id == tenant_id)

        if active_only:
            query = query.filter(Professional.active.is_(True))

        return query.order_by(Professional.name).all()

    @staticmethod
    def create(db: Session, tenant_id: str, **professional_data) -> Professional:
        professional = Professional(tenant_id=tenant_id, **professional_data)
        db.add(professional)
        db.commit()
        db.refresh(professional)
        return professional

    @staticmethod
    def update(db: Session, professional: Professional, **updates) -> Professional:
        for key, value in updates.items():
            if value is not None and hasattr(professional, key):
                setattr(professional, key, value)

        db.commit()
        db.refresh(professional)
        return professional

"""Tenant router - FastAPI endpoints for tenants and professionals"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.tenancy import get_tenant_id
from .schemas import (
    ProfessionalCreate,
    ProfessionalResponse,
    ProfessionalUpdate,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
)
from .service import ProfessionalService, TenantService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["Tenants"])
professionals_router = APIRouter(prefix="/professionals", tags=["Professionals"])


def get_tenant_service(db: Session = Depends(get_db)) -> TenantService:
    """Dependency injection for TenantService"""
    return TenantService(db)


def get_professional_service(db: Session = Depends(get_db)) -> ProfessionalService:
    """Dependency injection for ProfessionalService"""
    return ProfessionalService(db)


# ============================================================================
# TENANTS
# ============================================================================


@router.post("", response_model=TenantResponse, status_code=201)
def create_tenant(data: TenantCreate, service: TenantService = Depends(get_tenant_service)):
    return service.create_tenant(data)


@router.get("", response_model=list[TenantResponse])
def list_tenants(service: TenantService = Depends(get_tenant_service)):
    return service.get_all_tenants()


@router.get("/{tenant_pk}", response_model=TenantResponse)
def get_tenant(tenant_pk: int, service: TenantService = Depends(get_tenant_service)):
    return service.get_tenant(tenant_pk)


@router.put("/{tenant_pk}", response_model=TenantResponse)
def update_tenant(
    tenant_pk: int, data: TenantUpdate, service: TenantService = Depends(get_tenant_service)
):
    return service.update_tenant(tenant_pk, data)


@router.patch("/{tenant_pk}/activate", response_model=TenantResponse)
def activate_tenant(tenant_pk: int, service: TenantService = Depends(get_tenant_service)):
    return service.set_tenant_active(tenant_pk, True)


@router.patch("/{tenant_pk}/deactivate", response_model=TenantResponse)
def deactivate_tenant(tenant_pk: int, service: TenantService = Depends(get_tenant_service)):
    return service.set_tenant_active(tenant_pk, False)


# ============================================================================
# PROFESSIONALS
# ============================================================================


@professionals_router.post("", response_model=ProfessionalResponse, status_code=201)
def create_professional(
    data: ProfessionalCreate,
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.create_professional(tenant_id, data)


@professionals_router.get("", response_model=list[ProfessionalResponse])
def list_professionals(
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.get_professionals(tenant_id)


@professionals_router.get("/active", response_model=list[ProfessionalResponse])
def list_active_professionals(
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.get_active_professionals(tenant_id)


@professionals_router.get("/{professional_id}", response_model=ProfessionalResponse)
def get_professional(
    professional_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.get_professional(professional_id, tenant_id)


@professionals_router.put("/{professional_id}", response_model=ProfessionalResponse)
def update_professional(
    professional_id: int,
    data: ProfessionalUpdate,
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.update_professional(professional_id, tenant_id, data)


@professionals_router.patch("/{professional_id}/activate", response_model=ProfessionalResponse)
def activate_professional(
    professional_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.set_professional_active(professional_id, tenant_id, True)


@professionals_router.patch("/{professional_id}/deactivate", response_model=ProfessionalResponse)
def deactivate_professional(
    professional_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: ProfessionalService = Depends(get_professional_service),
):
    return service.set_professional_active(professional_id, tenant_id, False)

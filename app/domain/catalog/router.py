"""Catalog router - FastAPI endpoints for services and professional qualifications"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.tenancy import get_tenant_id
from .schemas import (
    LinkServicesRequest,
    ProfessionalServicesResponse,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from .service import CatalogService, QualificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["Services"])
qualifications_router = APIRouter(prefix="/professionals", tags=["Professionals"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def get_qualification_service(db: Session = Depends(get_db)) -> QualificationService:
    """Dependency injection for QualificationService"""
    return QualificationService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.post("", response_model=ServiceResponse, status_code=201)
def create_service(
    data: ServiceCreate,
    tenant_id: str = Depends(get_tenant_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.create_service(tenant_id, data)


@router.get("", response_model=list[ServiceResponse])
def list_services(
    tenant_id: str = Depends(get_tenant_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_services(tenant_id)


@router.get("/professionals", response_model=list[int])
def get_qualified_professionals(
    service_ids: Optional[list[int]] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: QualificationService = Depends(get_qualification_service),
):
    """Professionals able to perform every requested service (all active ones when none given)"""
    return service.get_professionals_by_services(service_ids, tenant_id)


@router.get("/{service_id}", response_model=ServiceResponse)
def get_service(
    service_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.get_service(service_id, tenant_id)


@router.put("/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    data: ServiceUpdate,
    tenant_id: str = Depends(get_tenant_id),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.update_service(service_id, tenant_id, data)


@router.delete("/{service_id}", status_code=204)
def delete_service(
    service_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: CatalogService = Depends(get_catalog_service),
):
    service.delete_service(service_id, tenant_id)


# ============================================================================
# PROFESSIONAL QUALIFICATIONS
# ============================================================================


def _qualification_response(professional) -> ProfessionalServicesResponse:
    return ProfessionalServicesResponse(
        professional_id=professional.id,
        professional_name=professional.name,
        services=[ServiceResponse.model_validate(s) for s in professional.services],
    )


@qualifications_router.put("/{professional_id}/services", response_model=ProfessionalServicesResponse)
def link_services(
    professional_id: int,
    data: LinkServicesRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: QualificationService = Depends(get_qualification_service),
):
    professional = service.link_services(professional_id, data.service_ids, tenant_id)
    return _qualification_response(professional)


@qualifications_router.get("/{professional_id}/services", response_model=list[ServiceResponse])
def get_professional_services(
    professional_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: QualificationService = Depends(get_qualification_service),
):
    return service.get_services_for_professional(professional_id, tenant_id)


@qualifications_router.delete("/{professional_id}/services/{service_id}", status_code=204)
def unlink_service(
    professional_id: int,
    service_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: QualificationService = Depends(get_qualification_service),
):
    service.unlink_service(professional_id, service_id, tenant_id)

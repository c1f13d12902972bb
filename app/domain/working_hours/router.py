"""Working hours router"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.tenancy import get_tenant_id
from .schemas import WorkingHoursResponse, WorkingHoursUpdate
from .service import WorkingHoursService

router = APIRouter(prefix="/working-hours", tags=["Working Hours"])


def get_working_hours_service(db: Session = Depends(get_db)) -> WorkingHoursService:
    """Dependency injection for WorkingHoursService"""
    return WorkingHoursService(db)


@router.get("", response_model=WorkingHoursResponse)
def get_working_hours(
    professional_id: Optional[int] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: WorkingHoursService = Depends(get_working_hours_service),
):
    """Effective working hours, including the default when nothing is configured"""
    return service.resolve(tenant_id, professional_id)


@router.put("", response_model=WorkingHoursResponse)
def configure_working_hours(
    data: WorkingHoursUpdate,
    professional_id: Optional[int] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: WorkingHoursService = Depends(get_working_hours_service),
):
    service.configure(tenant_id, data, professional_id)
    return service.resolve(tenant_id, professional_id)


@router.delete("", status_code=204)
def delete_working_hours(
    professional_id: Optional[int] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: WorkingHoursService = Depends(get_working_hours_service),
):
    service.delete(tenant_id, professional_id)

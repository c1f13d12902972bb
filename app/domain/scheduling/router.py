"""Scheduling router - Availability endpoints"""

import logging
from datetime import date, time
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.tenancy import get_tenant_id
from .availability_service import AvailabilityService
from .schemas import AvailableSlotsResponse, DateAvailabilityResponse, SlotCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("/slots", response_model=AvailableSlotsResponse)
def get_available_slots(
    professional_id: int = Query(...),
    day: date = Query(..., alias="date"),
    service_ids: Optional[list[int]] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Start times a client can book for the given services"""
    logger.info(f"📥 Slots requested: tenant={tenant_id} professional={professional_id} date={day}")
    slots = service.compute_available_slots(tenant_id, professional_id, day, service_ids)
    return AvailableSlotsResponse(
        professional_id=professional_id,
        date=day,
        service_ids=service_ids or [],
        slots=[s.strftime("%H:%M") for s in slots],
    )


@router.get("/info", response_model=DateAvailabilityResponse)
def get_date_availability(
    professional_id: int = Query(...),
    day: date = Query(..., alias="date"),
    service_ids: Optional[list[int]] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    return service.get_date_availability_info(tenant_id, professional_id, day, service_ids)


@router.get("/check", response_model=SlotCheckResponse)
def check_time_slot(
    professional_id: int = Query(...),
    day: date = Query(..., alias="date"),
    start_time: time = Query(...),
    duration_minutes: int = Query(..., gt=0),
    tenant_id: str = Depends(get_tenant_id),
    service: AvailabilityService = Depends(get_availability_service),
):
    available = service.is_time_slot_available(
        tenant_id, professional_id, day, start_time, duration_minutes
    )
    return SlotCheckResponse(
        professional_id=professional_id,
        date=day,
        start_time=start_time.strftime("%H:%M"),
        duration_minutes=duration_minutes,
        available=available,
    )

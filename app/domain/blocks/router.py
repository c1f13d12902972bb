"""Block router - FastAPI endpoints for day closures and interval blocks"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.tenancy import get_tenant_id
from .schemas import (
    BlockedDayResponse,
    BlockedTimeSlotResponse,
    BlockRecurringDayRequest,
    BlockRecurringIntervalRequest,
    BlockSpecificDateRequest,
    BlockSpecificIntervalRequest,
)
from .service import BlockService

logger = logging.getLogger(__name__)

days_router = APIRouter(prefix="/blocked-days", tags=["Blocked Days"])
slots_router = APIRouter(prefix="/blocked-time-slots", tags=["Blocked Time Slots"])


def get_block_service(db: Session = Depends(get_db)) -> BlockService:
    """Dependency injection for BlockService"""
    return BlockService(db)


# ============================================================================
# DAY BLOCKS
# ============================================================================


@days_router.post("/specific", response_model=BlockedDayResponse, status_code=201)
def block_specific_date(
    data: BlockSpecificDateRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.block_specific_date(tenant_id, data.date, data.reason)


@days_router.post("/recurring", response_model=BlockedDayResponse, status_code=201)
def block_recurring_day(
    data: BlockRecurringDayRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.block_recurring_day(tenant_id, data.day_of_week, data.reason)


@days_router.get("", response_model=list[BlockedDayResponse])
def list_blocked_days(
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.get_blocked_days(tenant_id)


@days_router.get("/specific", response_model=list[BlockedDayResponse])
def list_specific_blocked_dates(
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.get_specific_blocked_dates(tenant_id)


@days_router.get("/recurring", response_model=list[BlockedDayResponse])
def list_recurring_blocked_days(
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.get_recurring_blocked_days(tenant_id)


@days_router.get("/available", response_model=list[date])
def list_available_dates(
    start_date: date = Query(...),
    end_date: date = Query(...),
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    """Open dates between start_date and end_date, inclusive"""
    return service.get_available_dates(tenant_id, start_date, end_date)


@days_router.delete("/{block_id}", status_code=204)
def unblock_day(
    block_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    service.unblock_day(tenant_id, block_id)


# ============================================================================
# INTERVAL BLOCKS
# ============================================================================


@slots_router.post("/specific", response_model=BlockedTimeSlotResponse, status_code=201)
def block_specific_interval(
    data: BlockSpecificIntervalRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.block_interval(
        tenant_id, data.date, data.start_time, data.end_time, data.reason, data.professional_id
    )


@slots_router.post("/recurring", response_model=BlockedTimeSlotResponse, status_code=201)
def block_recurring_interval(
    data: BlockRecurringIntervalRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.block_recurring_interval(
        tenant_id, data.day_of_week, data.start_time, data.end_time, data.reason, data.professional_id
    )


@slots_router.get("/date/{day}", response_model=list[BlockedTimeSlotResponse])
def list_blocks_for_date(
    day: date,
    professional_id: Optional[int] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.get_blocked_intervals(tenant_id, day, professional_id)


@slots_router.get("/recurring", response_model=list[BlockedTimeSlotResponse])
def list_recurring_blocks(
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.get_recurring_blocked_intervals(tenant_id)


@slots_router.get("/specific", response_model=list[BlockedTimeSlotResponse])
def list_specific_blocks(
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    return service.get_specific_blocked_intervals(tenant_id)


@slots_router.delete("/{block_id}", status_code=204)
def unblock_interval(
    block_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: BlockService = Depends(get_block_service),
):
    service.unblock_interval(tenant_id, block_id)

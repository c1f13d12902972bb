"""Appointment router - FastAPI endpoints for bookings"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import BookingError
from ...services.notification_service import get_default_sender
from ...shared.tenancy import get_tenant_id
from ...shared.validators import validate_phone
from .schemas import AppointmentCreate, AppointmentResponse
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_notification_sender():
    """Dependency for the outbound notification sender (overridden in tests)"""
    return get_default_sender()


def get_appointment_service(
    db: Session = Depends(get_db), sender=Depends(get_notification_sender)
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, sender=sender)


def _normalized_phone(phone: str) -> str:
    try:
        return validate_phone(phone)
    except ValueError as e:
        raise BookingError.business(str(e)) from None


# ============================================================================
# BOOKING
# ============================================================================


@router.post("", response_model=AppointmentResponse, status_code=201)
def create_appointment(
    data: AppointmentCreate,
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.create_appointment(
        tenant_id,
        data.professional_id,
        data.service_ids,
        data.date,
        data.start_time,
        data.client_name,
        data.client_phone,
    )


@router.delete("/{appointment_id}", status_code=204)
def cancel_appointment(
    appointment_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    service.cancel_appointment(tenant_id, appointment_id)


# ============================================================================
# QUERIES
# ============================================================================


@router.get("", response_model=list[AppointmentResponse])
def list_appointments(
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_all_appointments(tenant_id)


@router.get("/date/{day}", response_model=list[AppointmentResponse])
def list_appointments_by_date(
    day: date,
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointments_by_date(tenant_id, day)


@router.get("/future", response_model=list[AppointmentResponse])
def list_future_appointments(
    phone: str = Query(...),
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Client's upcoming appointments, soonest first"""
    return service.get_future_appointments_by_phone(tenant_id, _normalized_phone(phone))


@router.get("/past", response_model=list[AppointmentResponse])
def list_past_appointments(
    phone: str = Query(...),
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Client's history, most recent first"""
    return service.get_past_appointments_by_phone(tenant_id, _normalized_phone(phone))


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: int,
    tenant_id: str = Depends(get_tenant_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointment(tenant_id, appointment_id)

"""Appointment domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_phone


class AppointmentCreate(BaseModel):
    """Schema for booking one or more services with a professional"""

    professional_id: int
    service_ids: list[int]
    date: dt.date
    start_time: dt.time
    client_name: str
    client_phone: str

    @field_validator("service_ids")
    @classmethod
    def validate_service_ids(cls, v):
        if not v:
            raise ValueError("At least one service is required")
        return v

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v):
        if v.second or v.microsecond:
            raise ValueError("start_time must be on a whole minute (HH:MM)")
        return v

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v):
        if not v or not v.strip():
            raise ValueError("client_name is required")
        return v.strip()

    @field_validator("client_phone")
    @classmethod
    def validate_client_phone(cls, v):
        return validate_phone(v)


class AppointmentServiceItem(BaseModel):
    id: int
    name: str
    duration: int
    price: float

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: int
    tenant_id: str
    professional_id: int
    professional_name: Optional[str] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    client_name: str
    client_phone: str
    reminder_sent: bool
    services: list[AppointmentServiceItem]
    total_price: float

    class Config:
        from_attributes = True

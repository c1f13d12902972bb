"""Catalog domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator


def _check_duration(v):
    if v is not None and v <= 0:
        raise ValueError("duration must be a positive number of minutes")
    return v


def _check_price(v):
    if v is not None and v < 0:
        raise ValueError("price cannot be negative")
    return v


class ServiceCreate(BaseModel):
    """Schema for adding a service to the catalog"""

    name: str
    duration: int  # minutes
    price: float = 0.0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _check_duration(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    duration: Optional[int] = None
    price: Optional[float] = None

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _check_duration(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _check_price(v)


class ServiceResponse(BaseModel):
    id: int
    tenant_id: str
    name: str
    duration: int
    price: float

    class Config:
        from_attributes = True


class LinkServicesRequest(BaseModel):
    """Full replacement of a professional's qualifications"""

    service_ids: list[int]


class ProfessionalServicesResponse(BaseModel):
    professional_id: int
    professional_name: str
    services: list[ServiceResponse]

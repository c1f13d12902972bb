"""Tenant domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone, validate_tenant_key


class TenantCreate(BaseModel):
    """Schema for registering a salon"""

    tenant_key: str
    business_name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None

    @field_validator("tenant_key")
    @classmethod
    def validate_key(cls, v):
        return validate_tenant_key(v)

    @field_validator("business_name")
    @classmethod
    def validate_business_name(cls, v):
        if not v or not v.strip():
            raise ValueError("business_name is required")
        return v.strip()

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v):
        return validate_email(v)

    @field_validator("contact_phone")
    @classmethod
    def validate_contact_phone(cls, v):
        return validate_phone(v)


class TenantUpdate(BaseModel):
    business_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v):
        return validate_email(v)

    @field_validator("contact_phone")
    @classmethod
    def validate_contact_phone(cls, v):
        return validate_phone(v)


class TenantResponse(BaseModel):
    id: int
    tenant_key: str
    business_name: str
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfessionalCreate(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_professional_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_professional_phone(cls, v):
        return validate_phone(v)


class ProfessionalUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_professional_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_professional_phone(cls, v):
        return validate_phone(v)


class ProfessionalResponse(BaseModel):
    id: int
    tenant_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    active: bool

    class Config:
        from_attributes = True

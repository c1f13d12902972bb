"""Tenant resolution - reads the tenant key from the request header"""

from typing import Optional

from fastapi import Header

from ..config import TENANT_HEADER
from ..errors import BookingError


def normalize_tenant_id(tenant_id: Optional[str]) -> str:
    if not tenant_id or not tenant_id.strip():
        raise BookingError.business(f"{TENANT_HEADER} header is required")
    return tenant_id.strip().lower()


def get_tenant_id(x_tenant_id: Optional[str] = Header(None, alias=TENANT_HEADER)) -> str:
    """FastAPI dependency returning the caller's tenant key, passed explicitly to every service call"""
    return normalize_tenant_id(x_tenant_id)

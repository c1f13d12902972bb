"""Shared validation utilities"""

import re
from typing import Optional

TENANT_KEY_PATTERN = r"^[a-z0-9\-_]+$"


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an international phone number to E.164 format.

    Args:
        phone: Phone number string in various formats ("+55 (11) 99999-9999", "5511999999999")

    Returns:
        Normalized phone number in E.164 format (+XXXXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    # Remove all non-digit characters
    digits = re.sub(r"\D", "", phone)

    # E.164 allows at most 15 digits; anything under 10 cannot carry a country code
    if len(digits) < 10 or len(digits) > 15:
        raise ValueError("Phone number must have between 10 and 15 digits including country code")

    return f"+{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_tenant_key(tenant_key: str) -> str:
    """
    Validate a tenant key (lowercase letters, digits, hyphens, underscores).

    Raises:
        ValueError: If the key is empty or has other characters
    """
    if not tenant_key or not tenant_key.strip():
        raise ValueError("Tenant key is required")

    tenant_key = tenant_key.strip().lower()
    if not re.match(TENANT_KEY_PATTERN, tenant_key):
        raise ValueError("Tenant key may only contain lowercase letters, numbers, hyphens and underscores")

    return tenant_key


def validate_weekday(day_of_week: int) -> int:
    """Weekday number with Monday=0 ... Sunday=6"""
    if day_of_week is None or not 0 <= day_of_week <= 6:
        raise ValueError("day_of_week must be between 0 (Monday) and 6 (Sunday)")
    return day_of_week

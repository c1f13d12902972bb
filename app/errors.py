"""
Booking errors

One exception type tagged with an ErrorKind. Callers branch on ``error.kind`` and
read the structured fields instead of catching a family of subclasses.
"""

from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_BLOCK = "duplicate_block"
    CONFLICTING_BLOCK = "conflicting_block"
    INVALID_INTERVAL = "invalid_interval"
    BUSINESS = "business"
    APPOINTMENT_CONFLICT = "appointment_conflict"
    FORBIDDEN = "forbidden"


STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_BLOCK: 409,
    ErrorKind.CONFLICTING_BLOCK: 409,
    ErrorKind.APPOINTMENT_CONFLICT: 409,
    ErrorKind.INVALID_INTERVAL: 400,
    ErrorKind.BUSINESS: 400,
    ErrorKind.FORBIDDEN: 403,
}


@dataclass(frozen=True)
class TimeInterval:
    """Half-open [start, end) range within one day"""

    start: time
    end: time

    def __str__(self) -> str:
        return f"{self.start:%H:%M} - {self.end:%H:%M}"

    def to_dict(self) -> dict:
        return {"start": self.start.strftime("%H:%M"), "end": self.end.strftime("%H:%M")}


class BookingError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        resource: Optional[str] = None,
        identifier: Any = None,
        requested: Optional[TimeInterval] = None,
        existing: Optional[TimeInterval] = None,
        existing_client: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.resource = resource
        self.identifier = identifier
        self.requested = requested
        self.existing = existing
        self.existing_client = existing_client

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    @classmethod
    def not_found(cls, resource: str, identifier: Any) -> "BookingError":
        return cls(
            ErrorKind.NOT_FOUND,
            f"{resource} not found with identifier: {identifier}",
            resource=resource,
            identifier=identifier,
        )

    @classmethod
    def business(cls, message: str) -> "BookingError":
        return cls(ErrorKind.BUSINESS, message)

    @classmethod
    def invalid_interval(cls, message: str, requested: Optional[TimeInterval] = None) -> "BookingError":
        return cls(ErrorKind.INVALID_INTERVAL, message, requested=requested)

    @classmethod
    def duplicate_block(cls, message: str) -> "BookingError":
        return cls(ErrorKind.DUPLICATE_BLOCK, message)

    @classmethod
    def conflicting_block(cls, requested: TimeInterval, existing: TimeInterval) -> "BookingError":
        return cls(
            ErrorKind.CONFLICTING_BLOCK,
            f"Blocked interval ({requested}) overlaps existing block ({existing})",
            requested=requested,
            existing=existing,
        )

    @classmethod
    def forbidden(cls, resource: str, identifier: Any) -> "BookingError":
        return cls(
            ErrorKind.FORBIDDEN,
            f"{resource} {identifier} belongs to another tenant",
            resource=resource,
            identifier=identifier,
        )

    @classmethod
    def conflict(
        cls, requested: TimeInterval, existing: TimeInterval, client_name: str
    ) -> "BookingError":
        return cls(
            ErrorKind.APPOINTMENT_CONFLICT,
            f"Selected time ({requested}) conflicts with existing appointment ({existing}) of {client_name}",
            requested=requested,
            existing=existing,
            existing_client=client_name,
        )

    def to_dict(self) -> dict:
        """Client-facing fields, without the status/timestamp envelope"""
        payload = {"kind": self.kind.value, "message": self.message}
        if self.resource is not None:
            payload["resource"] = self.resource
            payload["identifier"] = self.identifier
        if self.requested is not None:
            payload["requested"] = self.requested.to_dict()
        if self.existing is not None:
            payload["existing"] = self.existing.to_dict()
        if self.existing_client is not None:
            payload["existing_client"] = self.existing_client
        return payload

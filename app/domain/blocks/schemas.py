"""Block domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_weekday


def _require_reason(v):
    if not v or not v.strip():
        raise ValueError("reason is required")
    return v.strip()


class BlockSpecificDateRequest(BaseModel):
    date: dt.date
    reason: str

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return _require_reason(v)


class BlockRecurringDayRequest(BaseModel):
    day_of_week: int  # 0=Monday ... 6=Sunday
    reason: str

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v):
        return validate_weekday(v)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return _require_reason(v)


class BlockedDayResponse(BaseModel):
    id: int
    tenant_id: str
    specific_date: Optional[dt.date] = None
    day_of_week: Optional[int] = None
    recurring: bool
    reason: str

    class Config:
        from_attributes = True


class BlockSpecificIntervalRequest(BaseModel):
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    reason: str
    professional_id: Optional[int] = None  # None blocks the whole tenant

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return _require_reason(v)


class BlockRecurringIntervalRequest(BaseModel):
    day_of_week: int
    start_time: dt.time
    end_time: dt.time
    reason: str
    professional_id: Optional[int] = None

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v):
        return validate_weekday(v)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return _require_reason(v)


class BlockedTimeSlotResponse(BaseModel):
    id: int
    tenant_id: str
    professional_id: Optional[int] = None
    specific_date: Optional[dt.date] = None
    day_of_week: Optional[int] = None
    recurring: bool
    start_time: dt.time
    end_time: dt.time
    reason: str

    class Config:
        from_attributes = True

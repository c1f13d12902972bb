"""Scheduling schemas"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class AvailableSlotsResponse(BaseModel):
    professional_id: int
    date: dt.date
    service_ids: list[int]
    slots: list[str]  # "HH:MM", ascending


class DateAvailabilityResponse(BaseModel):
    date: dt.date
    total_slots: int
    available_slots: int
    fully_blocked: bool
    block_reason: Optional[str] = None
    occupied_slots: int
    occupancy_rate: float
    is_available: bool


class SlotCheckResponse(BaseModel):
    professional_id: int
    date: dt.date
    start_time: str
    duration_minutes: int
    available: bool

"""Working hours schemas"""

from datetime import time
from typing import Optional

from pydantic import BaseModel, model_validator


class WorkingHoursUpdate(BaseModel):
    start_time: time
    end_time: time
    slot_interval_minutes: int = 30

    @model_validator(mode="after")
    def validate_window(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class WorkingHoursResponse(BaseModel):
    start_time: time
    end_time: time
    slot_interval_minutes: int
    configured: bool
    professional_id: Optional[int] = None

    class Config:
        from_attributes = True

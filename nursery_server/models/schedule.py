"""
Schedule slot models
"""

from typing import Optional

from pydantic import BaseModel, Field

from .base import BaseEntity, DayOfWeek
from .settings import TIME_PATTERN


class ScheduleSlotIn(BaseModel):
    """Slot as submitted in a batch"""

    model_config = {"use_enum_values": True}

    day_of_week: DayOfWeek
    start_time: str = Field(..., pattern=TIME_PATTERN, description="HH:MM")
    end_time: str = Field(..., pattern=TIME_PATTERN, description="HH:MM")
    activity: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=100)


class ScheduleSlot(ScheduleSlotIn, BaseEntity):
    """Stored slot"""
    id: int
    schedule_period_id: int

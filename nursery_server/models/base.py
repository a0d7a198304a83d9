"""
Base data models
Shared model base classes and enums used across periods and their entries.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class TimestampMixin(BaseModel):
    """Timestamp mixin"""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BaseEntity(BaseModel):
    """Base entity model"""

    model_config = {"from_attributes": True, "use_enum_values": True}


class DayOfWeek(str, Enum):
    """Operating days of the facility"""
    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"


# Week order used for sorting and for weekly views
WEEK_DAYS = [day.value for day in DayOfWeek]


def day_rank(day: str) -> int:
    """Position of a day in the operating week"""
    return WEEK_DAYS.index(day)

"""
Period models
A period is a date range owning one week of slots (schedules) or meals
(menus) for a single scope: a classroom or an age category.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from .base import BaseEntity, TimestampMixin


class PeriodKind(str, Enum):
    """How a period is created"""
    CURRENT = "current"        # starts today, active immediately
    SCHEDULED = "scheduled"    # future dated, activated by the sweep


class Period(BaseEntity, TimestampMixin):
    """Stored period"""
    id: int
    scope_key: Union[int, str] = Field(..., description="Classroom id or menu category")
    name: str
    start_date: date
    end_date: Optional[date] = None
    is_active: bool = False


class PeriodDetail(Period):
    """Period with its ordered entries"""
    entries: List[Dict[str, Any]] = Field(default_factory=list)


class PeriodCreate(BaseModel):
    """Period creation data"""
    name: Optional[str] = Field(None, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PeriodUpdate(BaseModel):
    """Period date change"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

"""
Period request schemas
"""

from typing import List

from pydantic import BaseModel, Field

from ..models.menu import Category, MenuMealIn
from ..models.period import PeriodCreate, PeriodUpdate
from ..models.schedule import ScheduleSlotIn


class PeriodCreateRequest(PeriodCreate):
    """Schedule period creation; dates are calendar days (UTC)"""


class MenuPeriodCreateRequest(PeriodCreate):
    """Menu period creation"""
    category: Category


class PeriodUpdateRequest(PeriodUpdate):
    """Period date change; send end_date null to make the period open-ended"""


class ScheduleSlotsRequest(BaseModel):
    """Full slot set of a schedule period"""
    slots: List[ScheduleSlotIn] = Field(..., description="Replaces every slot of the period")


class MenuMealsRequest(BaseModel):
    """Full meal set of a menu period"""
    meals: List[MenuMealIn] = Field(..., description="Replaces every meal of the period")

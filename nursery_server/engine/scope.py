"""
Period families.

Schedules and menus share one lifecycle; a PeriodScope names the tables and
columns of a family and the rules its entries follow, so the store, sweep and
validator stay generic.
"""

from dataclasses import dataclass
from typing import Tuple, Type, Union

from pydantic import BaseModel

from ..config.settings import settings
from ..models.menu import MenuMeal, MenuMealIn
from ..models.schedule import ScheduleSlot, ScheduleSlotIn
from .rules import MenuRules, ScheduleRules


@dataclass(frozen=True)
class PeriodScope:
    name: str
    period_table: str
    scope_column: str
    entry_table: str
    entry_fk: str
    entry_fields: Tuple[str, ...]
    entry_in_model: Type[BaseModel]
    entry_model: Type[BaseModel]
    rules: Union[ScheduleRules, MenuRules]


SCHEDULE_SCOPE = PeriodScope(
    name="schedule",
    period_table="schedule_periods",
    scope_column="classroom_id",
    entry_table="schedules",
    entry_fk="schedule_period_id",
    entry_fields=("day_of_week", "start_time", "end_time", "activity", "location", "category"),
    entry_in_model=ScheduleSlotIn,
    entry_model=ScheduleSlot,
    rules=ScheduleRules(),
)

MENU_SCOPE = PeriodScope(
    name="menu",
    period_table="menu_periods",
    scope_column="category",
    entry_table="menu_meals",
    entry_fk="menu_period_id",
    entry_fields=(
        "day_of_week", "meal_type", "starter", "main_course", "side_dish",
        "dessert", "drink", "snack", "special_note",
    ),
    entry_in_model=MenuMealIn,
    entry_model=MenuMeal,
    rules=MenuRules(meals_per_day=settings.menu_meals_per_day),
)

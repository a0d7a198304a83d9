"""
Structural rules for period entries.

A batch of entries is validated generically (grouping by day, day capacity,
duplicates); what differs between schedules and menus lives here.
"""

from typing import Any, Dict, Hashable, List, Optional, Tuple

from ..core.exceptions import (
    ForbiddenFieldError,
    IncompleteStructureError,
    InvalidDurationError,
    MisalignedStartError,
)
from ..models.menu import COURSE_FIELDS, FULL_MEAL_FIELDS, LIGHT_MEAL_FIELDS, MealType
from ..models.settings import TimingConfig
from .grid import time_to_minutes

MEAL_ORDER = [meal_type.value for meal_type in MealType]


def _filled(value: Optional[str]) -> bool:
    return bool(value)


class ScheduleRules:
    """Activity slots must sit on the facility grid"""

    kind = "schedule"
    requires_config = True
    entry_label = "slot"

    def max_per_day(self, config: Optional[TimingConfig]) -> int:
        return config.slots_per_day

    def duplicate_key(self, entry: Any) -> Hashable:
        return (entry.start_time, entry.end_time)

    def sort_key(self, row: Dict[str, Any]) -> Any:
        return row["start_time"]

    def describe(self, entry: Any) -> str:
        return f"{entry.day_of_week} from {entry.start_time} to {entry.end_time}"

    def check_entry(self, entry: Any, index: int, config: TimingConfig, grid: List[str]):
        day = entry.day_of_week
        start = time_to_minutes(entry.start_time)
        end = time_to_minutes(entry.end_time)

        if start >= end:
            raise InvalidDurationError(
                f"Invalid time range for {day} (slot {index}): start {entry.start_time} "
                f"must be before end {entry.end_time}",
                day=day, index=index,
            )
        if end - start != config.slot_duration:
            raise InvalidDurationError(
                f"Invalid slot duration for {day} (slot {index}): "
                f"slots last exactly {config.slot_duration} minutes",
                day=day, index=index, expected_minutes=config.slot_duration,
            )
        if entry.start_time not in grid:
            raise MisalignedStartError(
                f"Invalid start time for {day} (slot {index}): {entry.start_time}, "
                f"allowed start times are: {', '.join(grid)}",
                day=day, index=index, allowed=list(grid),
            )


class MenuRules:
    """Meals must carry exactly the courses of their meal type"""

    kind = "menu"
    requires_config = False
    entry_label = "meal"

    def __init__(self, meals_per_day: int = 3):
        self.meals_per_day = meals_per_day

    def max_per_day(self, config: Optional[TimingConfig]) -> int:
        return self.meals_per_day

    def duplicate_key(self, entry: Any) -> Hashable:
        return (entry.day_of_week, entry.meal_type)

    def sort_key(self, row: Dict[str, Any]) -> Any:
        return MEAL_ORDER.index(row["meal_type"])

    def describe(self, entry: Any) -> str:
        return f"{entry.meal_type} on {entry.day_of_week}"

    def required_and_forbidden(self, meal_type: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        if meal_type in (MealType.BREAKFAST.value, MealType.GOUTER.value):
            return LIGHT_MEAL_FIELDS, COURSE_FIELDS
        return FULL_MEAL_FIELDS, ("snack",)

    def check_entry(self, entry: Any, index: int, config: Optional[TimingConfig], grid: List[str]):
        day = entry.day_of_week
        required, forbidden = self.required_and_forbidden(entry.meal_type)

        missing = [field for field in required if not _filled(getattr(entry, field))]
        if missing:
            raise IncompleteStructureError(
                f"Fields {', '.join(missing)} are required for meal type "
                f"{entry.meal_type} on {day}",
                day=day, index=index, fields=missing,
            )

        present = [field for field in forbidden if _filled(getattr(entry, field))]
        if present:
            raise ForbiddenFieldError(
                f"Fields {', '.join(present)} are not allowed for meal type "
                f"{entry.meal_type} on {day}",
                day=day, index=index, fields=present,
            )

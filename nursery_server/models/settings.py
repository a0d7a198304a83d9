"""
Facility timing configuration
"""

from typing import Literal

from pydantic import BaseModel, Field, PositiveInt

TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class TimingConfig(BaseModel):
    """Facility-wide timing parameters; all durations are minutes"""
    opening_time: str = Field(..., pattern=TIME_PATTERN, description="Opening time HH:MM")
    slot_interval: PositiveInt = Field(..., description="Gap between two blocks")
    slot_duration: PositiveInt = Field(..., description="Length of one activity slot")
    breakfast_duration: PositiveInt
    lunch_duration: PositiveInt
    nap_duration: PositiveInt
    snack_duration: PositiveInt
    slots_per_day: Literal[4, 5] = Field(..., description="Activity slots per day")


DEFAULT_TIMING_CONFIG = TimingConfig(
    opening_time="08:00",
    slot_interval=15,
    slots_per_day=4,
    slot_duration=30,
    breakfast_duration=30,
    lunch_duration=30,
    nap_duration=60,
    snack_duration=15,
)

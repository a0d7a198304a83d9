"""
Settings request/response schemas
"""

from typing import List, Literal

from pydantic import BaseModel, Field, model_validator

from ..engine.grid import MINUTES_PER_DAY, closing_minutes
from ..models.settings import TimingConfig


class SettingsUpdateRequest(BaseModel):
    """Full replacement of the facility timing configuration"""
    opening_time: str = Field(..., pattern=r"^(0[7-9]):[0-5][0-9]$",
                              description="Morning opening time HH:MM")
    slot_interval: int = Field(..., ge=5, description="Minutes between blocks")
    slots_per_day: Literal[4, 5] = Field(..., description="Activity slots per day")
    slot_duration: int = Field(..., ge=10)
    breakfast_duration: int = Field(..., ge=10)
    lunch_duration: int = Field(..., ge=10)
    nap_duration: int = Field(..., ge=40)
    snack_duration: int = Field(..., ge=5, le=15)

    @model_validator(mode="after")
    def check_day_fits(self):
        """The whole day, snack included, must end before midnight"""
        if closing_minutes(self.to_config()) >= MINUTES_PER_DAY:
            raise ValueError("the configured day runs past midnight")
        return self

    def to_config(self) -> TimingConfig:
        return TimingConfig(**self.model_dump())


class SettingsResponse(TimingConfig):
    """Configuration with the derived day layout"""
    slot_start_times: List[str]
    closing_time: str

"""
Business logic services.
Service layer for facility settings, schedules and menus.
"""

from .menu_service import MenuService
from .period_service import PeriodService
from .schedule_service import ScheduleService
from .settings_service import SettingsService

__all__ = [
    "MenuService",
    "PeriodService",
    "ScheduleService",
    "SettingsService",
]

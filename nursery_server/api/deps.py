"""
Shared route dependencies.
The database manager and clock live on ``app.state`` so that a test app can
run against an in-memory store and a fixed date.
"""

from fastapi import Depends, Request

from ..core.clock import Clock
from ..core.database import DatabaseManager
from ..services import MenuService, ScheduleService, SettingsService


def get_db(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_settings_service(db: DatabaseManager = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_schedule_service(
    db: DatabaseManager = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ScheduleService:
    return ScheduleService(db, clock)


def get_menu_service(
    db: DatabaseManager = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> MenuService:
    return MenuService(db, clock)

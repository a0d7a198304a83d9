"""
API routes and endpoints.
"""

from fastapi import APIRouter
from .v1 import menus, schedules, settings

api_router = APIRouter()

api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["schedules"])
api_router.include_router(menus.router, prefix="/menu", tags=["menu"])

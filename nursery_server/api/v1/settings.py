"""
Facility settings routes
"""

from fastapi import APIRouter, Depends

from ..deps import get_settings_service
from ...core.error_handler import create_success_response
from ...core.security import SUPER_ADMIN, Actor, require_roles
from ...schemas.common import ApiResponse
from ...schemas.settings import SettingsResponse, SettingsUpdateRequest
from ...services.settings_service import SettingsService

router = APIRouter()

admin_only = require_roles(SUPER_ADMIN)


@router.get("", response_model=ApiResponse[SettingsResponse])
def get_settings(
    actor: Actor = Depends(admin_only),
    service: SettingsService = Depends(get_settings_service),
):
    """Current timing configuration with slot grid and closing time"""
    config = service.require_config()
    return create_success_response(service.describe(config), "Settings retrieved successfully")


@router.put("", response_model=ApiResponse[SettingsResponse])
def replace_settings(
    body: SettingsUpdateRequest,
    actor: Actor = Depends(admin_only),
    service: SettingsService = Depends(get_settings_service),
):
    """Replace the whole timing configuration"""
    config = service.replace_config(body.to_config(), actor.id)
    return create_success_response(service.describe(config), "Settings updated successfully")


@router.post("/reset", response_model=ApiResponse[SettingsResponse])
def reset_settings(
    actor: Actor = Depends(admin_only),
    service: SettingsService = Depends(get_settings_service),
):
    config = service.reset_config(actor.id)
    return create_success_response(service.describe(config), "Settings reset to default successfully")


@router.get("/grid")
def get_slot_grid(
    actor: Actor = Depends(admin_only),
    service: SettingsService = Depends(get_settings_service),
):
    """Allowed slot start times for the current configuration"""
    described = service.describe(service.require_config())
    return create_success_response(
        {
            "slot_start_times": described["slot_start_times"],
            "closing_time": described["closing_time"],
            "slot_duration": described["slot_duration"],
        }
    )

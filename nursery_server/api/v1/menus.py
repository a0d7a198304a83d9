"""
Menu routes
Weekly menus per age category.
"""

from fastapi import APIRouter, Depends, Query

from ..deps import get_menu_service
from ...core.error_handler import create_success_response
from ...core.security import ADMIN, SUPER_ADMIN, Actor, require_roles
from ...models.menu import Category
from ...models.period import PeriodKind
from ...schemas.common import ErrorResponse
from ...schemas.period import MenuMealsRequest, MenuPeriodCreateRequest, PeriodUpdateRequest
from ...services.menu_service import MenuService

router = APIRouter()

staff_admin = require_roles(ADMIN, SUPER_ADMIN)

BATCH_ERRORS = {400: {"model": ErrorResponse}}


@router.get("")
def list_menu_periods(
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    return create_success_response(service.list_menu_periods(), "Menu periods retrieved successfully")


@router.post("", status_code=201)
def create_menu_period(
    body: MenuPeriodCreateRequest,
    kind: PeriodKind = Query(..., alias="type", description="current or scheduled"),
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    period = service.create_period(body.category.value, kind, body, actor.id)
    return create_success_response(period, "Menu period created successfully")


@router.get("/programme")
def list_programmed_menu_periods(
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    """Menu periods that have not started yet"""
    return create_success_response(service.programmed_periods())


@router.get("/meals")
def get_category_meals(
    category: Category = Query(...),
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    return create_success_response(service.meals_for_category(category.value))


@router.get("/meals/{period_id}")
def get_period_meals(
    period_id: int,
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    return create_success_response(service.get_period(period_id))


@router.patch("/period/{period_id}")
def update_menu_period(
    period_id: int,
    body: PeriodUpdateRequest,
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    period = service.update_period(period_id, body, actor.id)
    return create_success_response(period, "Menu period updated successfully")


@router.delete("/period/{period_id}")
def delete_menu_period(
    period_id: int,
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    service.delete_period(period_id, actor.id)
    return create_success_response(message="Menu period deleted successfully")


@router.post("/period/{period_id}/meals/bulk", status_code=201, responses=BATCH_ERRORS)
def create_menu_meals(
    period_id: int,
    body: MenuMealsRequest,
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    detail = service.replace_entries(period_id, body.meals, actor.id)
    return create_success_response(detail, "Menu meals created successfully")


@router.patch("/period/{period_id}/meals/bulk", responses=BATCH_ERRORS)
def replace_menu_meals(
    period_id: int,
    body: MenuMealsRequest,
    actor: Actor = Depends(staff_admin),
    service: MenuService = Depends(get_menu_service),
):
    detail = service.replace_entries(period_id, body.meals, actor.id)
    return create_success_response(detail, "Menu meals updated successfully")

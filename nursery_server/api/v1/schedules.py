"""
Schedule routes
Classroom activity schedules: periods and their weekly slots.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ..deps import get_schedule_service
from ...core.error_handler import create_paginated_response, create_success_response
from ...core.security import SUPER_ADMIN, Actor, require_roles
from ...models.period import PeriodKind
from ...schemas.common import ApiResponse, ErrorResponse, PaginatedData
from ...schemas.period import PeriodCreateRequest, PeriodUpdateRequest, ScheduleSlotsRequest
from ...services.schedule_service import ScheduleService

router = APIRouter()

admin_only = require_roles(SUPER_ADMIN)

# Rejected batches carry the offending day and entry index
BATCH_ERRORS = {400: {"model": ErrorResponse}}


# Global schedule operations

@router.get("/period", response_model=ApiResponse[PaginatedData[Dict[str, Any]]])
def list_active_schedule_periods(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=0, le=100, description="0 returns every period"),
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    result = service.list_active_periods(page, per_page)
    return create_paginated_response(
        result["items"], result["total"], page, per_page,
        message="Schedule periods retrieved successfully", meta=result["meta"],
    )


@router.get("/classroom/unscheduled")
def list_unscheduled_classrooms(
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    return create_success_response(
        service.classrooms_without_schedule(),
        "Classrooms without schedules retrieved successfully",
    )


@router.get("/period/{period_id}")
def get_schedule_period(
    period_id: int,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    return create_success_response(service.get_period(period_id))


# Classroom-level operations

@router.get("/classroom/{classroom_id}")
def list_classroom_periods(
    classroom_id: int,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Current and upcoming periods of a classroom"""
    return create_success_response(
        service.list_periods(classroom_id), "Schedules retrieved successfully"
    )


@router.get("/classroom/{classroom_id}/week")
def get_weekly_schedule(
    classroom_id: int,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    return create_success_response(
        service.weekly_view(classroom_id), "Weekly schedule retrieved successfully"
    )


@router.post("/classroom/{classroom_id}/period", status_code=201)
def create_schedule_period(
    classroom_id: int,
    body: PeriodCreateRequest,
    kind: PeriodKind = Query(..., alias="type", description="current or scheduled"),
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    period = service.create_period(classroom_id, kind, body, actor.id)
    return create_success_response(period, "Schedule period created successfully")


# Period-level operations

@router.patch("/classroom/period/{period_id}")
def update_schedule_period(
    period_id: int,
    body: PeriodUpdateRequest,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    period = service.update_period(period_id, body, actor.id)
    return create_success_response(period, "Schedule period updated successfully")


@router.delete("/classroom/period/{period_id}")
def delete_schedule_period(
    period_id: int,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete_period(period_id, actor.id)
    return create_success_response(message="Schedule period deleted successfully")


@router.post("/classroom/period/{period_id}/slots", status_code=201, responses=BATCH_ERRORS)
def create_schedule_slots(
    period_id: int,
    body: ScheduleSlotsRequest,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    detail = service.replace_entries(period_id, body.slots, actor.id)
    return create_success_response(detail, "Schedule slots created successfully")


@router.patch("/classroom/period/{period_id}/slots", responses=BATCH_ERRORS)
def replace_schedule_slots(
    period_id: int,
    body: ScheduleSlotsRequest,
    actor: Actor = Depends(admin_only),
    service: ScheduleService = Depends(get_schedule_service),
):
    detail = service.replace_entries(period_id, body.slots, actor.id)
    return create_success_response(detail, "Schedule slots updated successfully")

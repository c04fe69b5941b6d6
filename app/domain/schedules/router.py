"""Schedule router - FastAPI endpoints for shift requests"""

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_principal
from ...authorization import AuthorizationService, Principal, get_authorization_service
from ...database import get_db
from .schemas import (
    ScheduleCreate,
    ScheduleDetailResponse,
    ScheduleFormResponse,
    ScheduleResponse,
    ScheduleUpdate,
    WeekResponse,
)
from .service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["Schedules"])


def get_schedule_service(
    db: Session = Depends(get_db),
    authz: AuthorizationService = Depends(get_authorization_service),
) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db, authz)


# ============================================================================
# READ
# ============================================================================


@router.get("", response_model=list[ScheduleResponse])
async def list_schedules(
    sort: Optional[str] = Query("date_asc"),
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """List visible schedules (sort: date_asc, date_desc, user_asc, user_desc)"""
    return [ScheduleResponse.from_schedule(s) for s in service.list_schedules(principal, sort)]


@router.get("/calendar", response_model=WeekResponse)
async def get_calendar_week(
    weekStart: Optional[date] = Query(None),
    nav: Optional[Literal["back", "forward"]] = Query(None),
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """One week of visible schedules, grouped Monday through Sunday"""
    return service.get_week(principal, week_start=weekStart, nav=nav)


@router.get("/new", response_model=ScheduleFormResponse)
async def new_schedule_form(
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Defaults and options for the create form"""
    return service.new_schedule_form(principal)


@router.get("/{schedule_id}", response_model=ScheduleDetailResponse)
async def get_schedule(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.get_schedule(schedule_id, principal)


@router.get("/{schedule_id}/edit", response_model=ScheduleFormResponse)
async def edit_schedule_form(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.edit_schedule_form(schedule_id, principal)


# ============================================================================
# CREATE / UPDATE
# ============================================================================


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Submit a shift request"""
    return ScheduleResponse.from_schedule(service.create_schedule(data, principal))


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    data: ScheduleUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return ScheduleResponse.from_schedule(service.update_schedule(schedule_id, data, principal))


# ============================================================================
# REVIEW
# ============================================================================


@router.post("/{schedule_id}/approve", response_model=ScheduleResponse)
async def approve_schedule(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return ScheduleResponse.from_schedule(service.approve_schedule(schedule_id, principal))


@router.post("/{schedule_id}/reject", response_model=ScheduleResponse)
async def reject_schedule(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return ScheduleResponse.from_schedule(service.reject_schedule(schedule_id, principal))


# ============================================================================
# DELETE
# ============================================================================


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: int,
    principal: Principal = Depends(get_current_principal),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.delete_schedule(schedule_id, principal)

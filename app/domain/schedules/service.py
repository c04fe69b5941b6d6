"""Schedule service - Workflow rules for shift requests"""

import logging
from datetime import date, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...authorization import (
    AuthorizationService,
    Principal,
    ScheduleOperation,
    authorization_service,
)
from ...models import Schedule, ScheduleStatus
from ...shared.validators import validate_time_range
from ...utils.dates import DAY_NAMES, day_of_week, start_of_week, time_slot_labels
from .exceptions import ScheduleNotFound, ScheduleValidationError
from .repository import ScheduleRepository
from .schemas import (
    ScheduleCreate,
    ScheduleDetailResponse,
    ScheduleDraft,
    ScheduleFormResponse,
    SchedulePermissions,
    ScheduleResponse,
    ScheduleUpdate,
    UserOption,
    WeekResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(17, 0)


class ScheduleService:
    """Service layer for schedule use cases"""

    def __init__(self, db: Session, authz: AuthorizationService = authorization_service):
        self.db = db
        self.repo = ScheduleRepository()
        self.authz = authz

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_404(self, schedule_id: int) -> Schedule:
        schedule = self.repo.get_schedule_by_id(self.db, schedule_id)
        if not schedule:
            raise ScheduleNotFound(schedule_id)
        return schedule

    @staticmethod
    def _validate_times(start_time: time, end_time: time) -> None:
        try:
            validate_time_range(start_time, end_time)
        except ValueError as e:
            raise ScheduleValidationError("endTime", str(e)) from e

    def _ensure_owner_exists(self, owner_id: str) -> None:
        if not self.repo.get_user_by_id(self.db, owner_id):
            raise ScheduleValidationError("ownerId", "Owner does not exist.")

    def _guard_protected_fields(
        self, principal: Principal, resource: Schedule, owner_id: str, status: ScheduleStatus
    ) -> None:
        """Owner and status may only leave their defaults with extra authority"""
        if owner_id != principal.id:
            self.authz.require(principal, ScheduleOperation.ASSIGN_OWNER, resource)
        if status != ScheduleStatus.SUBMITTED:
            self.authz.require(principal, ScheduleOperation.ASSIGN_STATUS, resource)

    def _user_options(self) -> list[UserOption]:
        return [UserOption(id=u.id, userName=u.user_name) for u in self.repo.list_users(self.db)]

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_schedules(self, principal: Principal, sort: Optional[str] = None) -> list[Schedule]:
        """Index view: every schedule the principal may see"""
        return self.repo.list_schedules(
            self.db,
            self.repo.visibility_filter(principal),
            self.repo.get_ordering(sort),
        )

    def get_week(
        self,
        principal: Principal,
        week_start: Optional[date] = None,
        nav: Optional[str] = None,
        today: Optional[date] = None,
    ) -> WeekResponse:
        """Calendar view: one week of visible schedules grouped by weekday"""
        start = week_start or start_of_week(today or date.today())
        try:
            if nav == "back":
                start = start - timedelta(days=7)
            elif nav == "forward":
                start = start + timedelta(days=7)
            end = start + timedelta(days=6)
            previous_start = start - timedelta(days=7)
            next_start = start + timedelta(days=7)
        except OverflowError as e:
            raise ScheduleValidationError("weekStart", "Week is out of range.", location="query") from e

        schedules = self.repo.list_schedules_between(
            self.db, start, end, self.repo.visibility_filter(principal)
        )

        days = {name: [] for name in DAY_NAMES}
        for schedule in schedules:
            days[day_of_week(schedule.date)].append(ScheduleResponse.from_schedule(schedule))

        return WeekResponse(
            startOfWeek=start,
            endOfWeek=end,
            previousWeekStart=previous_start,
            nextWeekStart=next_start,
            days=days,
        )

    def get_schedule(self, schedule_id: int, principal: Principal) -> ScheduleDetailResponse:
        """Details view with what the principal may do next"""
        schedule = self._get_or_404(schedule_id)
        if not self.repo.is_visible(principal, schedule):
            # Hidden schedules look the same as missing ones
            raise ScheduleNotFound(schedule_id)

        def can(operation: ScheduleOperation) -> bool:
            return self.authz.authorize(principal, operation, schedule, audit=False).granted

        base = ScheduleResponse.from_schedule(schedule)
        return ScheduleDetailResponse(
            **base.model_dump(),
            isOwner=schedule.owner_id == principal.id,
            permissions=SchedulePermissions(
                canUpdate=can(ScheduleOperation.UPDATE),
                canDelete=can(ScheduleOperation.DELETE),
                canApprove=can(ScheduleOperation.APPROVE),
                canReject=can(ScheduleOperation.REJECT),
            ),
        )

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def new_schedule_form(self, principal: Principal, today: Optional[date] = None) -> ScheduleFormResponse:
        """Default draft for a new shift request"""
        draft = Schedule(
            owner_id=principal.id,
            date=today or date.today(),
            start_time=DEFAULT_START_TIME,
            end_time=DEFAULT_END_TIME,
            status=ScheduleStatus.SUBMITTED,
        )
        return self._form_for(principal, draft)

    def edit_schedule_form(self, schedule_id: int, principal: Principal) -> ScheduleFormResponse:
        schedule = self._get_or_404(schedule_id)
        self.authz.require(principal, ScheduleOperation.UPDATE, schedule)
        return self._form_for(principal, schedule)

    def _form_for(self, principal: Principal, schedule: Schedule) -> ScheduleFormResponse:
        can_assign_owner = self.authz.authorize(
            principal, ScheduleOperation.ASSIGN_OWNER, schedule, audit=False
        ).granted
        can_assign_status = self.authz.authorize(
            principal, ScheduleOperation.ASSIGN_STATUS, schedule, audit=False
        ).granted
        return ScheduleFormResponse(
            schedule=ScheduleDraft(
                ownerId=schedule.owner_id,
                date=schedule.date,
                startTime=schedule.start_time,
                endTime=schedule.end_time,
                status=schedule.status,
            ),
            scheduleId=schedule.id,
            canAssignOwner=can_assign_owner,
            canAssignStatus=can_assign_status,
            users=self._user_options() if can_assign_owner else None,
            times=time_slot_labels(),
        )

    # ------------------------------------------------------------------
    # Create / Update
    # ------------------------------------------------------------------

    def create_schedule(self, data: ScheduleCreate, principal: Principal) -> Schedule:
        """Submit a new shift request"""
        self._validate_times(data.startTime, data.endTime)

        owner_id = principal.id if data.ownerId is None else data.ownerId
        draft = Schedule(
            owner_id=owner_id,
            date=data.date,
            start_time=data.startTime,
            end_time=data.endTime,
            status=data.status,
        )

        self.authz.require(principal, ScheduleOperation.CREATE, draft)
        self._guard_protected_fields(principal, draft, owner_id, data.status)
        self._ensure_owner_exists(owner_id)

        draft.day = day_of_week(draft.date)
        schedule = self.repo.save_schedule(self.db, draft)
        logger.info(
            f"📥 Schedule {schedule.id} created by {principal.id} for {owner_id} on {schedule.date} ({schedule.status})"
        )
        return schedule

    def update_schedule(self, schedule_id: int, data: ScheduleUpdate, principal: Principal) -> Schedule:
        """Edit a shift; owner and status changes need extra authority"""
        schedule = self._get_or_404(schedule_id)
        self._validate_times(data.startTime, data.endTime)

        # Checks run against the stored record, before any field is copied
        self.authz.require(principal, ScheduleOperation.UPDATE, schedule)
        self._guard_protected_fields(principal, schedule, data.ownerId, data.status)
        self._ensure_owner_exists(data.ownerId)

        schedule.owner_id = data.ownerId
        schedule.status = data.status
        schedule.date = data.date
        schedule.day = day_of_week(schedule.date)
        schedule.start_time = data.startTime
        schedule.end_time = data.endTime

        schedule = self.repo.save_schedule(self.db, schedule)
        logger.info(f"✏️ Schedule {schedule.id} updated by {principal.id} ({schedule.status})")
        return schedule

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def approve_schedule(self, schedule_id: int, principal: Principal) -> Schedule:
        return self._review(schedule_id, principal, ScheduleOperation.APPROVE, ScheduleStatus.APPROVED)

    def reject_schedule(self, schedule_id: int, principal: Principal) -> Schedule:
        return self._review(schedule_id, principal, ScheduleOperation.REJECT, ScheduleStatus.REJECTED)

    def _review(
        self,
        schedule_id: int,
        principal: Principal,
        operation: ScheduleOperation,
        status: ScheduleStatus,
    ) -> Schedule:
        schedule = self._get_or_404(schedule_id)
        self.authz.require(principal, operation, schedule)

        schedule.status = status
        schedule = self.repo.save_schedule(self.db, schedule)
        logger.info(f"✅ Schedule {schedule.id} {status.value.lower()} by {principal.id}")
        return schedule

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_schedule(self, schedule_id: int, principal: Principal) -> dict:
        schedule = self._get_or_404(schedule_id)
        self.authz.require(principal, ScheduleOperation.DELETE, schedule)

        self.repo.delete_schedule(self.db, schedule)
        logger.info(f"🗑️ Schedule {schedule_id} deleted by {principal.id}")
        return {"message": "Schedule deleted"}

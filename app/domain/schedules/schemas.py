"""Schedule domain schemas - Pydantic models for validation"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...models import ScheduleStatus
from ...shared.validators import parse_time_of_day


class ScheduleInput(BaseModel):
    """Fields shared by create and update forms"""

    date: dt.date
    startTime: dt.time
    endTime: dt.time
    status: ScheduleStatus = ScheduleStatus.SUBMITTED

    @field_validator("startTime", "endTime", mode="before")
    @classmethod
    def validate_time(cls, v):
        return parse_time_of_day(v)


class ScheduleCreate(ScheduleInput):
    """Schema for submitting a new shift. Owner defaults to the caller."""

    ownerId: Optional[str] = None


class ScheduleUpdate(ScheduleInput):
    """Schema for editing a shift. Every field is written back."""

    ownerId: str


class ScheduleResponse(BaseModel):
    """Schema for schedule response"""

    id: int
    ownerId: str
    ownerName: Optional[str] = None
    date: dt.date
    day: str
    startTime: dt.time
    endTime: dt.time
    status: ScheduleStatus

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_schedule(cls, schedule) -> "ScheduleResponse":
        return cls(
            id=schedule.id,
            ownerId=schedule.owner_id,
            ownerName=schedule.owner.user_name if schedule.owner else None,
            date=schedule.date,
            day=schedule.day,
            startTime=schedule.start_time,
            endTime=schedule.end_time,
            status=schedule.status,
        )


class SchedulePermissions(BaseModel):
    canUpdate: bool
    canDelete: bool
    canApprove: bool
    canReject: bool


class ScheduleDetailResponse(ScheduleResponse):
    isOwner: bool
    permissions: SchedulePermissions


class WeekResponse(BaseModel):
    """Calendar week, Monday through Sunday buckets"""

    startOfWeek: dt.date
    endOfWeek: dt.date
    previousWeekStart: dt.date
    nextWeekStart: dt.date
    days: dict[str, list[ScheduleResponse]]


class UserOption(BaseModel):
    id: str
    userName: str


class ScheduleDraft(BaseModel):
    ownerId: str
    date: dt.date
    startTime: dt.time
    endTime: dt.time
    status: ScheduleStatus


class ScheduleFormResponse(BaseModel):
    """Everything a create/edit form needs to render"""

    schedule: ScheduleDraft
    scheduleId: Optional[int] = None
    canAssignOwner: bool
    canAssignStatus: bool
    users: Optional[list[UserOption]] = None
    times: list[str]

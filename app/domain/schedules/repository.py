"""Schedule repository - Database operations for schedules"""

from datetime import date
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, contains_eager

from ...authorization import Principal, can_view_all_schedules
from ...models import Schedule, ScheduleStatus, User

# Sort keys accepted by the schedule index; anything else falls back to date_asc
SORT_ORDERINGS = {
    "date_asc": (Schedule.date.asc(), User.user_name.asc(), Schedule.start_time.asc()),
    "date_desc": (Schedule.date.desc(), User.user_name.asc(), Schedule.start_time.asc()),
    "user_asc": (User.user_name.asc(), Schedule.date.asc(), Schedule.start_time.asc()),
    "user_desc": (User.user_name.desc(), Schedule.date.asc(), Schedule.start_time.asc()),
}
DEFAULT_SORT = "date_asc"

CALENDAR_ORDERING = (Schedule.date.asc(), Schedule.start_time.asc())


class ScheduleRepository:
    """Repository for schedule database operations"""

    @staticmethod
    def visibility_filter(principal: Principal):
        """
        Query-level read filter. Managers and administrators see everything;
        everyone else sees approved shifts plus their own.
        Returns None when no filter applies.
        """
        if can_view_all_schedules(principal):
            return None
        return or_(
            Schedule.status == ScheduleStatus.APPROVED.value,
            Schedule.owner_id == principal.id,
        )

    @staticmethod
    def is_visible(principal: Principal, schedule: Schedule) -> bool:
        """Same rule as visibility_filter, for a single loaded schedule"""
        if can_view_all_schedules(principal):
            return True
        return schedule.status == ScheduleStatus.APPROVED.value or schedule.owner_id == principal.id

    @staticmethod
    def get_ordering(sort: Optional[str]) -> tuple:
        return SORT_ORDERINGS.get(sort or DEFAULT_SORT, SORT_ORDERINGS[DEFAULT_SORT])

    @staticmethod
    def get_schedule_by_id(db: Session, schedule_id: int) -> Optional[Schedule]:
        """Get a specific schedule by ID"""
        return db.query(Schedule).filter(Schedule.id == schedule_id).first()

    @staticmethod
    def list_schedules(db: Session, predicate=None, ordering: tuple = CALENDAR_ORDERING) -> list[Schedule]:
        """List schedules matching an optional predicate, owners eagerly loaded"""
        query = db.query(Schedule).join(Schedule.owner).options(contains_eager(Schedule.owner))
        if predicate is not None:
            query = query.filter(predicate)
        return query.order_by(*ordering).all()

    @staticmethod
    def list_schedules_between(
        db: Session, start: date, end: date, predicate=None
    ) -> list[Schedule]:
        """Schedules dated within [start, end], ordered by date then start time"""
        window = Schedule.date.between(start, end)
        if predicate is not None:
            window = and_(window, predicate)
        return ScheduleRepository.list_schedules(db, window, CALENDAR_ORDERING)

    @staticmethod
    def save_schedule(db: Session, schedule: Schedule) -> Schedule:
        """Insert or update a schedule"""
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete_schedule(db: Session, schedule: Schedule) -> None:
        """Delete a schedule"""
        db.delete(schedule)
        db.commit()

    # User lookups for owner references
    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def list_users(db: Session) -> list[User]:
        """All users ordered by user name, for owner pickers"""
        return db.query(User).order_by(User.user_name.asc()).all()

import enum
import uuid

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Time,
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from .database import Base
from .utils.dates import day_of_week


def generate_user_id():
    """Generate a unique string ID for a user account"""
    return str(uuid.uuid4())


class ScheduleStatus(str, enum.Enum):
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_user_id)
    user_name = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    roles = relationship("Role", secondary=user_roles, back_populates="users", lazy="selectin")
    schedules = relationship("Schedule", back_populates="owner", cascade="all, delete-orphan")

    @property
    def role_names(self) -> frozenset:
        return frozenset(role.name for role in self.roles)


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)  # ScheduleAdministrators, ScheduleManagers

    users = relationship("User", secondary=user_roles, back_populates="roles")


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    day = Column(String(10), nullable=False)  # Always derived from date
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), default=ScheduleStatus.SUBMITTED.value, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("User", back_populates="schedules")

    @validates("date")
    def _sync_day(self, _key, value):
        if value is not None:
            self.day = day_of_week(value)
        return value

    @validates("status")
    def _normalize_status(self, _key, value):
        if isinstance(value, ScheduleStatus):
            return value.value
        return ScheduleStatus(value).value

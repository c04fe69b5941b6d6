"""The acting identity passed to every authorization decision."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

SCHEDULE_ADMINISTRATORS_ROLE = "ScheduleAdministrators"
SCHEDULE_MANAGERS_ROLE = "ScheduleManagers"

# Roles that see every schedule in list and calendar queries
PRIVILEGED_ROLES = frozenset({SCHEDULE_ADMINISTRATORS_ROLE, SCHEDULE_MANAGERS_ROLE})


@dataclass(frozen=True)
class Principal:
    """Verified user for the duration of one request."""

    id: str
    roles: frozenset = field(default_factory=frozenset)
    user_name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.roles, frozenset):
            object.__setattr__(self, "roles", frozenset(self.roles))

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @classmethod
    def from_user(cls, user) -> "Principal":
        """Build a principal from a persisted User row"""
        return cls(id=user.id, roles=user.role_names, user_name=user.user_name)


def has_role(principal: Optional[Principal], role: str) -> bool:
    if principal is None:
        return False
    return principal.has_role(role)


def has_any_role(principal: Optional[Principal], roles: Iterable[str]) -> bool:
    return any(has_role(principal, role) for role in roles)


def can_view_all_schedules(principal: Optional[Principal]) -> bool:
    """Managers and administrators see every schedule regardless of status or owner"""
    return has_any_role(principal, PRIVILEGED_ROLES)

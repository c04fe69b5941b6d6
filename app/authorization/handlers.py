"""
Schedule authorization handlers.

Each handler looks at one concern (administrator override, manager review,
record ownership) and either votes SUCCEED or ABSTAINS. There is no deny
vote: a request is denied when no handler succeeds. Handlers are pure
functions of (principal, operation, resource) and never mutate either.
"""

import enum
from typing import Any, Callable, Optional

from .operations import CRUD_OPERATIONS, REVIEW_OPERATIONS, ScheduleOperation
from .principal import SCHEDULE_ADMINISTRATORS_ROLE, SCHEDULE_MANAGERS_ROLE, Principal


class Vote(enum.Enum):
    SUCCEED = "succeed"
    ABSTAIN = "abstain"


Handler = Callable[[Principal, ScheduleOperation, Optional[Any]], Vote]


def administrator_handler(
    principal: Principal, operation: ScheduleOperation, resource: Optional[Any]
) -> Vote:
    """Administrators can do anything."""
    if principal is None:
        return Vote.ABSTAIN
    if principal.has_role(SCHEDULE_ADMINISTRATORS_ROLE):
        return Vote.SUCCEED
    return Vote.ABSTAIN


def manager_handler(
    principal: Principal, operation: ScheduleOperation, resource: Optional[Any]
) -> Vote:
    """Managers can approve or reject any schedule, whoever owns it."""
    if principal is None or resource is None:
        return Vote.ABSTAIN
    if operation not in REVIEW_OPERATIONS:
        return Vote.ABSTAIN
    if principal.has_role(SCHEDULE_MANAGERS_ROLE):
        return Vote.SUCCEED
    return Vote.ABSTAIN


def owner_handler(
    principal: Principal, operation: ScheduleOperation, resource: Optional[Any]
) -> Vote:
    """
    Owners get create/read/update/delete on their own schedules.

    For a draft that has not been saved yet, owner_id is the prospective
    owner taken from the request.
    """
    if principal is None or resource is None:
        return Vote.ABSTAIN
    if operation not in CRUD_OPERATIONS:
        return Vote.ABSTAIN
    owner_id = getattr(resource, "owner_id", None)
    if owner_id is not None and owner_id == principal.id:
        return Vote.SUCCEED
    return Vote.ABSTAIN


# Registration order; also the order handlers are logged in
DEFAULT_HANDLERS: tuple[Handler, ...] = (owner_handler, administrator_handler, manager_handler)

"""
Resource-based authorization for schedules.

    service = get_authorization_service()
    if not service.authorize(principal, ScheduleOperation.UPDATE, schedule):
        ...

Handlers vote, the service ORs the votes together. See handlers.py for the
individual policies.
"""

from .handlers import (  # noqa: F401
    DEFAULT_HANDLERS,
    Handler,
    Vote,
    administrator_handler,
    manager_handler,
    owner_handler,
)
from .operations import CRUD_OPERATIONS, REVIEW_OPERATIONS, ScheduleOperation  # noqa: F401
from .principal import (  # noqa: F401
    PRIVILEGED_ROLES,
    SCHEDULE_ADMINISTRATORS_ROLE,
    SCHEDULE_MANAGERS_ROLE,
    Principal,
    can_view_all_schedules,
    has_role,
)
from .service import (  # noqa: F401
    AuthorizationDenied,
    AuthorizationResult,
    AuthorizationService,
    authorization_service,
    get_authorization_service,
)

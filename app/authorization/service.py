"""
Authorization service - combines handler votes into one decision.

Every registered handler runs, in registration order, with the same
(principal, operation, resource). The request is granted when at least one
handler votes SUCCEED; no handler can veto another. A missing principal or
a faulty handler always results in a denial.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from fastapi import HTTPException

from .handlers import DEFAULT_HANDLERS, Handler, Vote
from .operations import ScheduleOperation
from .principal import Principal

logger = logging.getLogger(__name__)


class AuthorizationDenied(HTTPException):
    """No handler granted the operation. The reason is logged, never returned to the caller."""

    def __init__(self, operation: ScheduleOperation, resource_id: Optional[int] = None):
        super().__init__(status_code=403, detail="Forbidden")
        self.operation = operation
        self.resource_id = resource_id


@dataclass(frozen=True)
class AuthorizationResult:
    granted: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.granted


def _operation_name(operation) -> str:
    return getattr(operation, "value", str(operation))


def _handler_name(handler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


class AuthorizationService:
    """Runs a fixed list of handlers for each authorization request"""

    def __init__(self, handlers: Sequence[Handler] = DEFAULT_HANDLERS):
        self.handlers = tuple(handlers)

    def authorize(
        self,
        principal: Optional[Principal],
        operation: ScheduleOperation,
        resource: Optional[Any] = None,
        audit: bool = True,
    ) -> AuthorizationResult:
        """
        Decide whether `principal` may perform `operation` on `resource`.

        audit=False keeps denials at debug level, for capability probes
        (e.g. which buttons to show) rather than actual requests.
        """
        resource_id = getattr(resource, "id", None)

        if principal is None:
            logger.warning(
                f"🚫 Authorization denied: no principal for {_operation_name(operation)} on schedule {resource_id}"
            )
            return AuthorizationResult(granted=False, reason="no principal")

        granted_by = []
        for handler in self.handlers:
            try:
                vote = handler(principal, operation, resource)
            except Exception:
                logger.exception(
                    f"❌ Authorization handler {_handler_name(handler)} failed "
                    f"(principal={principal.id}, operation={_operation_name(operation)}, schedule={resource_id})"
                )
                return AuthorizationResult(granted=False, reason="handler fault")

            if not isinstance(vote, Vote):
                logger.error(
                    f"❌ Authorization handler {_handler_name(handler)} returned invalid vote {vote!r} "
                    f"(principal={principal.id}, operation={_operation_name(operation)}, schedule={resource_id})"
                )
                return AuthorizationResult(granted=False, reason="handler fault")

            if vote is Vote.SUCCEED:
                granted_by.append(_handler_name(handler))

        if granted_by:
            logger.debug(
                f"✅ {_operation_name(operation)} granted to {principal.id} on schedule {resource_id} by {', '.join(granted_by)}"
            )
            return AuthorizationResult(granted=True)

        log = logger.warning if audit else logger.debug
        log(
            f"🚫 Authorization denied: principal={principal.id}, operation={_operation_name(operation)}, "
            f"schedule={resource_id}"
        )
        return AuthorizationResult(granted=False, reason="no handler succeeded")

    def require(
        self,
        principal: Optional[Principal],
        operation: ScheduleOperation,
        resource: Optional[Any] = None,
    ) -> None:
        """Raise AuthorizationDenied unless the operation is granted"""
        if not self.authorize(principal, operation, resource):
            raise AuthorizationDenied(operation, getattr(resource, "id", None))


authorization_service = AuthorizationService(DEFAULT_HANDLERS)


def get_authorization_service() -> AuthorizationService:
    """Dependency injection for AuthorizationService"""
    return authorization_service

import enum


class ScheduleOperation(str, enum.Enum):
    """Actions that can be authorized against a schedule"""

    CREATE = "Create"
    READ = "Read"
    UPDATE = "Update"
    DELETE = "Delete"
    APPROVE = "Approve"
    REJECT = "Reject"

    # Tamper guards for protected fields
    ASSIGN_OWNER = "AssignOwner"
    ASSIGN_STATUS = "AssignStatus"


CRUD_OPERATIONS = frozenset(
    {
        ScheduleOperation.CREATE,
        ScheduleOperation.READ,
        ScheduleOperation.UPDATE,
        ScheduleOperation.DELETE,
    }
)

REVIEW_OPERATIONS = frozenset({ScheduleOperation.APPROVE, ScheduleOperation.REJECT})

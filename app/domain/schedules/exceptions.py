"""Schedule domain errors, raised from the service layer"""

from fastapi import HTTPException


class ScheduleNotFound(HTTPException):
    def __init__(self, schedule_id: int):
        super().__init__(status_code=404, detail="Schedule not found")
        self.schedule_id = schedule_id


class ScheduleValidationError(HTTPException):
    """
    User-correctable input error on a single field.

    The detail mirrors FastAPI's request validation errors so clients can
    render both the same way.
    """

    def __init__(self, field: str, message: str, location: str = "body"):
        super().__init__(
            status_code=422,
            detail=[{"loc": [location, field], "msg": message, "type": "value_error"}],
        )
        self.field = field
        self.message = message

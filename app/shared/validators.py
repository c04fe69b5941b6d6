"""Shared validation utilities"""

import re
from datetime import time
from typing import Optional, Union

TIME_LABEL_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def parse_time_of_day(value: Union[str, time, None]) -> Optional[time]:
    """
    Parse a time-of-day from a form or JSON value.

    Accepts ISO times ("09:00", "09:00:00") and the slot label format
    used by the time picker ("9:00 AM", "12:30 PM").

    Raises:
        ValueError: If the value cannot be read as a time of day
    """
    if value is None:
        return value
    if isinstance(value, time):
        parsed = value
    elif not isinstance(value, str):
        raise ValueError("Time must be a string such as '09:00' or '9:00 AM'")
    else:
        parsed = _parse_time_string(value)

    # The Time column stores wall-clock times only
    if parsed.tzinfo is not None:
        raise ValueError("Time must not include a UTC offset")
    return parsed


def _parse_time_string(value: str) -> time:
    match = TIME_LABEL_PATTERN.match(value)
    if match:
        hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3).upper()
        if not 1 <= hour <= 12 or minute > 59:
            raise ValueError(f"Invalid time: {value}")
        return time(hour % 12 + (12 if meridiem == "PM" else 0), minute)

    try:
        return time.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"Invalid time: {value}") from e


def validate_time_range(start_time: time, end_time: time) -> None:
    """
    Ensure a shift ends after it starts.

    Raises:
        ValueError: If end_time is equal to or earlier than start_time
    """
    if end_time <= start_time:
        raise ValueError("End time must be after start time.")

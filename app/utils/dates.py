from datetime import date, datetime, time, timedelta

# Locale independent; date.weekday() indexes into this tuple
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

SLOT_MINUTES = 30
# Locale independent, indexed by hour // 12
MERIDIEMS = ("AM", "PM")


def day_of_week(value: date) -> str:
    """Return the English weekday name for a date (e.g. 2025-01-06 -> "Monday")."""
    return DAY_NAMES[value.weekday()]


def start_of_week(value: date) -> date:
    """Monday of the week containing `value`."""
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.weekday())


def format_time_label(value: time) -> str:
    """Format a time as a slot label, e.g. 09:00 -> "9:00 AM"."""
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {MERIDIEMS[value.hour // 12]}"


def time_slot_labels() -> list[str]:
    """All half-hour slots of a day as labels, "12:00 AM" through "11:30 PM"."""
    labels = []
    for i in range((24 * 60) // SLOT_MINUTES):
        minutes = i * SLOT_MINUTES
        labels.append(format_time_label(time(minutes // 60, minutes % 60)))
    return labels

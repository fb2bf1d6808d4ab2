"""Moving payment dates off weekends"""

from datetime import date, timedelta

SATURDAY = 5
SUNDAY = 6


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def adjust_for_weekend(day: date) -> tuple[date, bool]:
    """
    Move a payment date that falls on a weekend to the Friday before.

    Saturday goes back one day, Sunday two. Weekdays are returned unchanged.
    The result is never later than the input.

    Returns: (adjusted_date, was_adjusted)
    """
    weekday = day.weekday()
    if weekday == SATURDAY:
        return day - timedelta(days=1), True
    if weekday == SUNDAY:
        return day - timedelta(days=2), True
    return day, False

"""Payday normalization and lookup helpers"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

PaydayLike = Union[date, datetime]


def normalize_paydays(paydays: Iterable[PaydayLike]) -> list[date]:
    """
    Reduce raw payday values to sorted, unique calendar days.

    Stores may hand back timestamps or the same day twice; the engine only
    cares about the day.
    """
    days = {p.date() if isinstance(p, datetime) else p for p in paydays}
    return sorted(days)


def eligible_paydays(paydays: Iterable[PaydayLike], today: date) -> list[date]:
    """
    Paydays an invoice may be assigned to.

    Upcoming paydays (today included) when there are any. Otherwise the most
    recent past payday on its own, so a user who has not entered future
    income yet still gets a schedule. Empty only when there are no paydays.
    """
    days = normalize_paydays(paydays)
    upcoming = [p for p in days if p >= today]
    if upcoming:
        return upcoming
    return days[-1:]


def next_payday(paydays: Iterable[PaydayLike], after: date) -> Optional[date]:
    """First payday strictly after the given day, or None."""
    for payday in normalize_paydays(paydays):
        if payday > after:
            return payday
    return None

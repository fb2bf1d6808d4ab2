"""
Scheduling Engine Package

Pure, synchronous computation of a payment schedule. Nothing in here
touches storage or the clock.
"""

from invoice_scheduler.engine.assignment import (
    DEFAULT_SOFT_CAPACITY,
    PaydayAssigner,
    PaydayLoadTracker,
)
from invoice_scheduler.engine.builder import ScheduleBuilder
from invoice_scheduler.engine.exceptions import InvalidInputError, SchedulingError
from invoice_scheduler.engine.paydays import eligible_paydays, next_payday, normalize_paydays
from invoice_scheduler.engine.risk import MonthRiskIndex
from invoice_scheduler.engine.scoring import PriorityScorer, score_invoice
from invoice_scheduler.engine.weekend import adjust_for_weekend, is_weekend

__all__ = [
    "DEFAULT_SOFT_CAPACITY",
    "InvalidInputError",
    "MonthRiskIndex",
    "PaydayAssigner",
    "PaydayLoadTracker",
    "PriorityScorer",
    "ScheduleBuilder",
    "SchedulingError",
    "adjust_for_weekend",
    "eligible_paydays",
    "is_weekend",
    "next_payday",
    "normalize_paydays",
    "score_invoice",
]

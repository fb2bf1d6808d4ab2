"""
Payday assignment - decide which income date pays which invoice

Invoices must be fed to the assigner in ascending due-date order. The load
balancing step depends on what was assigned before, so a different order
gives a different (still valid) schedule.
"""

from bisect import bisect_right
from collections import Counter
from datetime import date
from typing import Iterable, Optional

from invoice_scheduler.engine.exceptions import InvalidInputError
from invoice_scheduler.engine.paydays import PaydayLike, eligible_paydays

DEFAULT_SOFT_CAPACITY = 5


class PaydayLoadTracker:
    """Number of invoices committed to each payday during one run."""

    def __init__(self):
        self._loads: Counter = Counter()

    def load(self, payday: date) -> int:
        return self._loads[payday]

    def commit(self, payday: date) -> int:
        """Record one more invoice on this payday. Returns the new load."""
        self._loads[payday] += 1
        return self._loads[payday]

    def loads(self) -> dict[date, int]:
        return dict(self._loads)


class PaydayAssigner:
    """
    Assigns one payday per invoice.

    Rules, in order:
    1. Bucketing: the invoice goes to the latest eligible payday on or
       before its due date, i.e. the payday whose interval
       [payday_i, payday_i+1) contains the due date.
    2. Orphans: an invoice due before the first eligible payday goes to the
       earliest eligible payday. It is never dropped.
    3. Load balancing: if adding the invoice would put the candidate over
       the soft capacity, the nearest earlier payday carrying at least one
       invoice fewer is used instead. If there is none the candidate keeps
       the invoice anyway.
    """

    def __init__(
        self,
        paydays: Iterable[PaydayLike],
        today: date,
        soft_capacity: int = DEFAULT_SOFT_CAPACITY,
        tracker: Optional[PaydayLoadTracker] = None,
    ):
        if soft_capacity < 1:
            raise InvalidInputError(f"soft_capacity must be at least 1, got {soft_capacity}")

        self.paydays: list[date] = eligible_paydays(paydays, today)
        self.soft_capacity = soft_capacity
        self.tracker = tracker or PaydayLoadTracker()

    def candidate_index(self, due_date: date) -> int:
        """Index into ``self.paydays`` chosen before load balancing."""
        index = bisect_right(self.paydays, due_date) - 1
        return max(index, 0)

    def _rebalance(self, candidate: int) -> int:
        load = self.tracker.load(self.paydays[candidate])
        if load + 1 <= self.soft_capacity:
            return candidate

        for index in range(candidate - 1, -1, -1):
            if self.tracker.load(self.paydays[index]) <= load - 1:
                return index
        return candidate

    def assign(self, due_date: date) -> Optional[date]:
        """
        Pick and commit a payday for an invoice due on ``due_date``.

        Returns None only when there are no paydays at all.
        """
        if not self.paydays:
            return None

        index = self._rebalance(self.candidate_index(due_date))
        payday = self.paydays[index]
        self.tracker.commit(payday)
        return payday

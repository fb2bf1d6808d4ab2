"""Priority scoring - how urgent is each invoice relative to the others"""

from datetime import date
from decimal import Decimal
from typing import Optional

from invoice_scheduler.engine.risk import MonthRiskIndex
from invoice_scheduler.models.invoice import Invoice
from invoice_scheduler.models.schedule import MonthRisk

# (max days until due, bonus), checked in order
URGENCY_TIERS: tuple[tuple[int, int], ...] = (
    (2, 5),
    (5, 3),
    (10, 1),
)

# (amount strictly above, bonus), checked in order
AMOUNT_TIERS: tuple[tuple[Decimal, int], ...] = (
    (Decimal("1000"), 3),
    (Decimal("500"), 2),
    (Decimal("100"), 1),
)

CRITICAL_MONTH_BONUS = 3
LOW_INCOME_MONTH_BONUS = 2


def days_until_due(invoice: Invoice, today: date) -> int:
    """Whole days from today to the due date. Negative when overdue."""
    return (invoice.due_date - today).days


def urgency_bonus(days: int) -> int:
    """
    Bonus for invoices coming due soon.

    - <= 2 days: +5 (includes anything already past due)
    - <= 5 days: +3
    - <= 10 days: +1
    """
    for max_days, bonus in URGENCY_TIERS:
        if days <= max_days:
            return bonus
    return 0


def amount_bonus(amount: Decimal) -> int:
    """
    Bonus for larger bills.

    - > 1000: +3
    - > 500: +2
    - > 100: +1
    """
    for threshold, bonus in AMOUNT_TIERS:
        if amount > threshold:
            return bonus
    return 0


def risk_bonus(risk: MonthRisk) -> int:
    """Critical and low-income flags are independent and add up."""
    bonus = 0
    if risk.critical:
        bonus += CRITICAL_MONTH_BONUS
    if risk.low_income:
        bonus += LOW_INCOME_MONTH_BONUS
    return bonus


def score_invoice(invoice: Invoice, risk: MonthRisk, today: date) -> int:
    """
    Compute the scheduling priority of one invoice.

    Baseline priority + urgency + amount + month risk. Unbounded: scores are
    only compared with each other.
    """
    return (
        invoice.priority
        + urgency_bonus(days_until_due(invoice, today))
        + amount_bonus(invoice.amount)
        + risk_bonus(risk)
    )


class PriorityScorer:
    """Scores invoices against a month risk lookup."""

    def __init__(self, risk_index: Optional[MonthRiskIndex] = None):
        self._risk_index = risk_index

    def risk_for(self, invoice: Invoice) -> MonthRisk:
        if self._risk_index is None:
            return MonthRisk()
        return self._risk_index.for_date(invoice.due_date)

    def score(self, invoice: Invoice, today: date) -> int:
        return score_invoice(invoice, self.risk_for(invoice), today)

"""
Core Data Models for the Invoice Scheduler

These models describe the records the scheduler reads from the invoice store:
invoices, month settings and their annual expenses. Paydays are plain
``datetime.date`` values and have no model of their own.

DESIGN DECISION: Invoices are frozen. The scheduler never edits a stored
record in place; a changed priority only reaches storage through the
priority persister.
"""

import calendar
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class InvoiceStatus(str, Enum):
    """
    Payment status of an invoice.

    Only PENDING invoices take part in scheduling. The move from PENDING
    to OVERDUE is made by the surrounding application, never here.
    """
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class PaymentMethod(str, Enum):
    """How the user usually settles an invoice."""
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    OTHER = "other"


# =============================================================================
# INVOICE
# =============================================================================

class Invoice(BaseModel):
    """
    A bill the user has to pay.

    ``priority`` is the user-assigned baseline weight. The scheduler adds
    urgency, amount and month-risk bonuses on top of it.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique invoice ID"
    )
    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Short name shown to the user"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount to pay"
    )
    due_date: date = Field(
        ...,
        description="Payment due date"
    )
    status: InvoiceStatus = Field(
        default=InvoiceStatus.PENDING,
        description="Payment status"
    )
    priority: int = Field(
        default=0,
        ge=0,
        description="Baseline priority (higher means more important)"
    )

    # Optional payment instrument
    payment_method: Optional[PaymentMethod] = None
    card_id: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Identifier of the card this invoice is paid with"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000
    )

    @property
    def is_schedulable(self) -> bool:
        """Only pending invoices are scheduled."""
        return self.status == InvoiceStatus.PENDING


# =============================================================================
# MONTH SETTINGS
# =============================================================================

class AnnualExpense(BaseModel):
    """A yearly recurring expense noted against a month (insurance, taxes...)."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    title: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0, decimal_places=2)
    due_date: date


class MonthSetting(BaseModel):
    """
    User annotations for one calendar month.

    ``year`` and ``month`` are deliberately unconstrained here: settings come
    from storage as-is, and a malformed pair is reported by the month
    setting validator instead of failing the whole snapshot load.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    year: int
    month: int
    critical: bool = Field(
        default=False,
        description="Month with unusually heavy obligations"
    )
    low_income: bool = Field(
        default=False,
        description="Month with reduced income"
    )
    note: Optional[str] = Field(default=None, max_length=1000)
    annual_expenses: list[AnnualExpense] = Field(default_factory=list)

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)

    @property
    def total_annual_expenses(self) -> Decimal:
        return sum((e.amount for e in self.annual_expenses), Decimal("0"))

    @property
    def display_name(self) -> str:
        """e.g. "March 2025". Empty for an invalid month number."""
        if not 1 <= self.month <= 12:
            return ""
        return f"{calendar.month_name[self.month]} {self.year}"

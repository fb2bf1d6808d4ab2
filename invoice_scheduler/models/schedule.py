"""
Schedule Models

Everything the scheduling engine produces. These objects are rebuilt on
every run and never persisted.

CRITICAL: A ScheduleResult carries no timestamps and no generated IDs.
Two runs over the same snapshot and reference date must serialize to the
same bytes.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from invoice_scheduler.models.invoice import Invoice


class MonthRisk(BaseModel):
    """Risk flags for one (year, month). Both false when nothing is set."""
    model_config = ConfigDict(frozen=True)

    critical: bool = False
    low_income: bool = False


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_month', 'duplicate_setting')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ScheduleEntry(BaseModel):
    """One invoice with its computed priority and payment date."""
    model_config = ConfigDict(frozen=True)

    invoice: Invoice
    priority: int = Field(..., ge=0)
    payday: date = Field(
        ...,
        description="Payday the invoice was assigned to"
    )
    payment_date: date = Field(
        ...,
        description="Recommended payment date (payday moved off weekends)"
    )
    was_weekend_adjusted: bool = False

    @property
    def invoice_id(self) -> UUID:
        return self.invoice.id


class PaydayBucket(BaseModel):
    """All entries paid out of one payday, highest priority first."""

    payday: date
    payment_date: date
    entries: list[ScheduleEntry] = Field(default_factory=list)
    total_amount: Decimal = Decimal("0")

    @property
    def invoice_count(self) -> int:
        return len(self.entries)


class UnassignableInvoice(BaseModel):
    """A pending invoice the engine could not place on any payday."""

    invoice_id: UUID
    title: str
    due_date: date
    reason: str = "no_payday_available"


class ScheduleResult(BaseModel):
    """
    Output of one scheduling run.

    ``entries`` is the flat schedule: ascending payment date, then
    descending priority. ``buckets`` is the same data grouped by payday.
    Every pending invoice appears exactly once, either in ``entries`` or in
    ``unassignable``.
    """

    reference_date: date
    entries: list[ScheduleEntry] = Field(default_factory=list)
    buckets: list[PaydayBucket] = Field(default_factory=list)
    unassignable: list[UnassignableInvoice] = Field(default_factory=list)
    validation_issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def total_amount(self) -> Decimal:
        return sum((e.invoice.amount for e in self.entries), Decimal("0"))

    @property
    def unassignable_ids(self) -> list[UUID]:
        return [u.invoice_id for u in self.unassignable]

    @property
    def has_warnings(self) -> bool:
        """True when the user should look at something besides the schedule."""
        return bool(self.unassignable or self.validation_issues)


class PersistFailure(BaseModel):
    """A priority write that failed after retries."""

    invoice_id: UUID
    error_type: str
    error_message: str


class PersistResult(BaseModel):
    """Outcome of writing computed priorities back to the store."""

    persisted: list[UUID] = Field(default_factory=list)
    failures: list[PersistFailure] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def failure_count(self) -> int:
        return len(self.failures)

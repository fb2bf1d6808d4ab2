"""
Schedule Builder

Ties the engine together: validate month settings, score invoices, assign
paydays, move dates off weekends, then sort and group.

CRITICAL: build() is pure. It reads nothing but its arguments, writes
nothing, and does not look at the clock. The caller passes ``today``.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from invoice_scheduler.config.settings import SchedulingSettings
from invoice_scheduler.engine.assignment import DEFAULT_SOFT_CAPACITY, PaydayAssigner
from invoice_scheduler.engine.paydays import PaydayLike
from invoice_scheduler.engine.risk import MonthRiskIndex
from invoice_scheduler.engine.scoring import PriorityScorer
from invoice_scheduler.engine.weekend import adjust_for_weekend
from invoice_scheduler.models.invoice import Invoice, MonthSetting
from invoice_scheduler.models.schedule import (
    PaydayBucket,
    ScheduleEntry,
    ScheduleResult,
    UnassignableInvoice,
)
from invoice_scheduler.validation.validator import MonthSettingValidator

logger = structlog.get_logger(__name__)


def due_order(invoices: Iterable[Invoice]) -> list[Invoice]:
    """Pending invoices, earliest due first. Ties broken by id for repeatability."""
    pending = [invoice for invoice in invoices if invoice.is_schedulable]
    return sorted(pending, key=lambda i: (i.due_date, str(i.id)))


def sort_flat_schedule(entries: list[ScheduleEntry]) -> list[ScheduleEntry]:
    """
    Ascending payment date, then descending priority.

    ``entries`` must already be in due-date order; the sort is stable so that
    order survives as the final tiebreaker.
    """
    return sorted(entries, key=lambda e: (e.payment_date, -e.priority))


def group_by_payday(
    entries: list[ScheduleEntry],
    paydays: list[date],
) -> list[PaydayBucket]:
    """
    One bucket per payday, in payday order, entries by descending priority.

    Paydays that received nothing still get an (empty) bucket.
    """
    by_payday: dict[date, list[ScheduleEntry]] = {payday: [] for payday in paydays}
    for entry in entries:
        by_payday[entry.payday].append(entry)

    buckets = []
    for payday in paydays:
        bucket_entries = sorted(by_payday[payday], key=lambda e: -e.priority)
        payment_date, _ = adjust_for_weekend(payday)
        buckets.append(PaydayBucket(
            payday=payday,
            payment_date=payment_date,
            entries=bucket_entries,
            total_amount=sum((e.invoice.amount for e in bucket_entries), Decimal("0")),
        ))
    return buckets


class ScheduleBuilder:
    """
    Computes a payment schedule from a snapshot.

    One builder can be reused across runs; it keeps no state between calls.
    """

    def __init__(
        self,
        settings: Optional[SchedulingSettings] = None,
        validator: Optional[MonthSettingValidator] = None,
    ):
        self._soft_capacity = settings.soft_capacity if settings else DEFAULT_SOFT_CAPACITY
        self._validator = validator or MonthSettingValidator()

    def build(
        self,
        invoices: Iterable[Invoice],
        paydays: Iterable[PaydayLike],
        month_settings: Iterable[MonthSetting],
        today: date,
    ) -> ScheduleResult:
        """
        Build the schedule.

        Args:
            invoices: Invoices from the store; anything not pending is ignored
            paydays: Expected income dates, any order, duplicates allowed
            month_settings: Per-month risk flags
            today: Reference date for urgency and payday eligibility

        Returns:
            ScheduleResult with the flat schedule, payday buckets, invoices
            that could not be placed and month setting issues
        """
        ordered = due_order(invoices)
        risk_index = MonthRiskIndex.build(month_settings, self._validator)
        scorer = PriorityScorer(risk_index)
        assigner = PaydayAssigner(paydays, today, soft_capacity=self._soft_capacity)

        entries: list[ScheduleEntry] = []
        unassignable: list[UnassignableInvoice] = []

        for invoice in ordered:
            payday = assigner.assign(invoice.due_date)
            if payday is None:
                unassignable.append(UnassignableInvoice(
                    invoice_id=invoice.id,
                    title=invoice.title,
                    due_date=invoice.due_date,
                ))
                continue

            payment_date, adjusted = adjust_for_weekend(payday)
            entries.append(ScheduleEntry(
                invoice=invoice,
                priority=scorer.score(invoice, today),
                payday=payday,
                payment_date=payment_date,
                was_weekend_adjusted=adjusted,
            ))

        if unassignable:
            logger.warning(
                "invoices_unassignable",
                count=len(unassignable),
                reason="no_payday_available",
            )

        result = ScheduleResult(
            reference_date=today,
            entries=sort_flat_schedule(entries),
            buckets=group_by_payday(entries, assigner.paydays) if entries else [],
            unassignable=unassignable,
            validation_issues=risk_index.issues,
        )

        logger.debug(
            "schedule_built",
            reference_date=today.isoformat(),
            entry_count=len(result.entries),
            bucket_count=len(result.buckets),
            payday_loads={p.isoformat(): n for p, n in assigner.tracker.loads().items()},
        )
        return result

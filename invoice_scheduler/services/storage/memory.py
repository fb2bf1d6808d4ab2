"""
In-Memory Storage Implementation

A dictionary-backed implementation of the storage interfaces. Used by the
test suite and by host applications that keep their data in memory and
only want the scheduling engine.

Paydays are keyed by calendar day, so the same day can only be stored
once. Month settings keep insertion order; when two settings share a
(year, month) both are returned and the engine uses the first.
"""

from datetime import date, datetime
from typing import Optional, Union
from uuid import UUID

from invoice_scheduler.models.audit import AuditEvent
from invoice_scheduler.models.invoice import Invoice, InvoiceStatus, MonthSetting
from invoice_scheduler.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    InvoiceStoreInterface,
    NotFoundError,
    StorageError,
)


def _as_day(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


class InMemoryInvoiceStore(InvoiceStoreInterface):
    """Invoice store backed by plain dicts and lists."""

    def __init__(
        self,
        invoices: Optional[list[Invoice]] = None,
        paydays: Optional[list[Union[date, datetime]]] = None,
        month_settings: Optional[list[MonthSetting]] = None,
    ):
        self._invoices: dict[UUID, Invoice] = {}
        self._paydays: set[date] = set()
        self._month_settings: list[MonthSetting] = list(month_settings or [])
        # invoice_id -> errors to raise on the next update attempts
        self._pending_failures: dict[UUID, list[StorageError]] = {}
        self.update_calls: list[tuple[UUID, int]] = []

        for invoice in invoices or []:
            self._invoices[invoice.id] = invoice
        for payday in paydays or []:
            self._paydays.add(_as_day(payday))

    # -------------------------------------------------------------------------
    # InvoiceStoreInterface
    # -------------------------------------------------------------------------

    async def list_pending_invoices(self) -> list[Invoice]:
        return [
            invoice for invoice in self._invoices.values()
            if invoice.status == InvoiceStatus.PENDING
        ]

    async def list_paydays(self) -> list[date]:
        return sorted(self._paydays)

    async def list_month_settings(self) -> list[MonthSetting]:
        return list(self._month_settings)

    async def update_invoice_priority(self, invoice_id: UUID, new_priority: int) -> None:
        self.update_calls.append((invoice_id, new_priority))

        failures = self._pending_failures.get(invoice_id)
        if failures:
            raise failures.pop(0)

        invoice = self._invoices.get(invoice_id)
        if invoice is None:
            raise NotFoundError(f"Invoice not found: {invoice_id}")

        self._invoices[invoice_id] = invoice.model_copy(update={"priority": new_priority})

    # -------------------------------------------------------------------------
    # Invoices
    # -------------------------------------------------------------------------

    async def save_invoice(self, invoice: Invoice) -> None:
        """Insert or replace an invoice."""
        self._invoices[invoice.id] = invoice

    async def get_invoice(self, invoice_id: UUID) -> Optional[Invoice]:
        return self._invoices.get(invoice_id)

    # -------------------------------------------------------------------------
    # Paydays
    # -------------------------------------------------------------------------

    async def save_payday(self, payday: Union[date, datetime]) -> None:
        """
        Store a payday.

        Raises:
            DuplicateError: If a payday already exists on the same day
        """
        day = _as_day(payday)
        if day in self._paydays:
            raise DuplicateError(f"A payday already exists on {day.isoformat()}")
        self._paydays.add(day)

    async def delete_payday(self, payday: Union[date, datetime]) -> None:
        """Remove the payday on that calendar day, if any."""
        self._paydays.discard(_as_day(payday))

    async def next_payday(self, after: Union[date, datetime]) -> Optional[date]:
        """First payday strictly after the given day, or None."""
        day = _as_day(after)
        upcoming = [p for p in self._paydays if p > day]
        return min(upcoming) if upcoming else None

    # -------------------------------------------------------------------------
    # Month settings
    # -------------------------------------------------------------------------

    async def save_month_setting(self, setting: MonthSetting) -> None:
        """Replace the setting with the same id, or append a new one."""
        for index, existing in enumerate(self._month_settings):
            if existing.id == setting.id:
                self._month_settings[index] = setting
                return
        self._month_settings.append(setting)

    # -------------------------------------------------------------------------
    # Test hooks
    # -------------------------------------------------------------------------

    def fail_updates(self, invoice_id: UUID, *errors: StorageError) -> None:
        """Make the next update attempts for an invoice raise these errors, in order."""
        self._pending_failures.setdefault(invoice_id, []).extend(errors)


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log held in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

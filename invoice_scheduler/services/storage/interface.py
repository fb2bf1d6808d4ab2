"""
Abstract Storage Interface

DESIGN DECISION: The scheduler never reaches for a shared, process-wide
store. The caller hands in an object implementing this interface.
This allows us to:
1. Plug in whatever the host application persists invoices with
2. Use in-memory storage for testing
3. Keep the scheduling engine decoupled from storage entirely

The interface is intentionally small: three reads for the snapshot and
one write for the priority persister.
"""

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from invoice_scheduler.models.audit import AuditEvent
from invoice_scheduler.models.invoice import Invoice, MonthSetting


class InvoiceStoreInterface(ABC):
    """
    Abstract interface for the invoice store the scheduler reads from.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def list_pending_invoices(self) -> list[Invoice]:
        """
        List invoices that still have to be paid.

        Returns:
            Invoices with status ``pending``. Implementations may return
            other statuses too; the engine filters them out.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def list_paydays(self) -> list[date]:
        """
        List expected income dates.

        Returns:
            Payday dates in any order. May be empty.
        """
        pass

    @abstractmethod
    async def list_month_settings(self) -> list[MonthSetting]:
        """
        List per-month risk annotations.

        Returns:
            Month settings in any order. May be empty.
        """
        pass

    @abstractmethod
    async def update_invoice_priority(self, invoice_id: UUID, new_priority: int) -> None:
        """
        Overwrite the stored priority of one invoice.

        Each call is independent and last-writer-wins.

        Args:
            invoice_id: The invoice's unique identifier
            new_priority: The priority to store

        Raises:
            NotFoundError: If the invoice doesn't exist
            ConnectionError: If the backend is temporarily unreachable
            StorageError: For any other write failure
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one scheduling run).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not reach the storage backend. Safe to retry."""
    pass

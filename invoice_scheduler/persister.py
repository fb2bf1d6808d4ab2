"""
Priority Persister

Writes computed priorities back to the invoice store so they become the
baseline for future runs.

DESIGN DECISION: Persisting is a separate, opt-in step. Building a
schedule never changes stored data; only an explicit persist() call does.

Each invoice is written on its own:
- A transient ConnectionError is retried with exponential backoff
- Any StorageError left after retries is recorded, and the next invoice
  is still written
"""

from typing import Iterable, Optional
from uuid import UUID

import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from invoice_scheduler.audit.logger import AuditLogger
from invoice_scheduler.config.settings import PersistenceSettings
from invoice_scheduler.models.schedule import PersistFailure, PersistResult, ScheduleEntry
from invoice_scheduler.services.storage.interface import (
    ConnectionError,
    InvoiceStoreInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)


class PriorityPersister:
    """Writes ScheduleEntry priorities to an InvoiceStoreInterface."""

    def __init__(
        self,
        store: InvoiceStoreInterface,
        settings: Optional[PersistenceSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._settings = settings or PersistenceSettings()
        self._audit_logger = audit_logger

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(ConnectionError),
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(
                multiplier=self._settings.backoff_multiplier,
                min=self._settings.backoff_min_seconds,
                max=self._settings.backoff_max_seconds,
            ),
            reraise=True,
        )

    async def _write(self, invoice_id: UUID, priority: int) -> None:
        async for attempt in self._retrying():
            with attempt:
                await self._store.update_invoice_priority(invoice_id, priority)

    async def persist(
        self,
        entries: Iterable[ScheduleEntry],
        correlation_id: Optional[UUID] = None,
    ) -> PersistResult:
        """
        Persist the priority of every entry.

        Args:
            entries: Schedule entries whose priorities should stick
            correlation_id: Ties audit events to a scheduling run

        Returns:
            PersistResult listing saved invoice IDs and failures
        """
        result = PersistResult()

        for entry in entries:
            invoice_id = entry.invoice.id
            try:
                await self._write(invoice_id, entry.priority)
            except StorageError as e:
                logger.warning(
                    "priority_persist_failed",
                    invoice_id=str(invoice_id),
                    error_type=type(e).__name__,
                    error=str(e),
                )
                result.failures.append(PersistFailure(
                    invoice_id=invoice_id,
                    error_type=type(e).__name__,
                    error_message=str(e),
                ))
                if self._audit_logger:
                    await self._audit_logger.log_priority_persist_failed(
                        invoice_id=invoice_id,
                        priority=entry.priority,
                        error_type=type(e).__name__,
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                continue

            result.persisted.append(invoice_id)
            if self._audit_logger:
                await self._audit_logger.log_priority_persisted(
                    invoice_id=invoice_id,
                    priority=entry.priority,
                    correlation_id=correlation_id,
                )

        if self._audit_logger:
            await self._audit_logger.log_persistence_completed(
                persisted_count=len(result.persisted),
                failure_count=result.failure_count,
                correlation_id=correlation_id,
            )

        return result

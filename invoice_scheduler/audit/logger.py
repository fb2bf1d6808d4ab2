"""
Audit Logger

DESIGN DECISION: Every scheduling run and every priority write is logged.
This provides:
1. Traceability of why an invoice landed on a payday
2. A record of which priorities were saved and which failed
3. Debugging capability

The audit logger:
- Is async so it fits next to the async store calls
- Gracefully handles storage failures (a lost audit row never breaks a run)
- Supports correlation IDs to trace the events of one run
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from invoice_scheduler.config.settings import AppSettings, get_settings
from invoice_scheduler.models.audit import AuditEvent, AuditEventBuilder
from invoice_scheduler.models.schedule import ScheduleResult, ValidationIssue
from invoice_scheduler.services.storage.interface import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def setup_logging(settings: Optional[AppSettings] = None) -> str:
    """
    Apply the configured log level to the standard library root logger.

    structlog's level filter reads the stdlib logger level, so without this
    anything below WARNING is dropped. ``debug_mode`` forces DEBUG. The
    environment name is bound to every log line.

    Returns the level that was applied.
    """
    settings = settings or get_settings().app
    level = "DEBUG" if settings.debug_mode else settings.log_level

    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.contextvars.bind_contextvars(environment=settings.app_environment)
    return level


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_schedule_requested(
        self,
        reference_date: str,
        correlation_id: UUID,
    ) -> None:
        """Log the start of a scheduling run."""
        event = AuditEventBuilder.schedule_requested(
            reference_date=reference_date,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_loaded(
        self,
        invoice_count: int,
        payday_count: int,
        month_setting_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful snapshot read."""
        event = AuditEventBuilder.snapshot_loaded(
            invoice_count=invoice_count,
            payday_count=payday_count,
            month_setting_count=month_setting_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_schedule_computed(
        self,
        result: ScheduleResult,
        correlation_id: UUID,
    ) -> None:
        """
        Log a finished schedule.

        Also logs one event per unassignable invoice and per month setting
        issue so each shows up on its own in the audit trail.
        """
        event = AuditEventBuilder.schedule_computed(
            entry_count=len(result.entries),
            bucket_count=len(result.buckets),
            unassignable_count=len(result.unassignable),
            total_amount=str(result.total_amount),
            correlation_id=correlation_id,
        )
        await self.log(event)

        for item in result.unassignable:
            await self.log(AuditEventBuilder.invoice_unassignable(
                invoice_id=item.invoice_id,
                title=item.title,
                reason=item.reason,
                correlation_id=correlation_id,
            ))

        for issue in result.validation_issues:
            await self.log_month_setting_invalid(issue, correlation_id)

    async def log_month_setting_invalid(
        self,
        issue: ValidationIssue,
        correlation_id: UUID,
    ) -> None:
        """Log a month setting that was ignored or looks wrong."""
        event = AuditEventBuilder.month_setting_invalid(
            field=issue.field,
            issue_type=issue.issue_type,
            message=issue.message,
            severity=issue.severity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_priority_persisted(
        self,
        invoice_id: UUID,
        priority: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a saved priority."""
        event = AuditEventBuilder.priority_persisted(
            invoice_id=invoice_id,
            priority=priority,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_priority_persist_failed(
        self,
        invoice_id: UUID,
        priority: int,
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a priority write that failed after retries."""
        event = AuditEventBuilder.priority_persist_failed(
            invoice_id=invoice_id,
            priority=priority,
            error_type=error_type,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_persistence_completed(
        self,
        persisted_count: int,
        failure_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log the end of a persistence pass."""
        event = AuditEventBuilder.persistence_completed(
            persisted_count=persisted_count,
            failure_count=failure_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed store read."""
        event = AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a scheduling run and pass it through all
    subsequent operations.
    """
    return uuid4()

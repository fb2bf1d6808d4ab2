"""
Audit Models for the Invoice Scheduler

Every scheduling run and every priority write is logged for audit purposes.
This lets the user (and us) answer "why was this bill put on that payday?"
and "did my priorities actually get saved?".

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Scheduling
    SCHEDULE_REQUESTED = "schedule_requested"
    SNAPSHOT_LOADED = "snapshot_loaded"
    SCHEDULE_COMPUTED = "schedule_computed"
    INVOICE_UNASSIGNABLE = "invoice_unassignable"
    MONTH_SETTING_INVALID = "month_setting_invalid"

    # Persistence
    PRIORITY_PERSISTED = "priority_persisted"
    PRIORITY_PERSIST_FAILED = "priority_persist_failed"
    PERSISTENCE_COMPLETED = "persistence_completed"

    # System events
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'invoice', 'schedule', 'month_setting')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events of one scheduling run share this
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.schedule_computed(...)
        event = AuditEventBuilder.priority_persist_failed(...)
    """

    @staticmethod
    def schedule_requested(
        reference_date: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULE_REQUESTED,
            entity_type="schedule",
            correlation_id=correlation_id,
            description=f"Schedule requested for {reference_date}",
            details={
                "reference_date": reference_date,
            },
        )

    @staticmethod
    def snapshot_loaded(
        invoice_count: int,
        payday_count: int,
        month_setting_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="schedule",
            correlation_id=correlation_id,
            description=(
                f"Loaded {invoice_count} invoices, {payday_count} paydays "
                f"and {month_setting_count} month settings"
            ),
            details={
                "invoice_count": invoice_count,
                "payday_count": payday_count,
                "month_setting_count": month_setting_count,
            },
        )

    @staticmethod
    def schedule_computed(
        entry_count: int,
        bucket_count: int,
        unassignable_count: int,
        total_amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULE_COMPUTED,
            severity=AuditSeverity.WARNING if unassignable_count else AuditSeverity.INFO,
            entity_type="schedule",
            correlation_id=correlation_id,
            description=(
                f"Scheduled {entry_count} invoices across {bucket_count} paydays"
                + (f", {unassignable_count} need a payday" if unassignable_count else "")
            ),
            details={
                "entry_count": entry_count,
                "bucket_count": bucket_count,
                "unassignable_count": unassignable_count,
                "total_amount": total_amount,
            },
        )

    @staticmethod
    def invoice_unassignable(
        invoice_id: UUID,
        title: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.INVOICE_UNASSIGNABLE,
            severity=AuditSeverity.WARNING,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Invoice needs a payday: {title}",
            details={
                "reason": reason,
            },
        )

    @staticmethod
    def month_setting_invalid(
        field: str,
        issue_type: str,
        message: str,
        severity: str,
        correlation_id: UUID
    ) -> AuditEvent:
        # Only error-level issues cause the setting to be skipped
        if severity == "error":
            description = f"Month setting ignored: {message}"
        else:
            description = f"Month setting applied with a {severity}: {message}"
        return AuditEvent(
            event_type=AuditEventType.MONTH_SETTING_INVALID,
            severity=AuditSeverity(severity),
            entity_type="month_setting",
            correlation_id=correlation_id,
            description=description,
            details={
                "field": field,
                "issue_type": issue_type,
            },
        )

    @staticmethod
    def priority_persisted(
        invoice_id: UUID,
        priority: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRIORITY_PERSISTED,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Priority saved: {priority}",
            details={
                "priority": priority,
            },
        )

    @staticmethod
    def priority_persist_failed(
        invoice_id: UUID,
        priority: int,
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRIORITY_PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="invoice",
            entity_id=invoice_id,
            correlation_id=correlation_id,
            description=f"Could not save priority {priority}",
            error_code=error_type,
            error_message=error_message,
            details={
                "priority": priority,
            },
        )

    @staticmethod
    def persistence_completed(
        persisted_count: int,
        failure_count: int,
        correlation_id: Optional[UUID]
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_COMPLETED,
            severity=AuditSeverity.WARNING if failure_count else AuditSeverity.INFO,
            entity_type="schedule",
            correlation_id=correlation_id,
            description=f"Saved {persisted_count} priorities, {failure_count} failed",
            details={
                "persisted_count": persisted_count,
                "failure_count": failure_count,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
            correlation_id=correlation_id,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

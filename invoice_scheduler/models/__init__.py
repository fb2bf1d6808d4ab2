"""
Data Models Package

This package contains all Pydantic models used by the invoice scheduler.
All data flowing through the engine must conform to these schemas.
"""

from invoice_scheduler.models.invoice import (
    AnnualExpense,
    Invoice,
    InvoiceStatus,
    MonthSetting,
    PaymentMethod,
)
from invoice_scheduler.models.schedule import (
    MonthRisk,
    PaydayBucket,
    PersistFailure,
    PersistResult,
    ScheduleEntry,
    ScheduleResult,
    UnassignableInvoice,
    ValidationIssue,
)
from invoice_scheduler.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Invoice models
    "AnnualExpense",
    "Invoice",
    "InvoiceStatus",
    "MonthSetting",
    "PaymentMethod",
    # Schedule models
    "MonthRisk",
    "PaydayBucket",
    "PersistFailure",
    "PersistResult",
    "ScheduleEntry",
    "ScheduleResult",
    "UnassignableInvoice",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

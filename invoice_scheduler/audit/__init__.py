"""Audit logging package."""

from invoice_scheduler.audit.logger import AuditLogger, create_correlation_id, setup_logging

__all__ = ["AuditLogger", "create_correlation_id", "setup_logging"]

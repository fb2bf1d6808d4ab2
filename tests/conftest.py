"""Pytest fixtures shared by the test suite"""

import logging
from datetime import date, timedelta
from decimal import Decimal

import pytest
import structlog

from invoice_scheduler.config import PersistenceSettings
from invoice_scheduler.models.invoice import Invoice, InvoiceStatus

# Monday. 2025-03-01 is a Saturday, 2025-03-08 the next one.
TODAY = date(2025, 3, 3)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_invoice():
    """
    Factory for invoices due a number of days after TODAY.

    Usage:
        invoice = make_invoice(10, "600", title="Rent")
    """
    def _make(
        days_until_due: int = 0,
        amount: str = "0",
        title: str = "Invoice",
        status: InvoiceStatus = InvoiceStatus.PENDING,
        priority: int = 0,
    ) -> Invoice:
        return Invoice(
            title=title,
            amount=Decimal(amount),
            due_date=TODAY + timedelta(days=days_until_due),
            status=status,
            priority=priority,
        )

    return _make


@pytest.fixture
def instant_retry_settings() -> PersistenceSettings:
    """Retry settings with no backoff so tests don't sleep."""
    return PersistenceSettings(
        max_attempts=3,
        backoff_multiplier=0.0,
        backoff_min_seconds=0.0,
        backoff_max_seconds=0.0,
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger level and bound log context changed by setup_logging()."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()

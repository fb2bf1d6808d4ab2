"""
Storage Services Package

Provides the abstract storage interfaces the scheduler depends on and an
in-memory implementation of them.
"""

from invoice_scheduler.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    InvoiceStoreInterface,
    NotFoundError,
    StorageError,
)
from invoice_scheduler.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryInvoiceStore,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "InvoiceStoreInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryInvoiceStore",
]

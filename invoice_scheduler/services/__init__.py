"""Services package."""

from invoice_scheduler.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryInvoiceStore,
    InvoiceStoreInterface,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryInvoiceStore",
    "InvoiceStoreInterface",
    "NotFoundError",
    "StorageError",
]

"""
Main Orchestrator for the Invoice Scheduler

This module ties together the store, the scheduling engine, the priority
persister and the audit logger into one flow:

    read snapshot → build schedule → (optionally) persist priorities

DESIGN DECISION: The orchestrator enforces the boundaries:
- All reads happen before the engine runs, all writes after it
- The engine never sees the store, only a snapshot
- Nothing is written unless the caller asks for it
- Every step is audited

This is also the only place that reads the clock. Everything below it
takes ``today`` as an argument.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional
from uuid import UUID

from invoice_scheduler.audit import AuditLogger, create_correlation_id, setup_logging
from invoice_scheduler.config import get_settings
from invoice_scheduler.engine import ScheduleBuilder
from invoice_scheduler.models.invoice import Invoice, MonthSetting
from invoice_scheduler.models.schedule import PersistResult, ScheduleResult
from invoice_scheduler.persister import PriorityPersister
from invoice_scheduler.services.storage import (
    AuditStorageInterface,
    InvoiceStoreInterface,
    StorageError,
)


@dataclass
class ScheduleSnapshot:
    """The three inputs of a scheduling run, read once from the store."""

    invoices: list[Invoice] = field(default_factory=list)
    paydays: list[date] = field(default_factory=list)
    month_settings: list[MonthSetting] = field(default_factory=list)


class SchedulingFlow:
    """
    Orchestrates one scheduling run.

    Flow:
    1. Load → read invoices, paydays and month settings
    2. Build → compute the schedule (pure)
    3. Persist → write priorities back (only when asked)
    """

    def __init__(
        self,
        store: InvoiceStoreInterface,
        builder: Optional[ScheduleBuilder] = None,
        persister: Optional[PriorityPersister] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger
        self._builder = builder or ScheduleBuilder(get_settings().scheduling)
        self._persister = persister or PriorityPersister(
            store,
            settings=get_settings().persistence,
            audit_logger=audit_logger,
        )

    async def load_snapshot(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> ScheduleSnapshot:
        """
        Read the scheduling inputs from the store.

        Raises:
            StorageError: If any read fails (after logging it)
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            invoices = await self._store.list_pending_invoices()
            paydays = await self._store.list_paydays()
            month_settings = await self._store.list_month_settings()
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load_snapshot",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        snapshot = ScheduleSnapshot(
            invoices=list(invoices),
            paydays=list(paydays),
            month_settings=list(month_settings),
        )

        if self._audit_logger:
            await self._audit_logger.log_snapshot_loaded(
                invoice_count=len(snapshot.invoices),
                payday_count=len(snapshot.paydays),
                month_setting_count=len(snapshot.month_settings),
                correlation_id=correlation_id,
            )

        return snapshot

    async def build_schedule(
        self,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ScheduleResult:
        """
        Load a fresh snapshot and compute the schedule from it.

        Args:
            today: Reference date. Defaults to the current local date.

        Returns:
            The computed ScheduleResult. Nothing is written to the store.
        """
        correlation_id = correlation_id or create_correlation_id()
        today = today or date.today()

        if self._audit_logger:
            await self._audit_logger.log_schedule_requested(
                reference_date=today.isoformat(),
                correlation_id=correlation_id,
            )

        snapshot = await self.load_snapshot(correlation_id)
        result = self._builder.build(
            invoices=snapshot.invoices,
            paydays=snapshot.paydays,
            month_settings=snapshot.month_settings,
            today=today,
        )

        if self._audit_logger:
            await self._audit_logger.log_schedule_computed(result, correlation_id)

        return result

    async def persist_priorities(
        self,
        result: ScheduleResult,
        correlation_id: Optional[UUID] = None,
    ) -> PersistResult:
        """
        Write the priorities of a computed schedule back to the store.

        Unassignable invoices have no computed priority and are skipped.
        """
        return await self._persister.persist(result.entries, correlation_id=correlation_id)

    async def run(
        self,
        today: Optional[date] = None,
        persist: bool = False,
    ) -> tuple[ScheduleResult, Optional[PersistResult]]:
        """
        Build a schedule and, if requested, persist its priorities.

        Returns:
            (schedule_result, persist_result). persist_result is None when
            persist is False.
        """
        correlation_id = create_correlation_id()

        result = await self.build_schedule(today=today, correlation_id=correlation_id)
        if not persist:
            return result, None

        persisted = await self.persist_priorities(result, correlation_id=correlation_id)
        return result, persisted


def create_app_components(
    store: InvoiceStoreInterface,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> tuple[SchedulingFlow, AuditLogger]:
    """
    Factory function to wire a scheduling flow.

    Args:
        store: The host application's invoice store
        audit_storage: Where audit events are appended. If None, events
                      are only logged locally.

    Returns:
        (scheduling_flow, audit_logger)
    """
    settings = get_settings()
    setup_logging(settings.app)
    audit_logger = AuditLogger(audit_storage)

    flow = SchedulingFlow(
        store=store,
        builder=ScheduleBuilder(settings.scheduling),
        persister=PriorityPersister(
            store,
            settings=settings.persistence,
            audit_logger=audit_logger,
        ),
        audit_logger=audit_logger,
    )

    return flow, audit_logger

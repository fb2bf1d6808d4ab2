"""Flow tests: store snapshot → schedule → optional persistence"""

from datetime import date, timedelta

import pytest

from invoice_scheduler.audit import AuditLogger
from invoice_scheduler.engine import ScheduleBuilder
from invoice_scheduler.models.audit import AuditEventType
from invoice_scheduler.models.invoice import InvoiceStatus, MonthSetting
from invoice_scheduler.orchestrator import SchedulingFlow, create_app_components
from invoice_scheduler.persister import PriorityPersister
from invoice_scheduler.services.storage import (
    ConnectionError,
    InMemoryAuditStorage,
    InMemoryInvoiceStore,
    StorageError,
)

TODAY = date(2025, 3, 3)


class UnreachableStore(InMemoryInvoiceStore):
    async def list_paydays(self):
        raise ConnectionError("backend offline")


@pytest.fixture
def store(make_invoice):
    return InMemoryInvoiceStore(
        invoices=[
            make_invoice(1, "50", title="Streaming"),
            make_invoice(10, "600", title="Rent"),
            make_invoice(40, "1500", title="Tuition"),
            make_invoice(3, "80", title="Paid already", status=InvoiceStatus.PAID),
        ],
        paydays=[TODAY, TODAY + timedelta(days=14), TODAY + timedelta(days=35)],
        month_settings=[MonthSetting(year=2025, month=4, low_income=True)],
    )


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def flow(store, audit_storage, instant_retry_settings):
    audit_logger = AuditLogger(audit_storage)
    return SchedulingFlow(
        store=store,
        builder=ScheduleBuilder(),
        persister=PriorityPersister(store, settings=instant_retry_settings, audit_logger=audit_logger),
        audit_logger=audit_logger,
    )


class TestSchedulingFlow:
    """Tests for SchedulingFlow."""

    @pytest.mark.asyncio
    async def test_load_snapshot(self, flow):
        snapshot = await flow.load_snapshot()
        assert len(snapshot.invoices) == 3
        assert snapshot.paydays == [TODAY, TODAY + timedelta(days=14), TODAY + timedelta(days=35)]
        assert len(snapshot.month_settings) == 1

    @pytest.mark.asyncio
    async def test_run_without_persist_leaves_store_untouched(self, flow, store):
        """Test building a schedule is read-only."""
        result, persisted = await flow.run(today=TODAY)

        assert persisted is None
        assert len(result.entries) == 3
        assert store.update_calls == []
        for invoice in await store.list_pending_invoices():
            assert invoice.priority == 0

    @pytest.mark.asyncio
    async def test_run_with_persist_updates_priorities(self, flow, store):
        result, persisted = await flow.run(today=TODAY, persist=True)

        assert persisted.success
        assert len(persisted.persisted) == 3
        for entry in result.entries:
            stored = await store.get_invoice(entry.invoice.id)
            assert stored.priority == entry.priority

    @pytest.mark.asyncio
    async def test_month_risk_from_store_is_applied(self, flow):
        """Test the April low-income flag reaches the April invoice."""
        result, _ = await flow.run(today=TODAY)
        by_title = {e.invoice.title: e for e in result.entries}
        # 1500 > 1000 gives 3, low income April gives 2
        assert by_title["Tuition"].priority == 5

    @pytest.mark.asyncio
    async def test_persisted_priority_becomes_next_baseline(self, flow):
        """Test a second run builds on the saved priorities."""
        first, _ = await flow.run(today=TODAY, persist=True)
        second, _ = await flow.run(today=TODAY)

        before = {e.invoice.id: e.priority for e in first.entries}
        for entry in second.entries:
            assert entry.priority >= before[entry.invoice.id]

    @pytest.mark.asyncio
    async def test_run_events_share_correlation_id(self, flow, audit_storage):
        await flow.run(today=TODAY, persist=True)

        recent = await audit_storage.get_recent_events()
        correlation_ids = {e.correlation_id for e in recent}
        assert len(correlation_ids) == 1

        events = await audit_storage.get_events_by_correlation_id(correlation_ids.pop())
        types = [e.event_type for e in events]
        assert types[:3] == [
            AuditEventType.SCHEDULE_REQUESTED,
            AuditEventType.SNAPSHOT_LOADED,
            AuditEventType.SCHEDULE_COMPUTED,
        ]
        assert types.count(AuditEventType.PRIORITY_PERSISTED) == 3
        assert types[-1] == AuditEventType.PERSISTENCE_COMPLETED

    @pytest.mark.asyncio
    async def test_unassignable_invoices_are_audited(self, make_invoice, audit_storage):
        """Test a store without paydays reports every invoice."""
        store = InMemoryInvoiceStore(invoices=[make_invoice(2, "10"), make_invoice(9, "10")])
        flow = SchedulingFlow(store=store, audit_logger=AuditLogger(audit_storage))

        result = await flow.build_schedule(today=TODAY)

        assert result.is_empty
        assert len(result.unassignable) == 2
        events = await audit_storage.get_recent_events()
        unassignable = [e for e in events if e.event_type == AuditEventType.INVOICE_UNASSIGNABLE]
        assert {e.entity_id for e in unassignable} == set(result.unassignable_ids)

    @pytest.mark.asyncio
    async def test_store_read_failure_is_logged_and_raised(self, make_invoice, audit_storage):
        store = UnreachableStore(invoices=[make_invoice(2, "10")])
        flow = SchedulingFlow(store=store, audit_logger=AuditLogger(audit_storage))

        with pytest.raises(StorageError, match="backend offline"):
            await flow.run(today=TODAY)

        events = await audit_storage.get_recent_events()
        assert events[0].event_type == AuditEventType.STORAGE_ERROR
        assert events[0].details == {"operation": "load_snapshot"}

    @pytest.mark.asyncio
    async def test_works_without_audit_logger(self, store):
        flow = SchedulingFlow(store=store)
        result, persisted = await flow.run(today=TODAY)
        assert len(result.entries) == 3
        assert persisted is None


class TestCreateAppComponents:
    """Tests for the wiring factory."""

    @pytest.mark.asyncio
    async def test_wires_shared_audit_logger(self, store, audit_storage):
        flow, audit_logger = create_app_components(store, audit_storage)

        assert isinstance(flow, SchedulingFlow)
        assert isinstance(audit_logger, AuditLogger)

        await flow.run(today=TODAY)
        assert await audit_storage.get_recent_events()

"""
Tests for filing storage, collection setup and the demo data scheduler.
"""
import asyncio
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest


def pocketbase_record(**overrides):
    record = {
        "id": "a1b2c3d4e5f6g7h",
        "collectionName": "returns",
        "return_id": "ret-1",
        "filing_id": "fil-1",
        "status": "APPROVED",
        "eta_date": "2025-02-02 00:00:00.000Z",
        "confidence": 0.94,
        "history": [
            {"stage": "FILED", "timestamp": "2025-01-14T10:00:00Z"},
            {"stage": "ACCEPTED", "timestamp": "2025-01-17T10:00:00Z"},
            {"stage": "APPROVED", "timestamp": "2025-01-19T10:00:00Z"},
        ],
        "snap_context": None,
        "created": "2025-01-14 10:00:00.000Z",
    }
    record.update(overrides)
    return record


def mock_client():
    client = MagicMock()
    client.list_records = AsyncMock()
    client.create_record = AsyncMock(return_value={})
    client.list_collections = AsyncMock(return_value=[])
    client.create_collection = AsyncMock(return_value={})
    return client


class TestRefundReturn:
    """Tests for RefundReturn parsing and snapshots."""

    def test_parse_pocketbase_record(self):
        from refund_service.models.filing import FilingStatus, RefundReturn

        refund = RefundReturn.model_validate(pocketbase_record())

        assert refund.status == FilingStatus.APPROVED
        assert refund.eta_date.date() == date(2025, 2, 2)
        assert refund.snap_context == {}
        assert refund.created_at is not None

    def test_unset_dates_are_none(self):
        from refund_service.models.filing import RefundReturn

        refund = RefundReturn.model_validate(
            pocketbase_record(eta_date="", created="", history=None)
        )

        assert refund.eta_date is None
        assert refund.created_at is None
        assert refund.history == []

    def test_to_snapshot(self):
        from refund_service.models.filing import FilingStatus, RefundReturn

        snapshot = RefundReturn.model_validate(pocketbase_record()).to_snapshot()

        assert snapshot.status == FilingStatus.APPROVED
        assert snapshot.confidence == 0.94
        assert snapshot.estimated_date == date(2025, 2, 2)
        assert snapshot.history_length == 3

    def test_confidence_out_of_range_rejected(self):
        from pydantic import ValidationError

        from refund_service.models.filing import RefundReturn

        with pytest.raises(ValidationError):
            RefundReturn.model_validate(pocketbase_record(confidence=1.5))


class TestFilingRepository:
    """Tests for FilingRepository."""

    @pytest.mark.asyncio
    async def test_get_return_filters_by_return_id(self):
        from refund_service.services.filings import FilingRepository

        client = mock_client()
        client.list_records.return_value = {"items": [pocketbase_record()]}

        refund = await FilingRepository(client).get_return("ret-1")

        assert refund.return_id == "ret-1"
        client.list_records.assert_awaited_once_with(
            "returns",
            filter='return_id="ret-1"',
            per_page=1,
        )

    @pytest.mark.asyncio
    async def test_get_return_escapes_quotes(self):
        from refund_service.services.filings import FilingRepository

        client = mock_client()
        client.list_records.return_value = {"items": []}

        await FilingRepository(client).get_return('x" || return_id!="')

        _, kwargs = client.list_records.call_args
        assert kwargs["filter"] == 'return_id="x\\" || return_id!=\\""'

    @pytest.mark.asyncio
    async def test_fetch_status_not_found(self):
        from refund_service.services.filings import FilingRepository

        client = mock_client()
        client.list_records.return_value = {"items": []}

        assert await FilingRepository(client).fetch_status("missing") is None

    @pytest.mark.asyncio
    async def test_fetch_status_propagates_storage_errors(self):
        from refund_service.services.filings import FilingRepository
        from refund_service.services.pocketbase import PocketbaseError

        client = mock_client()
        client.list_records.side_effect = PocketbaseError("Connection error: refused")

        with pytest.raises(PocketbaseError):
            await FilingRepository(client).fetch_status("ret-1")

    @pytest.mark.asyncio
    async def test_insert_demo_return(self):
        """Test the demo row is an approved return due in ten days."""
        from refund_service.services.filings import FilingRepository

        client = mock_client()
        now = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)

        return_id = await FilingRepository(client).insert_demo_return(now=now)

        collection, data = client.create_record.call_args.args
        assert collection == "returns"
        assert data["return_id"] == return_id
        assert data["status"] == "APPROVED"
        assert data["confidence"] == 0.94
        assert data["eta_date"] == "2025-01-25 00:00:00.000Z"
        assert [h["stage"] for h in data["history"]] == ["FILED", "ACCEPTED"]
        assert data["snap_context"] == {}


class TestDatabaseInit:
    """Tests for collection initialization."""

    @pytest.mark.asyncio
    async def test_creates_missing_returns_collection(self):
        from refund_service.services.db_init import init_database

        client = mock_client()

        created, skipped = await init_database(client)

        assert (created, skipped) == (1, 0)
        name, fields, indexes = client.create_collection.call_args.args
        assert name == "returns"
        assert "return_id" in {f["name"] for f in fields}
        assert indexes

    @pytest.mark.asyncio
    async def test_skips_existing_collection(self):
        from refund_service.services.db_init import init_database

        client = mock_client()
        client.list_collections.return_value = [{"name": "returns"}]

        created, skipped = await init_database(client)

        assert (created, skipped) == (0, 1)
        client.create_collection.assert_not_awaited()


class TestDemoDataScheduler:
    """Tests for DemoDataScheduler."""

    def test_rejects_non_positive_interval(self):
        from refund_service.services.scheduler import DemoDataScheduler

        with pytest.raises(ValueError):
            DemoDataScheduler(MagicMock(), interval_seconds=0)

    @pytest.mark.asyncio
    async def test_run_once(self):
        from refund_service.services.scheduler import DemoDataScheduler

        writer = MagicMock()
        writer.insert_demo_return = AsyncMock(return_value="ret-new")

        result = await DemoDataScheduler(writer, interval_seconds=60).run_once()

        assert result == "ret-new"

    @pytest.mark.asyncio
    async def test_run_once_survives_storage_error(self):
        from refund_service.services.pocketbase import PocketbaseError
        from refund_service.services.scheduler import DemoDataScheduler

        writer = MagicMock()
        writer.insert_demo_return = AsyncMock(side_effect=PocketbaseError("boom"))

        result = await DemoDataScheduler(writer, interval_seconds=60).run_once()

        assert result is None

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        """Test the loop inserts periodically and stops cleanly."""
        from refund_service.services.scheduler import DemoDataScheduler

        writer = MagicMock()
        writer.insert_demo_return = AsyncMock(return_value="ret-new")
        scheduler = DemoDataScheduler(writer, interval_seconds=0.01)

        scheduler.start()
        assert scheduler.is_running is True
        await asyncio.sleep(0.1)
        await scheduler.stop()

        assert scheduler.is_running is False
        assert writer.insert_demo_return.await_count >= 1

    @pytest.mark.asyncio
    async def test_run_once_survives_unexpected_error(self):
        """Test a non-storage error is logged and swallowed, not raised."""
        from refund_service.services.scheduler import DemoDataScheduler

        writer = MagicMock()
        writer.insert_demo_return = AsyncMock(side_effect=ValueError("bad json"))

        result = await DemoDataScheduler(writer, interval_seconds=60).run_once()

        assert result is None

    @pytest.mark.asyncio
    async def test_loop_keeps_running_after_unexpected_error(self):
        """Test one failed insertion does not end the loop or break stop()."""
        from refund_service.services.scheduler import DemoDataScheduler

        calls = []

        async def insert_demo_return():
            calls.append(1)
            if len(calls) == 1:
                raise ValueError("bad json")
            return f"ret-{len(calls)}"

        writer = MagicMock()
        writer.insert_demo_return = insert_demo_return
        scheduler = DemoDataScheduler(writer, interval_seconds=0.01)

        scheduler.start()
        await asyncio.sleep(0.1)

        assert scheduler.is_running is True
        assert len(calls) >= 2

        await scheduler.stop()

        assert scheduler.is_running is False

    @pytest.mark.asyncio
    async def test_stop_after_loop_died(self):
        """Test stop() logs instead of raising when the task ended with an error."""
        from refund_service.services.scheduler import DemoDataScheduler

        async def crashed():
            raise ValueError("bad json")

        scheduler = DemoDataScheduler(MagicMock(), interval_seconds=60)
        scheduler._task = asyncio.create_task(crashed())
        await asyncio.sleep(0)

        await scheduler.stop()

        assert scheduler.is_running is False

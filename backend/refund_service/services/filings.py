"""
Filing Repository.

Reads refund returns from Pocketbase and inserts demo rows.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from refund_service.models.filing import (
    FilingStatus,
    FilingStatusSnapshot,
    RefundHistory,
    RefundReturn,
)
from refund_service.services.db_init import RETURNS_COLLECTION
from refund_service.services.pocketbase import PocketbaseService

logger = logging.getLogger(__name__)

# Pocketbase's native datetime layout
PB_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S.000Z"

DEMO_RETURN_STATUS = FilingStatus.APPROVED
DEMO_RETURN_CONFIDENCE = 0.94
DEMO_RETURN_ETA_DAYS = 10


class FilingLookup(Protocol):
    """Read-only status lookup consumed by the explanation stream."""

    async def fetch_status(self, return_id: str) -> Optional[FilingStatusSnapshot]: ...


def _pb_datetime(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(PB_DATETIME_FORMAT)


def _quote(value: str) -> str:
    """Quote a value for use inside a Pocketbase filter expression."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class FilingRepository:
    """Access to the `returns` collection."""

    def __init__(self, client: PocketbaseService):
        self._client = client

    async def get_return(self, return_id: str) -> Optional[RefundReturn]:
        """
        Get a stored return by its return_id.

        Returns None when no such return exists.
        Raises PocketbaseError on storage failures.
        """
        result = await self._client.list_records(
            RETURNS_COLLECTION,
            filter=f"return_id={_quote(return_id)}",
            per_page=1,
        )
        items = result.get("items", []) if result else []
        if not items:
            return None
        return RefundReturn.model_validate(items[0])

    async def fetch_status(self, return_id: str) -> Optional[FilingStatusSnapshot]:
        """Get the status snapshot of a return, or None if not found."""
        refund = await self.get_return(return_id)
        return refund.to_snapshot() if refund else None

    async def insert_demo_return(self, now: Optional[datetime] = None) -> str:
        """
        Insert one approved demo return.

        Returns the new return_id.
        """
        now = now or datetime.now(timezone.utc)
        history = [
            RefundHistory(stage=FilingStatus.FILED, timestamp=now),
            RefundHistory(stage=FilingStatus.ACCEPTED, timestamp=now + timedelta(hours=24)),
        ]
        eta = (now + timedelta(days=DEMO_RETURN_ETA_DAYS)).replace(
            hour=0, minute=0, second=0, microsecond=0
        )
        return_id = str(uuid.uuid4())

        await self._client.create_record(
            RETURNS_COLLECTION,
            {
                "return_id": return_id,
                "filing_id": str(uuid.uuid4()),
                "status": DEMO_RETURN_STATUS.value,
                "eta_date": _pb_datetime(eta),
                "confidence": DEMO_RETURN_CONFIDENCE,
                "history": [h.model_dump(mode="json") for h in history],
                "snap_context": {},
            },
        )
        logger.info("Inserted demo return: %s", return_id)
        return return_id

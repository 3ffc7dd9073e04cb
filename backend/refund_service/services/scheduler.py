"""
Demo Data Scheduler.

Periodically inserts a demo refund return so the status endpoints always
have fresh rows to show.
"""
import asyncio
import logging
from typing import Optional, Protocol

from refund_service.services.pocketbase import PocketbaseError

logger = logging.getLogger(__name__)


class DemoReturnWriter(Protocol):
    """Protocol for inserting demo returns."""

    async def insert_demo_return(self) -> str: ...


class DemoDataScheduler:
    """
    Owns a single background task that inserts one demo return per interval.

    Created and stopped by the application lifespan; nothing is started at
    import time.
    """

    def __init__(self, writer: DemoReturnWriter, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._writer = writer
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the insertion loop on the running event loop."""
        if self.is_running:
            logger.warning("Demo data scheduler already running, ignoring start")
            return

        self._task = asyncio.create_task(self._run(), name="demo-data-scheduler")
        logger.info(
            "Demo data scheduler started, interval %.0fs",
            self._interval,
        )

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Demo data scheduler ended with error: %s", e)
        logger.info("Demo data scheduler stopped")

    async def run_once(self) -> Optional[str]:
        """
        Insert a single demo return.

        Any insertion error is logged so the loop keeps going.
        """
        logger.info("Running scheduled demo data insertion")
        try:
            return_id = await self._writer.insert_demo_return()
        except PocketbaseError as e:
            logger.error("Failed to insert demo return: %s", e.message)
            return None
        except Exception:
            logger.exception("Unexpected error inserting demo return")
            return None

        logger.info("Inserted scheduled demo return: %s", return_id)
        return return_id

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.run_once()

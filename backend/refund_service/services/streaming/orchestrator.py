"""
Explanation Stream Orchestrator.

Coordinates one explanation stream: progress events, filing lookup,
mode dispatch and the end marker.
Single Responsibility: only coordination, content comes from generators.
"""
import asyncio
import logging
from contextlib import aclosing
from typing import AsyncIterator, Callable, Optional

from refund_service.models.filing import FilingStatusSnapshot
from refund_service.services.filings import FilingLookup

from .types import (
    DONE_MARKER,
    GENERATION_ERROR_MESSAGE,
    PROGRESS_MESSAGES,
    EventSink,
    ExplanationGenerator,
    ExplanationRequest,
    SinkClosedError,
)

logger = logging.getLogger(__name__)


class ExplanationOrchestrator:
    """
    Produces the ordered text events of one explanation.

    Event order:
    1. Three progress events, each followed by a short pause
    2. Content chunks of the selected generator
    3. DONE_MARKER, exactly once, also after a failed generator

    Nothing raised below this class reaches the transport once the
    first event has been produced.
    """

    def __init__(
        self,
        lookup: FilingLookup,
        select_generator: Callable[[], ExplanationGenerator],
        progress_delay: float = 0.3,
    ):
        self._lookup = lookup
        self._select_generator = select_generator
        self._progress_delay = progress_delay

    async def stream(self, request: ExplanationRequest) -> AsyncIterator[str]:
        """Yield every event of the explanation, ending with DONE_MARKER."""
        for message in PROGRESS_MESSAGES:
            yield message
            await asyncio.sleep(self._progress_delay)

        snapshot = await self._fetch_snapshot(request.filing_id)

        try:
            generator = self._select_generator()
            async with aclosing(generator.generate(request.question, snapshot)) as chunks:
                async for chunk in chunks:
                    yield chunk
        except Exception as e:
            logger.exception("Explanation generator failed: %s", e)
            yield GENERATION_ERROR_MESSAGE

        yield DONE_MARKER

    async def run(self, request: ExplanationRequest, sink: EventSink) -> None:
        """
        Push the explanation into a sink.

        Stops as soon as the sink reports that its consumer is gone; the
        generator, and any remote stream it holds, is closed on the way out.
        """
        async with aclosing(self.stream(request)) as events:
            async for text in events:
                try:
                    await sink.send(text)
                except SinkClosedError:
                    logger.info("Client went away, stopping explanation stream")
                    return

    async def _fetch_snapshot(
        self,
        filing_id: Optional[str],
    ) -> Optional[FilingStatusSnapshot]:
        """Look up the filing; failures degrade to no context."""
        if not filing_id:
            return None

        try:
            snapshot = await self._lookup.fetch_status(filing_id)
        except Exception as e:
            logger.error("Failed to fetch return %s: %s", filing_id, e)
            return None

        if snapshot is None:
            logger.info("Return %s not found, explaining without context", filing_id)
        return snapshot

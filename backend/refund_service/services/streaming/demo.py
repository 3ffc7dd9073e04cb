"""
Demo Explanation Generator.

Deterministic explanation used when no AI credential is configured.
"""
import asyncio
from typing import AsyncIterator, Optional

from refund_service.ai.prompts import format_percent
from refund_service.models.filing import FilingStatusSnapshot

INTRO_CHUNKS = (
    "Based on your filing information, your refund is taking a little longer than usual.",
    "This is common for returns with your profile characteristics.",
)

NO_CONTEXT_CHUNK = "High-income filers and early submissions are often reviewed more carefully."


class DemoExplanationGenerator:
    """Emits two fixed chunks and one chunk about the return, if known."""

    def __init__(self, chunk_delay: float = 0.4):
        self._chunk_delay = chunk_delay

    def chunks(self, snapshot: Optional[FilingStatusSnapshot]) -> list[str]:
        """Chunks for a snapshot; same input, same output."""
        if snapshot is None:
            detail = NO_CONTEXT_CHUNK
        else:
            detail = (
                f"Your return (status: {snapshot.status.value}) has a confidence score of "
                f"{format_percent(snapshot.confidence)} for the estimated date."
            )
        return [*INTRO_CHUNKS, detail]

    async def generate(
        self,
        question: str,
        snapshot: Optional[FilingStatusSnapshot],
    ) -> AsyncIterator[str]:
        """Yield the chunks with a presentation pause after each one."""
        for chunk in self.chunks(snapshot):
            yield chunk
            await asyncio.sleep(self._chunk_delay)

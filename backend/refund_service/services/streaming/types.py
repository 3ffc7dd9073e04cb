"""
Streaming Types.

Data structures and protocols for the explanation stream.
"""
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Protocol

from refund_service.models.filing import FilingStatusSnapshot

DEFAULT_QUESTION = "Why is my refund taking longer than expected?"

# Literal terminator of every explanation stream
DONE_MARKER = "[DONE]"

PROGRESS_MESSAGES = (
    "🔍 Analyzing your return...",
    "📊 Checking IRS processing times...",
    "🤖 Generating personalized explanation...",
)

GENERATION_ERROR_MESSAGE = "Sorry, something went wrong while generating your explanation."


@dataclass(frozen=True)
class ExplanationRequest:
    """
    Immutable input of one explanation stream.

    Attributes:
        filing_id: Return to explain, or None to answer without context
        question: Free-text question, never empty
    """

    filing_id: Optional[str] = None
    question: str = DEFAULT_QUESTION

    @classmethod
    def from_payload(cls, payload: Any) -> "ExplanationRequest":
        """
        Build a request from a decoded JSON body.

        Anything that is not an object, and any field of the wrong type or
        left blank, falls back to the defaults.
        """
        if not isinstance(payload, dict):
            return cls()

        filing_id = payload.get("return_id")
        question = payload.get("question")

        if not isinstance(filing_id, str) or not filing_id.strip():
            filing_id = None
        if not isinstance(question, str) or not question.strip():
            question = DEFAULT_QUESTION

        return cls(filing_id=filing_id.strip() if filing_id else None, question=question)


class ExplanationGenerator(Protocol):
    """Strategy producing the content chunks of an explanation."""

    def generate(
        self,
        question: str,
        snapshot: Optional[FilingStatusSnapshot],
    ) -> AsyncIterator[str]: ...


class SinkClosedError(Exception):
    """Raised by an EventSink once its consumer has gone away."""


class EventSink(Protocol):
    """One-way, ordered output channel; each send is flushed."""

    async def send(self, text: str) -> None: ...

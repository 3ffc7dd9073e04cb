"""
Explanation Streaming Module.

Streams a refund-delay explanation as Server-Sent Events.

Architecture:
- DemoExplanationGenerator: Deterministic chunks, no external calls
- AIExplanationGenerator: Text deltas from a PydanticAI agent
- ExplanationModeSelector: Picks one of the two per request
- ExplanationOrchestrator: Progress events, lookup, dispatch, end marker

Usage:
    from refund_service.services.streaming import (
        EventStreamResponse,
        ExplanationOrchestrator,
        ExplanationRequest,
        sse_frames,
    )

    orchestrator = ExplanationOrchestrator(repository, selector.select)
    response = EventStreamResponse(sse_frames(orchestrator.stream(request)))
"""

from .types import (
    DEFAULT_QUESTION,
    DONE_MARKER,
    PROGRESS_MESSAGES,
    EventSink,
    ExplanationGenerator,
    ExplanationRequest,
    SinkClosedError,
)
from .ai import AIExplanationGenerator
from .demo import DemoExplanationGenerator
from .orchestrator import ExplanationOrchestrator
from .selector import ExplanationModeSelector
from .sse import SSE_HEADERS, EventStreamResponse, format_sse, sse_frames

__all__ = [
    # Types
    "DEFAULT_QUESTION",
    "DONE_MARKER",
    "PROGRESS_MESSAGES",
    "EventSink",
    "ExplanationGenerator",
    "ExplanationRequest",
    "SinkClosedError",
    # Generators
    "AIExplanationGenerator",
    "DemoExplanationGenerator",
    "ExplanationModeSelector",
    # Coordination
    "ExplanationOrchestrator",
    "SSE_HEADERS",
    "EventStreamResponse",
    "format_sse",
    "sse_frames",
]

"""
Refund explanation streaming endpoint.
"""
import json
import logging

from fastapi import APIRouter, Depends, Request

from refund_service.config import settings
from refund_service.api.status import get_filing_repository
from refund_service.services.filings import FilingRepository
from refund_service.services.streaming import (
    EventStreamResponse,
    ExplanationModeSelector,
    ExplanationOrchestrator,
    ExplanationRequest,
    sse_frames,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/status", tags=["status"])

# Shared across requests; holds only configuration and the cached agent
mode_selector = ExplanationModeSelector(settings)


def get_orchestrator(
    repository: FilingRepository = Depends(get_filing_repository),
) -> ExplanationOrchestrator:
    return ExplanationOrchestrator(
        lookup=repository,
        select_generator=mode_selector.select,
        progress_delay=settings.progress_delay_seconds,
    )


async def parse_explanation_request(request: Request) -> ExplanationRequest:
    """
    Read the optional JSON body.

    A missing or malformed body is never rejected; defaults are used.
    """
    body = await request.body()
    if not body:
        return ExplanationRequest()

    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        logger.info("Malformed explain request body, using defaults")
        return ExplanationRequest()

    return ExplanationRequest.from_payload(payload)


@router.post("/explain")
async def explain_status(
    request: Request,
    orchestrator: ExplanationOrchestrator = Depends(get_orchestrator),
) -> EventStreamResponse:
    """
    Stream an explanation of a refund delay as Server-Sent Events.

    Body: {"return_id": optional str, "question": optional str}
    Each event is `data: <text>`; the stream ends with `data: [DONE]`.
    """
    explanation_request = await parse_explanation_request(request)
    logger.info(
        "Starting explanation stream for return %s",
        explanation_request.filing_id or "<none>",
    )

    return EventStreamResponse(sse_frames(orchestrator.stream(explanation_request)))

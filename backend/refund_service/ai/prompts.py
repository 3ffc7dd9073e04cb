"""
Prompts for the refund explainer agent.
"""
from datetime import date
from typing import Optional

from refund_service.models.filing import FilingStatusSnapshot

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful tax assistant explaining refund delays.\n"
    "Be concise, friendly, and provide actionable information. "
    "Keep responses under 100 words."
)


def format_short_date(value: date) -> str:
    """Format a date as "Jan 2, 2006"."""
    return f"{value:%b} {value.day}, {value.year}"


def format_percent(confidence: float) -> str:
    return f"{confidence * 100:.0f}%"


def build_return_context(snapshot: FilingStatusSnapshot) -> str:
    """Describe the return for the model."""
    lines = [
        "Return Context:",
        f"- Status: {snapshot.status.value}",
        f"- Confidence: {format_percent(snapshot.confidence)}",
        f"- History: {snapshot.history_length} status changes",
    ]
    if snapshot.estimated_date:
        lines.append(f"- Estimated Date: {format_short_date(snapshot.estimated_date)}")
    return "\n".join(lines)


def build_user_prompt(question: str, snapshot: Optional[FilingStatusSnapshot]) -> str:
    """
    Build the user message sent to the model.

    The question is sent as-is; when a snapshot is available its context
    block is appended after a blank line.
    """
    if snapshot is None:
        return question
    return f"{question}\n\n{build_return_context(snapshot)}"

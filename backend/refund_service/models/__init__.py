"""Models package for the refund status service."""

from refund_service.models.filing import (
    FilingStatus,
    FilingStatusSnapshot,
    RefundHistory,
    RefundReturn,
)

__all__ = [
    "FilingStatus",
    "FilingStatusSnapshot",
    "RefundHistory",
    "RefundReturn",
]

"""
Health check endpoint.
"""
from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Report that the service is up."""
    return {"status": "healthy", "service": "refund-service"}

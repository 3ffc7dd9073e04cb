"""
Refund status API endpoints.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from refund_service.models.filing import RefundReturn
from refund_service.services.filings import FilingRepository
from refund_service.services.pocketbase import PocketbaseError, pocketbase

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v1/status", tags=["status"])
internal_router = APIRouter(prefix="/internal", tags=["internal"])


def get_filing_repository() -> FilingRepository:
    return FilingRepository(pocketbase)


@router.get("/{return_id}", response_model=RefundReturn)
async def get_status(
    return_id: str,
    repository: FilingRepository = Depends(get_filing_repository),
) -> RefundReturn:
    """Get the stored status of a refund return."""
    try:
        refund = await repository.get_return(return_id)
    except PocketbaseError as e:
        logger.error("Failed to fetch return %s: %s", return_id, e.message)
        raise HTTPException(status_code=503, detail="Status lookup failed")

    if refund is None:
        raise HTTPException(status_code=404, detail="Return not found")
    return refund


@internal_router.post("/scrape")
async def insert_demo_data(
    repository: FilingRepository = Depends(get_filing_repository),
) -> dict:
    """Insert one demo return on demand."""
    try:
        return_id = await repository.insert_demo_return()
    except PocketbaseError as e:
        logger.error("Failed to insert demo return: %s", e.message)
        raise HTTPException(status_code=500, detail="Failed to insert demo data")

    return {"message": "demo data inserted", "return_id": return_id}

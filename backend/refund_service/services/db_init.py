"""
Database initialization for Pocketbase collections.

Creates required collections if they don't exist.
"""
import logging

from refund_service.models.filing import FilingStatus
from refund_service.services.pocketbase import PocketbaseService, PocketbaseError

logger = logging.getLogger(__name__)

RETURNS_COLLECTION = "returns"

# Collections required by the application
SYSTEM_COLLECTIONS = {
    RETURNS_COLLECTION: {
        "name": RETURNS_COLLECTION,
        "type": "base",
        "fields": [
            {"name": "return_id", "type": "text", "required": True},
            {"name": "filing_id", "type": "text", "required": True},
            {
                "name": "status",
                "type": "select",
                "required": True,
                "maxSelect": 1,
                "values": [s.value for s in FilingStatus],
            },
            {"name": "eta_date", "type": "date", "required": False},
            {"name": "confidence", "type": "number", "required": False, "min": 0, "max": 1},
            {"name": "history", "type": "json", "required": False},
            {"name": "snap_context", "type": "json", "required": False},
            {"name": "created", "type": "autodate", "onCreate": True, "onUpdate": False},
        ],
        "indexes": [
            "CREATE UNIQUE INDEX idx_returns_return_id ON returns (return_id)",
        ],
    },
}


async def get_existing_collections(client: PocketbaseService) -> set[str]:
    """Get names of existing collections."""
    try:
        collections = await client.list_collections()
        return {col.get("name") for col in collections}
    except PocketbaseError as e:
        logger.error("Failed to list collections: %s", e.message)
        return set()


async def create_collection_if_not_exists(
    client: PocketbaseService,
    name: str,
    config: dict,
    existing: set[str],
) -> bool:
    """
    Create a collection if it doesn't exist.

    Returns True if created, False if already exists or creation failed.
    """
    if name in existing:
        logger.debug("Collection '%s' already exists", name)
        return False

    try:
        await client.create_collection(name, config["fields"], config.get("indexes"))
        logger.info("Created collection: %s", name)
        return True
    except PocketbaseError as e:
        logger.error("Failed to create collection '%s': %s", name, e.message)
        return False


async def init_database(client: PocketbaseService) -> tuple[int, int]:
    """
    Initialize all required database collections.

    Returns tuple of (created_count, skipped_count).
    """
    logger.info("Initializing database collections...")

    existing = await get_existing_collections(client)
    created = 0
    skipped = 0

    for name, config in SYSTEM_COLLECTIONS.items():
        if await create_collection_if_not_exists(client, name, config, existing):
            created += 1
        else:
            skipped += 1

    logger.info(
        "Database initialization complete: %d created, %d skipped",
        created,
        skipped,
    )
    return created, skipped

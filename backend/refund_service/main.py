import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from refund_service.api.explain import router as explain_router
from refund_service.api.health import router as health_router
from refund_service.api.status import internal_router, router as status_router
from refund_service.config import settings
from refund_service.services.db_init import init_database
from refund_service.services.filings import FilingRepository
from refund_service.services.pocketbase import pocketbase, PocketbaseError
from refund_service.services.scheduler import DemoDataScheduler

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Backend starting...")

    # Check Pocketbase connection and collections
    try:
        health = await pocketbase.health_check()
        logger.info("Pocketbase connected: %s", (health or {}).get("message", "OK"))
        await init_database(pocketbase)
    except PocketbaseError as e:
        logger.error("Pocketbase connection failed: %s", e.message)

    if settings.ai_enabled:
        logger.info("Explanations: AI mode (%s)", settings.llm_model)
    else:
        logger.warning("Explanations: demo mode (OPENAI_API_KEY not set)")

    scheduler = None
    if settings.demo_insert_enabled:
        scheduler = DemoDataScheduler(
            FilingRepository(pocketbase),
            interval_seconds=settings.demo_insert_interval_seconds,
        )
        scheduler.start()
    app.state.demo_scheduler = scheduler

    logger.info("Backend started")

    yield

    # Shutdown
    logger.info("Backend shutting down...")
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(title="Refund Status Service", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(status_router)
app.include_router(explain_router)
app.include_router(internal_router)

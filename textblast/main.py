"""
textblast/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes (campaign)
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from textblast.core.config import settings, validate_settings
from textblast.core.errors import add_exception_handlers
from textblast.core.logging import setup_logging, get_logger
from textblast.services.monday_service import close_monday_service
from textblast.services.twilio_service import close_twilio_service
from textblast.api import campaign

# Initialize logging first
setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting textblast...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        if not settings.twilio_configured:
            logger.warning("⚠️ Twilio is not configured - sends will fail")
        if not settings.monday_configured:
            logger.warning("⚠️ monday.com is not configured - campaigns will fail")

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(
            f"Pacing: {settings.CAMPAIGN_BATCH_SIZE} messages every {settings.CAMPAIGN_BATCH_DELAY_MS} ms"
        )

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down textblast...")

    try:
        await close_twilio_service()
        await close_monday_service()
        logger.info("👋 HTTP clients closed")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="textblast - SMS Campaign Dispatcher",
    description="Sends personalized SMS/MMS campaigns to a monday.com board via Twilio",
    version=VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Campaigns are paced, so only flag requests that are slow for other reasons
    if process_time > 5.0 and not request.url.path.endswith("/send-messages"):
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(campaign.router, prefix=settings.API_PREFIX, tags=["Campaign"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "textblast",
        "version": VERSION,
        "description": "SMS campaign dispatcher",
        "status": "running",
        "environment": settings.ENVIRONMENT
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Reports whether the record source and provider are configured.
    Does not call either; use /test-auth for a live credential check.
    """
    checks = {
        "twilio": "configured" if settings.twilio_configured else "not_configured",
        "monday": "configured" if settings.monday_configured else "not_configured",
    }
    healthy = all(value == "configured" for value in checks.values())

    health_status = {
        "status": "healthy" if healthy else "degraded",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
        "checks": checks
    }

    status_code = 200 if healthy else 503
    return JSONResponse(content=health_status, status_code=status_code)


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "textblast.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )

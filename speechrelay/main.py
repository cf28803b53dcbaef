"""
Speech Relay Backend - Main Application

This is the entry point for the FastAPI application.
It handles:
- Construction of the process-wide translation registry, TTS cache and
  STT service (stored on app.state and handed to routes as dependencies)
- REST API endpoints (TTS synthesis, translation engines)
- Background cleanup of expired rooms and stale TTS cache files
"""
from contextlib import asynccontextmanager
import logging
from datetime import datetime, timedelta, UTC

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from speechrelay.api import router as api_router
from speechrelay.config.settings import settings
from speechrelay.services.cleanup_service import CleanupService
from speechrelay.services.core.repositories import RoomRepository
from speechrelay.services.gcp.speech import GCPSpeechService
from speechrelay.services.gcp.tts import GCPTextToSpeechService
from speechrelay.services.metrics import start_metrics_server
from speechrelay.services.translation import build_translation_registry, GrokTranslateEngine
from speechrelay.services.tts_cache import TTSCache

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # === STARTUP ===
    logger.info("🚀 Starting Speech Relay Backend...")

    registry = build_translation_registry(settings)
    app.state.translation_registry = registry
    logger.info(f"✅ Translation engines available: {[e['id'] for e in registry.get_available_engines()]}")

    tts_cache = TTSCache(
        GCPTextToSpeechService(credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS),
        settings.TTS_CACHE_DIR,
    )
    app.state.tts_cache = tts_cache
    app.state.speech_service = GCPSpeechService(
        credentials_path=settings.GOOGLE_APPLICATION_CREDENTIALS
    )

    cleanup_service = CleanupService(
        RoomRepository(),
        tts_cache.cache_dir,
        room_retention=timedelta(hours=settings.ROOM_RETENTION_HOURS),
        tts_cache_retention=timedelta(days=settings.TTS_CACHE_RETENTION_DAYS),
    )
    app.state.cleanup_service = cleanup_service
    if settings.CLEANUP_ENABLED:
        cleanup_service.init()
        logger.info("✅ Background cleanup tasks started")

    if settings.METRICS_PORT:
        start_metrics_server(settings.METRICS_PORT)

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("🛑 Shutting down...")
    await cleanup_service.shutdown()
    await tts_cache.drain()
    for engine in registry.registered_engines():
        if isinstance(engine, GrokTranslateEngine):
            await engine.aclose()


app = FastAPI(
    title="Speech Relay Backend",
    description="Real-time speech translation relay: STT, translation engines and cached TTS",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"http://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include REST API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Speech Relay",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    registry = getattr(app.state, "translation_registry", None)
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "engines": [e["id"] for e in registry.get_available_engines()] if registry else [],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "speechrelay.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )

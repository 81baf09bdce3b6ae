"""
Main entry point for FastAPI application.
"""
from contextlib import asynccontextmanager
import os

from fastapi import FastAPI

from app.routes import discovery, home
from app.services.cache_service import build_cache_store
from app.services.context import build_sql_context
from app.utils.db_async import SessionLocal, init_db, dispose_engine, describe_database_url, DATABASE_URL

from app.logging_config import setup_logging
from app.config import settings

import logging
logger = logging.getLogger(__name__)

setup_logging(level=settings.log_level, access_log=settings.access_log)

@asynccontextmanager
async def lifespan(app: FastAPI):
    should_init_db = (
        settings.is_dev
        and settings.auto_init_db
        and not os.getenv("FLY_APP_NAME")
    )

    if should_init_db:
        logger.info("Running init_db()…")
        logger.info(f"DB target: {describe_database_url(DATABASE_URL)}")
        try:
            await init_db()
            logger.info("DB ready.")
        except Exception:
            logger.exception("init_db failed")
            raise
    else:
        logger.info("Skipping init_db(); auto_init_db disabled or managed deployment detected")

    cache_store = build_cache_store(settings.redis_url)
    if settings.cache_enabled:
        logger.info("Trending cache enabled (Redis)")
    else:
        logger.info("Trending cache disabled; every request reads the database")
    app.state.discovery_context = build_sql_context(SessionLocal, cache_store)

    # Hand control to the application
    yield

    try:
        await cache_store.close()
    except Exception:
        logger.exception("Failed to close cache client")

    # Shutdown: dispose engine cleanly
    try:
        logger.info("Disposing DB engine…")
        await dispose_engine()
        logger.info("DB engine disposed.")
    except Exception:
        logger.exception("Failed to dispose DB engine")

app = FastAPI(title="Podcast Discovery", lifespan=lifespan)
app.include_router(discovery.router)
app.include_router(home.router)

@app.get("/health")
async def health_check():
    """Health Check Endpoint"""
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)

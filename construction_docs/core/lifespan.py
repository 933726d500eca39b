"""Application lifespan: startup and shutdown.

Wiring only: logging, storage root, DB engine dispose.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from construction_docs.core.config import get_settings
from construction_docs.infrastructure.external.storage import StorageFactory
from construction_docs.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine.

    The storage service is created once and shared through app.state.
    """
    settings = get_settings()
    setup_logging()

    app.state.storage = StorageFactory.create_storage_service(settings)
    if not settings.sql_configured:
        logger.warning(
            "DATABASE_URL is not set; document routes will answer 503 until it is"
        )
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    from construction_docs.infrastructure.persistence import database

    await database.dispose_engine()
    logger.info("Database engine disposed")

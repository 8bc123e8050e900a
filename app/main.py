from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router, status_router
from datastore.database import build_default_database
from logging_config import configure_logging
from services.readings import build_default_service
from settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    service = build_default_service()
    await service.bootstrap(seed=get_settings().seed_vocabulary)
    try:
        yield
    finally:
        await service.shutdown()
        build_default_service.cache_clear()
        build_default_database.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Environmental Data Server",
        description="Stores sensor readings and serves them averaged at a span-dependent resolution.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(status_router)
    return app

app = create_app()

# modhall/app/factory.py
from __future__ import annotations
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from modhall.app.library import ModLibraryService
from modhall.core.errors import ModHallError

logger = logging.getLogger(__name__)

__all__ = ["createApp"]



def createApp(service: ModLibraryService | None = None, *, configureLogs: bool = True) -> FastAPI:
    """
    Builds the FastAPI app around one ModLibraryService.
    Without `service`, one is built from the settings file and closed on shutdown.
    """
    ownsService = service is None
    library = service or ModLibraryService.fromSettings()

    if configureLogs:
        from modhall.app.settings import settings
        from modhall.core.logging import configureLogging
        configureLogging(logFile=settings("logging.file") or library.paths.logFile)

    @asynccontextmanager
    async def life(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Mod library ready")
        try:
            yield
        finally:
            if ownsService:
                library.close()
            logger.info("Mod library shut down")

    app = FastAPI(lifespan=life)
    app.state.library = library

    from modhall.app.web import modHallErrorHandler, router as webRouter
    app.add_exception_handler(ModHallError, modHallErrorHandler)
    app.include_router(webRouter)

    return app

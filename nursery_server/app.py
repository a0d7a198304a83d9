"""
Nursery administration backend - application entry point

Main features:
- facility timing settings and the daily slot grid
- weekly activity schedules per classroom
- weekly menus per age category
- period lifecycle kept consistent by an activation sweep on every request

Stack: FastAPI + DuckDB + JWT
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .config import setup_logging
from .config.settings import settings
from .core.clock import Clock, utc_today
from .core.database import DatabaseManager, db_manager
from .core.error_handler import (
    application_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .core.exceptions import BaseApplicationError, DatabaseError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    setup_logging(settings)
    try:
        app.state.db.init_database()
    except DatabaseError as e:
        # Keep serving; the connection is retried lazily on first use
        logger.error("Database initialization failed: %s", e.message)

    yield

    app.state.db.close()


def create_app(db: Optional[DatabaseManager] = None, clock: Optional[Clock] = None) -> FastAPI:
    """Create the FastAPI application"""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Nursery schedules and menus administration API",
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.db = db or db_manager
    app.state.clock = clock or utc_today

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health_check():
        try:
            app.state.db.fetch_one("SELECT 1 AS ok")
            return {
                "status": "healthy",
                "version": settings.api_version,
                "database": "connected"
            }
        except DatabaseError as e:
            return {
                "status": "unhealthy",
                "version": settings.api_version,
                "database": f"error: {e.message}"
            }

    @app.get("/")
    def root():
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "description": "Nursery schedules and menus administration API"
        }

    return app


app = create_app()


def main():
    """Run the API with uvicorn"""
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

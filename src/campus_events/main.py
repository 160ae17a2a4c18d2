"""
# Campus Events API Application

FastAPI application factory and process entry point.

**Startup:** connect to MongoDB and ensure indexes.
**Shutdown:** disconnect from MongoDB.

The `DatabaseManager` is created here, once per process, and stored on `app.state.db_manager`;
route dependencies (`campus_events.routes.dependencies`) read it from there.

Run locally with:

```bash
campus-events            # console script
uvicorn campus_events.main:app --reload
```
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_events.config import settings
from campus_events.database.manager import DatabaseManager
from campus_events.managers.logging_manager import get_logger
from campus_events.routes import clubs_router, events_router, users_router

logger = get_logger(prefix="[MAIN]")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the database connection for the lifetime of the process."""
    db_manager: DatabaseManager = app.state.db_manager
    startup_start = time.time()

    logger.info("Starting %s", settings.APP_NAME)
    await db_manager.connect()
    await db_manager.create_indexes()
    logger.info("Startup completed in %.3fs", time.time() - startup_start)

    try:
        yield
    finally:
        logger.info("Shutting down %s", settings.APP_NAME)
        await db_manager.disconnect()


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request input is reported as 400, like every other validation failure."""
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": jsonable_encoder(exc.errors())})


def create_app(db_manager: Optional[DatabaseManager] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        db_manager: Persistence handle to use. A new `DatabaseManager` built from `settings`
            is used when omitted.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Campus club and event management: events, registrations, attendance and reminders.",
        version="1.0.0",
        lifespan=lifespan,
        redirect_slashes=False,
        openapi_tags=[
            {"name": "Events", "description": "Events, registration, attendance and reminders"},
            {"name": "Clubs", "description": "Clubs and their faculty coordinators"},
            {"name": "Users", "description": "Campus users"},
            {"name": "System", "description": "Health checks"},
        ],
    )
    app.state.db_manager = db_manager or DatabaseManager(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    for router in (events_router, clubs_router, users_router):
        app.include_router(router)

    @app.get("/health", tags=["System"])
    async def health(request: Request):
        healthy = await request.app.state.db_manager.health_check()
        if not healthy:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "database": "disconnected"},
            )
        return {"status": "healthy", "database": "connected"}

    logger.info("Application configured with %d routes", len(app.routes))
    return app


app = create_app()


def run():
    uvicorn.run("campus_events.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG, log_level="info")


if __name__ == "__main__":
    run()

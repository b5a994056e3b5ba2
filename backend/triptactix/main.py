"""
TripTactix Backend - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from triptactix import __version__
from triptactix.config import get_settings
from triptactix.models.database import create_tables, get_db
from triptactix.models.schemas import HealthCheck
from triptactix.services.store import TravelStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler - startup and shutdown."""
    # Startup
    create_tables()
    yield
    # Shutdown (cleanup if needed)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="TripTactix API",
        description="Conversational travel planning and AI recommendations API",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Every error leaves as {success: false, message, error?}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "message": "Invalid request",
                "error": "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ),
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_request: Request, exc: Exception):
        logger.exception(f"Unhandled error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": "Something went wrong!",
                "error": str(exc) if settings.debug else "Internal server error",
            },
        )

    # Register routers
    from triptactix.routers import advisory, onboarding, trips, users

    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(trips.router, prefix="/api/trips", tags=["trips"])
    app.include_router(advisory.router, prefix="/api/advisory", tags=["advisory"])
    app.include_router(onboarding.router, prefix="/api/onboarding", tags=["onboarding"])

    @app.get("/health", response_model=HealthCheck)
    async def health_check():
        """Health check endpoint."""
        return HealthCheck(version=__version__, timestamp=datetime.utcnow())

    @app.post("/api/reset")
    async def reset_database(db: Session = Depends(get_db)):
        """Clear all users and trips (for experimentation)."""
        TravelStore(db).reset()
        return {
            "success": True,
            "message": "Database reset successfully! All users and trips have been cleared.",
            "timestamp": datetime.utcnow().isoformat(),
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "triptactix.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

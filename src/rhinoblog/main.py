# src/rhinoblog/main.py
"""Main entry point for the rhinoblog application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from rhinoblog.api.v1 import api_v1
from rhinoblog.core.settings import settings
from rhinoblog.init_db import init_db
from rhinoblog.services.generation import get_generation_client
from rhinoblog.services.scheduler import get_generation_scheduler

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DESCRIPTION = "Rhinoplasty community blog with trust-gated publishing and AI-assisted content"

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description=DESCRIPTION,
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(api_v1, prefix="/api")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request input as 400 with the field errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
async def on_startup() -> None:
    if settings.bootstrap_on_startup:
        init_db()
    scheduler = get_generation_scheduler()
    await scheduler.start()
    app.state.scheduler = scheduler
    logger.info(
        "Generation scheduler started (enabled=%s, cron=%r)",
        scheduler.config.enabled,
        scheduler.config.cron_expression,
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler:
        await scheduler.stop()
    await get_generation_client().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": DESCRIPTION,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rhinoblog.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

"""FastAPI application for itinerary generation."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.app.api.routes.generate import router as generate_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.errors import GenerationError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)

app = FastAPI(title="TripArchitect API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(generate_router)


@app.exception_handler(RequestValidationError)
async def missing_fields_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Any malformed request body is reported as missing required fields."""
    logger.info(
        "Rejected generation request",
        extra={"structured": {"path": request.url.path, "errors": len(exc.errors())}},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Missing required fields"},
    )


@app.exception_handler(ProviderNotConfiguredError)
async def provider_not_configured_handler(
    request: Request, exc: ProviderNotConfiguredError
) -> JSONResponse:
    logger.error("Generation requested but no provider is configured")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


@app.exception_handler(GenerationError)
async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": str(exc)},
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "TripArchitect API", "version": "0.1.0"}

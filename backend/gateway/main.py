"""FastAPI application - agricultural open-data gateway."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from backend.gateway.api.routes.fertilizer import router as fertilizer_router
from backend.gateway.api.routes.health import router as health_router
from backend.gateway.api.routes.metrics import router as metrics_router
from backend.gateway.api.routes.pest import router as pest_router
from backend.gateway.api.routes.weather import router as weather_router
from backend.gateway.config import get_settings
from backend.gateway.errors import ConfigurationError, GatewayError
from backend.gateway.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate credentials once at startup."""
    settings = get_settings()
    configure_logging(settings.log_level)

    missing = settings.missing_credentials()
    for capability, env_name in missing.items():
        logger.warning("%s is not set; %s requests will fail", env_name, capability.value)

    if missing and settings.strict_startup:
        names = ", ".join(sorted(set(missing.values())))
        raise ConfigurationError(f"Missing required configuration: {names}")

    yield


app = FastAPI(title="Agri Data Gateway", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(fertilizer_router)
app.include_router(weather_router)
app.include_router(pest_router)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render classified failures as {error, code}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler so no failure reaches the framework's default page."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": "internal_error"},
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Agri Data Gateway", "version": "0.1.0"}


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()

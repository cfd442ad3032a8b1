"""Health check endpoints.

- /health: liveness, always 200
- /healthz: per-capability availability from configured credentials
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from backend.gateway.config import Settings, get_settings
from backend.gateway.models.common import Capability

router = APIRouter()


def check_capabilities(settings: Settings) -> dict[str, str]:
    """Report each capability as ok or naming the missing credential."""
    missing = settings.missing_credentials()
    return {
        capability.value: f"missing {missing[capability]}" if capability in missing else "ok"
        for capability in Capability
    }


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any] | JSONResponse:
    """Capability availability check.

    Returns:
        200 with per-capability status if every capability is configured
        503 if any capability is unavailable
    """
    capabilities = check_capabilities(settings)
    all_ok = all(state == "ok" for state in capabilities.values())

    response_body = {
        "status": "ok" if all_ok else "degraded",
        "capabilities": capabilities,
    }

    if not all_ok:
        return JSONResponse(content=response_body, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return response_body

"""Pest and disease lookup - GET /api/pest."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from backend.gateway.api.deps import handler_for
from backend.gateway.api.routes import ERROR_RESPONSES
from backend.gateway.handlers import CapabilityHandler
from backend.gateway.models.common import CallerRequest, Capability

router = APIRouter(prefix="/api", tags=["pest"])


@router.get("/pest", response_model=None, responses=ERROR_RESPONSES)
async def get_pest(
    handler: Annotated[CapabilityHandler, Depends(handler_for(Capability.PEST))],
    crop_name: Annotated[str | None, Query(alias="cropName")] = None,
    pest_name: Annotated[str | None, Query(alias="pestName")] = None,
) -> JSONResponse:
    """Search pest/disease records by crop name, pest name, or both."""
    payload = await handler.handle(
        CallerRequest(
            capability=Capability.PEST,
            parameters={"cropName": crop_name, "pestName": pest_name},
        )
    )
    return JSONResponse(content=payload)

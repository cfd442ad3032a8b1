"""Fertilizer standard lookup - GET /api/fertilizer."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from backend.gateway.api.deps import handler_for
from backend.gateway.api.routes import ERROR_RESPONSES
from backend.gateway.handlers import CapabilityHandler
from backend.gateway.models.common import CallerRequest, Capability

router = APIRouter(prefix="/api", tags=["fertilizer"])


@router.get("/fertilizer", response_model=None, responses=ERROR_RESPONSES)
async def get_fertilizer(
    handler: Annotated[CapabilityHandler, Depends(handler_for(Capability.FERTILIZER))],
    crop_code: Annotated[str | None, Query(alias="cropCode")] = None,
) -> JSONResponse:
    """Return fertilizer-standard items for a crop.

    Args:
        handler: Fertilizer capability handler
        crop_code: Upstream crop code (e.g. "01")

    Returns:
        The upstream item list or object, unmodified
    """
    payload = await handler.handle(
        CallerRequest(capability=Capability.FERTILIZER, parameters={"cropCode": crop_code})
    )
    return JSONResponse(content=payload)

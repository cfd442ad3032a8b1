"""Weather endpoints - mid-range forecast and agricultural observation."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from backend.gateway.api.deps import handler_for
from backend.gateway.api.routes import ERROR_RESPONSES
from backend.gateway.handlers import CapabilityHandler
from backend.gateway.models.common import CallerRequest, Capability

router = APIRouter(prefix="/api/weather", tags=["weather"])

ForecastHandler = Annotated[
    CapabilityHandler, Depends(handler_for(Capability.WEATHER_FORECAST))
]


@router.get("/forecast", response_model=None, responses=ERROR_RESPONSES)
async def get_forecast(
    handler: ForecastHandler,
    reg_id: Annotated[str | None, Query(alias="regId")] = None,
) -> JSONResponse:
    """Return mid-range temperature forecast items for a region.

    The bulletin time (tmFc) is resolved from the current local time.

    Args:
        handler: Forecast capability handler
        reg_id: Forecast region code (e.g. "11B00000")
    """
    payload = await handler.handle(
        CallerRequest(capability=Capability.WEATHER_FORECAST, parameters={"regId": reg_id})
    )
    return JSONResponse(content=payload)


# Legacy route; same contract as /forecast
router.add_api_route(
    "",
    get_forecast,
    methods=["GET"],
    response_model=None,
    responses=ERROR_RESPONSES,
    name="get_forecast_legacy",
)


@router.get("/observation", response_model=None, responses=ERROR_RESPONSES)
async def get_observation(
    handler: Annotated[CapabilityHandler, Depends(handler_for(Capability.WEATHER_OBSERVATION))],
    spot_code: Annotated[str | None, Query(alias="spotCode")] = None,
    date: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    """Return agricultural weather observation records for a spot and date.

    Args:
        handler: Observation capability handler
        spot_code: Observation spot code
        date: Observation date, as the upstream expects it (YYYY-MM-DD)
    """
    payload = await handler.handle(
        CallerRequest(
            capability=Capability.WEATHER_OBSERVATION,
            parameters={"spotCode": spot_code, "date": date},
        )
    )
    return JSONResponse(content=payload)

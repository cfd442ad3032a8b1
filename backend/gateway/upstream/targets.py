"""Upstream target table - one immutable descriptor per capability."""

from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType

from backend.gateway.config import Settings
from backend.gateway.models.common import Capability, ResponseFormat, TargetDescriptor

DATA_GO_KR_AUTH_PARAM = "serviceKey"
NCPMS_AUTH_PARAM = "apiKey"


@lru_cache
def build_targets(settings: Settings) -> Mapping[Capability, TargetDescriptor]:
    """Build the descriptor table for a settings instance (cached per instance)."""
    targets = {
        Capability.FERTILIZER: TargetDescriptor(
            capability=Capability.FERTILIZER,
            base_url=settings.fertilizer_url,
            auth_key_name=DATA_GO_KR_AUTH_PARAM,
            query_param_map=MappingProxyType({"cropCode": "fstd_Crop_Code"}),
            response_format=ResponseFormat.XML,
            payload_path=("response", "body", "items", "item"),
        ),
        Capability.WEATHER_FORECAST: TargetDescriptor(
            capability=Capability.WEATHER_FORECAST,
            base_url=settings.mid_forecast_url,
            auth_key_name=DATA_GO_KR_AUTH_PARAM,
            query_param_map=MappingProxyType({"regId": "regId", "tmFc": "tmFc"}),
            response_format=ResponseFormat.JSON,
            payload_path=("response", "body", "items"),
            fixed_params=MappingProxyType({"dataType": "JSON"}),
        ),
        Capability.WEATHER_OBSERVATION: TargetDescriptor(
            capability=Capability.WEATHER_OBSERVATION,
            base_url=settings.observation_url,
            auth_key_name=DATA_GO_KR_AUTH_PARAM,
            query_param_map=MappingProxyType({"spotCode": "obsr_Spot_Code", "date": "date"}),
            response_format=ResponseFormat.XML,
            payload_path=("response", "body", "items", "item"),
        ),
        Capability.PEST: TargetDescriptor(
            capability=Capability.PEST,
            base_url=settings.pest_url,
            auth_key_name=NCPMS_AUTH_PARAM,
            query_param_map=MappingProxyType({"cropName": "cropName", "pestName": "sickNameKor"}),
            response_format=ResponseFormat.XML,
            payload_path=("service", "list"),
            fixed_params=MappingProxyType({"serviceCode": "SVC01", "serviceType": "AA003"}),
            optional_params=frozenset({"cropName", "pestName"}),
        ),
    }
    return MappingProxyType(targets)

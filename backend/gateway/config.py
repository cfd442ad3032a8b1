"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from backend.gateway.models.common import Capability


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Frozen so one instance can be shared read-only by every request.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # Credentials (decoded form; the request builder encodes them)
    api_key: str = ""
    pest_api_key: str = ""

    # Upstream endpoints
    fertilizer_url: str = (
        "https://apis.data.go.kr/1390802/SoilEnviron/FrtlzrStdUse/getSoilFrtlzrQyList"
    )
    mid_forecast_url: str = "http://apis.data.go.kr/1360000/MidFcstInfoService/getMidTa"
    observation_url: str = (
        "https://apis.data.go.kr/1390802/AgriWeather/WeatherObsrInfo/GnrlWeather/getWeatherTimeList"
    )
    pest_url: str = "http://ncpms.rda.go.kr/npmsAPI/service"

    # Timeouts (seconds)
    upstream_timeout_seconds: float = 10.0

    # Local zone for forecast bulletin times
    timezone: str = "Asia/Seoul"

    # Startup
    strict_startup: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    def missing_credentials(self) -> dict[Capability, str]:
        """Map each capability whose key is absent to the env var it needs."""
        missing: dict[Capability, str] = {}
        for capability in Capability:
            env_name = CREDENTIAL_ENV[capability]
            if not getattr(self, env_name.lower()).strip():
                missing[capability] = env_name
        return missing

    def credential_for(self, capability: Capability) -> str:
        """Return the key value used to authenticate against a capability's upstream."""
        return getattr(self, CREDENTIAL_ENV[capability].lower())


CREDENTIAL_ENV: dict[Capability, str] = {
    Capability.FERTILIZER: "API_KEY",
    Capability.WEATHER_FORECAST: "API_KEY",
    Capability.WEATHER_OBSERVATION: "API_KEY",
    Capability.PEST: "PEST_API_KEY",
}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Forecast bulletin time resolution for the mid-range forecast upstream."""

from datetime import datetime, timedelta

from backend.gateway.models.common import ForecastWindow

# Bulletins are published at 06:00 and 18:00 local time.
MORNING_ISSUE_HOUR = 6
EVENING_ISSUE_HOUR = 18


def resolve_forecast_window(now: datetime) -> ForecastWindow:
    """Return the most recent bulletin published at or before ``now``.

    Args:
        now: Current local date-time

    Returns:
        ForecastWindow whose reference_timestamp is formatted YYYYMMDDHHmm
    """
    if now.hour < MORNING_ISSUE_HOUR:
        issue_date = now.date() - timedelta(days=1)
        issue_hour = EVENING_ISSUE_HOUR
    elif now.hour < EVENING_ISSUE_HOUR:
        issue_date = now.date()
        issue_hour = MORNING_ISSUE_HOUR
    else:
        issue_date = now.date()
        issue_hour = EVENING_ISSUE_HOUR

    return ForecastWindow(reference_timestamp=f"{issue_date:%Y%m%d}{issue_hour:02d}00")

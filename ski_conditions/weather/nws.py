"""NWS (National Weather Service) API integration."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional

from ski_conditions.config import FORECAST_PERIODS, HOURLY_PERIODS, NWS_HOST
from ski_conditions.http import fetch_json, resolves
from ski_conditions.models import (
    ForecastPeriod,
    HourlyPeriod,
    LocationConfig,
    LocationForecast,
)

logger = logging.getLogger(__name__)

NWS_POINTS_URL = "https://api.weather.gov/points/{lat},{lon}"
NWS_GRIDPOINTS_URL = "https://api.weather.gov/gridpoints/{office}/{x},{y}/forecast"

SNOW_MARKER = "New snow accumulation"
UNAVAILABLE_MESSAGE = "Weather data temporarily unavailable"


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def _precip_probability(period: dict) -> int:
    """Probability of precipitation, 0 when NWS leaves it null."""
    probability = period.get("probabilityOfPrecipitation") or {}
    return probability.get("value") or 0


def extract_snow_amount(detailed: Optional[str]) -> str:
    """
    Pull the snow accumulation sentence out of a detailed forecast.

    "Cloudy. New snow accumulation of 2 to 4 inches possible. Windy."
    gives "New snow accumulation of 2 to 4 inches possible".

    Returns:
        Trimmed sentence, or "" when the forecast has none
    """
    if not detailed or SNOW_MARKER not in detailed:
        return ""

    for sentence in detailed.split("."):
        if SNOW_MARKER in sentence:
            return sentence.strip()

    return ""


def parse_forecast(data: dict, limit: int = FORECAST_PERIODS) -> list[ForecastPeriod]:
    """
    Convert an NWS forecast response into ForecastPeriods.

    Provider order is kept; only the first `limit` periods are used.
    """
    periods = data.get("properties", {}).get("periods", [])

    forecast = []
    for period in periods[:limit]:
        detailed = period.get("detailedForecast") or ""
        forecast.append(ForecastPeriod(
            name=period.get("name", ""),
            timestamp=_epoch_ms(datetime.fromisoformat(period["startTime"])),
            temp=period.get("temperature"),
            snowfall=_precip_probability(period),
            snow_amount=extract_snow_amount(detailed),
            short_forecast=period.get("shortForecast") or "",
            detailed_forecast=detailed,
        ))

    return forecast


def parse_hourly(data: dict, limit: int = HOURLY_PERIODS) -> list[HourlyPeriod]:
    """Convert an NWS hourly forecast response into HourlyPeriods."""
    periods = data.get("properties", {}).get("periods", [])

    return [
        HourlyPeriod(
            timestamp=_epoch_ms(datetime.fromisoformat(period["startTime"])),
            temp=period.get("temperature"),
            precipitation=_precip_probability(period),
            short_forecast=period.get("shortForecast") or "",
        )
        for period in periods[:limit]
    ]


def resolve_forecast_urls(location: LocationConfig) -> tuple[str, Optional[str]]:
    """
    Find the forecast and hourly forecast URLs for a location.

    A grid reference is used directly; otherwise the points endpoint maps
    lat/lon to the forecast URLs.

    Returns:
        Tuple of (forecast_url, hourly_url); hourly_url is None when the
        location does not want hourly data
    """
    if location.grid is not None:
        forecast_url = NWS_GRIDPOINTS_URL.format(
            office=location.grid.office, x=location.grid.x, y=location.grid.y
        )
        hourly_url = f"{forecast_url}/hourly"
    else:
        if location.lat is None or location.lon is None:
            raise ValueError(f"Location {location.key} has no grid or lat/lon")

        points_url = NWS_POINTS_URL.format(lat=location.lat, lon=location.lon)
        logger.debug(f"Fetching NWS points: {points_url}")
        properties = fetch_json(points_url).get("properties", {})

        forecast_url = properties.get("forecast")
        if not forecast_url:
            raise ValueError(f"No forecast URL in NWS points response for {location.key}")

        hourly_url = properties.get("forecastHourly") or forecast_url.replace(
            "/forecast", "/forecast/hourly"
        )

    return forecast_url, hourly_url if location.hourly else None


def fetch_location_forecast(location: LocationConfig) -> LocationForecast:
    """
    Fetch the forecast (and hourly forecast) for one location.

    Raises:
        FetchError / ValueError on any failure; the caller substitutes a placeholder
    """
    forecast_url, hourly_url = resolve_forecast_urls(location)
    logger.info(f"Fetching forecasts from: {forecast_url} and {hourly_url}")

    with ThreadPoolExecutor(max_workers=2) as executor:
        forecast_future = executor.submit(fetch_json, forecast_url)
        hourly_future = executor.submit(fetch_json, hourly_url) if hourly_url else None

        forecast_data = forecast_future.result()
        hourly_data = hourly_future.result() if hourly_future else None

    return LocationForecast(
        name=location.name,
        forecast=parse_forecast(forecast_data),
        hourly=parse_hourly(hourly_data) if hourly_data else [],
    )


def unavailable_forecast(name: str, now: Optional[datetime] = None) -> LocationForecast:
    """Placeholder used when a location's forecast cannot be fetched."""
    now = now or datetime.now(timezone.utc)
    return LocationForecast(
        name=name,
        forecast=[
            ForecastPeriod(
                name="Unavailable",
                timestamp=_epoch_ms(now),
                temp=None,
                snowfall=None,
                snow_amount="0.0",
                short_forecast=UNAVAILABLE_MESSAGE,
            )
        ],
    )


def fetch_weather(locations: list[LocationConfig]) -> dict[str, LocationForecast]:
    """
    Fetch forecasts for every configured location.

    One location failing does not affect the others. If the NWS host does
    not resolve at all, nothing is fetched and the result is empty.

    Args:
        locations: Locations from the registry

    Returns:
        Mapping of location key to LocationForecast
    """
    if not resolves(NWS_HOST):
        logger.error(f"Cannot resolve {NWS_HOST} - check your internet connection")
        return {}

    weather: dict[str, LocationForecast] = {}

    for location in locations:
        logger.info(f"Fetching weather for {location.name}...")
        try:
            weather[location.key] = fetch_location_forecast(location)
        except Exception as e:
            logger.warning(f"Error fetching weather for {location.name}: {e}")
            weather[location.key] = unavailable_forecast(location.name)

    return weather

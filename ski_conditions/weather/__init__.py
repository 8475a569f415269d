"""Weather forecasts from the National Weather Service."""

from ski_conditions.weather.nws import fetch_weather

__all__ = ["fetch_weather"]

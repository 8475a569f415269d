"""Pydantic models for the conditions data contract."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for published records: snake_case in Python, camelCase names the display app reads in JSON."""
    model_config = ConfigDict(populate_by_name=True)


# ========== Weather ==========

class ForecastPeriod(WireModel):
    """One named NWS forecast period (e.g. "Tonight")."""
    name: str
    timestamp: int  # period start, epoch milliseconds
    temp: Optional[int] = None
    snowfall: Optional[int] = None  # precipitation probability, 0-100
    snow_amount: str = Field(default="", alias="snowAmount")
    short_forecast: str = Field(default="", alias="shortForecast")
    detailed_forecast: Optional[str] = Field(default=None, alias="detailedForecast")


class HourlyPeriod(WireModel):
    """One hour of the NWS hourly forecast."""
    timestamp: int
    temp: Optional[int] = None
    precipitation: Optional[int] = None
    short_forecast: str = Field(default="", alias="shortForecast")


class LocationForecast(WireModel):
    """Forecast for one configured location."""
    name: str
    forecast: list[ForecastPeriod] = Field(default_factory=list)
    hourly: list[HourlyPeriod] = Field(default_factory=list)


# ========== Metroparks bulletins ==========

class BulletinSection(WireModel):
    """A bolded lead-in phrase and the text that follows it."""
    header: str
    content: str = ""


class ParkBulletin(WireModel):
    """Closure/conditions bulletin for one park panel."""
    title: Optional[str] = None
    sections: list[BulletinSection] = Field(default_factory=list)
    error: Optional[str] = None


# ========== Trail reports ==========

class TrailReport(WireModel):
    """Most recent user trail report for a location."""
    last_updated: str = Field(alias="lastUpdated")
    conditions: str = ""
    # Only used to pick the newest report, never published
    report_date: Optional[date] = Field(default=None, exclude=True)


# ========== Resort conditions table ==========

class SnowData(WireModel):
    """New-snow totals as published by the resort."""
    daily: str = ""
    three_days: str = Field(default="", alias="threeDays")
    seven_days: str = Field(default="", alias="sevenDays")
    ytd: str = ""


class ResortConditions(WireModel):
    """Labeled fields from the resort conditions table."""
    report_date: str = Field(default="", alias="date")
    lifts_open: str = Field(default="", alias="liftsOpen")
    xc_trails: str = Field(default="", alias="xcTrails")
    night_skiing: str = Field(default="", alias="nightSkiing")
    comments: str = ""
    snow_data: SnowData = Field(default_factory=SnowData, alias="snowData")


# ========== Published document ==========

class ConditionsDocument(WireModel):
    """Root document published for the display application."""
    timestamp: datetime
    weather: dict[str, LocationForecast] = Field(default_factory=dict)
    metropark_conditions: dict[str, ParkBulletin] = Field(
        default_factory=dict, alias="metroparkConditions"
    )
    nordic_conditions: dict[str, TrailReport] = Field(
        default_factory=dict, alias="nordicConditions"
    )
    nubs_nob: ResortConditions = Field(default_factory=ResortConditions, alias="nubsNob")


# ========== Source registry ==========

class GridReference(BaseModel):
    """NWS grid cell (office + x,y) used to skip the points lookup."""
    office: str
    x: int
    y: int


class LocationConfig(BaseModel):
    """Configuration for a single forecast location from sources.yaml."""
    key: str
    name: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    grid: Optional[GridReference] = None
    hourly: bool = True


class ParkConfig(BaseModel):
    """Park panel to scan and which bolded sections to keep."""
    id: str
    terms: list[str]
    match: Literal["exact", "substring", "icase"] = "substring"


class MetroparksConfig(BaseModel):
    url: str
    parks: list[ParkConfig] = Field(default_factory=list)


class TrailReportsConfig(BaseModel):
    url: str  # contains a {region} placeholder
    regions: list[int] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)


class ResortPageConfig(BaseModel):
    url: str


class SourcesConfig(BaseModel):
    """Everything in sources.yaml."""
    locations: list[LocationConfig] = Field(default_factory=list)
    metroparks: MetroparksConfig
    trail_reports: TrailReportsConfig
    nubs_nob: ResortPageConfig

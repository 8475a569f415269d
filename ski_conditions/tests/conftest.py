"""Shared fixtures."""

import time

import pytest

from ski_conditions.models import (
    LocationConfig,
    MetroparksConfig,
    ParkConfig,
    ResortPageConfig,
    SourcesConfig,
    TrailReportsConfig,
)

PARKS_URL = "https://parks.test/park-closures/"
TRAILS_URL = "https://trails.test/conditions.asp?Region={region}"
RESORT_URL = "https://resort.test/conditions-tables/"


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Retry backoff should not slow the suite down."""
    monkeypatch.setattr(time, "sleep", lambda seconds: None)


@pytest.fixture
def dns_ok(monkeypatch):
    """Pretend the NWS host resolves."""
    monkeypatch.setattr("ski_conditions.weather.nws.resolves", lambda host: True)


@pytest.fixture
def sources() -> SourcesConfig:
    return SourcesConfig(
        locations=[
            LocationConfig(key="nubsNob", name="Nubs Nob", lat=45.47, lon=-84.903),
        ],
        metroparks=MetroparksConfig(
            url=PARKS_URL,
            parks=[
                ParkConfig(id="HuronMeadowsMetropark", terms=["Bucks Run"]),
                ParkConfig(id="StonyCreekMetropark", terms=["ski"], match="icase"),
            ],
        ),
        trail_reports=TrailReportsConfig(
            url=TRAILS_URL,
            regions=[11, 13],
            locations=["Nubs Nob", "Huron Meadows Metropark"],
        ),
        nubs_nob=ResortPageConfig(url=RESORT_URL),
    )

"""Run every source and assemble the conditions document."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timezone
from typing import Optional

from ski_conditions.adapters import MetroparksAdapter, NordicSkiRacerAdapter, NubsNobAdapter
from ski_conditions.models import ConditionsDocument, SourcesConfig
from ski_conditions.weather import fetch_weather

logger = logging.getLogger(__name__)


def build_document(sources: SourcesConfig, today: Optional[date] = None) -> ConditionsDocument:
    """
    Fetch all sources and merge them into one document.

    Sources run concurrently. Per-item failures are handled inside each
    adapter; anything an adapter raises propagates and aborts the run.

    Args:
        sources: Source registry
        today: Date used to resolve trail report years (defaults to today)

    Returns:
        ConditionsDocument stamped with the current UTC time
    """
    metroparks = MetroparksAdapter(sources.metroparks)
    nordic = NordicSkiRacerAdapter(sources.trail_reports, today=today)
    nubs_nob = NubsNobAdapter(sources.nubs_nob)

    with ThreadPoolExecutor(max_workers=4) as executor:
        weather_future = executor.submit(fetch_weather, sources.locations)
        metroparks_future = executor.submit(metroparks.collect)
        nordic_future = executor.submit(nordic.collect)
        nubs_nob_future = executor.submit(nubs_nob.collect)

        document = ConditionsDocument(
            timestamp=datetime.now(timezone.utc),
            weather=weather_future.result(),
            metropark_conditions=metroparks_future.result(),
            nordic_conditions=nordic_future.result(),
            nubs_nob=nubs_nob_future.result(),
        )

    logger.info(
        f"Built document: {len(document.weather)} forecasts, "
        f"{len(document.metropark_conditions)} parks, "
        f"{len(document.nordic_conditions)} trail reports"
    )
    return document

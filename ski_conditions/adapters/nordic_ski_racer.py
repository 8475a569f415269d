"""Adapter for NordicSkiRacer.com regional trail reports."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Iterable, Optional

from ski_conditions.adapters.base import BaseAdapter
from ski_conditions.http import fetch
from ski_conditions.models import TrailReport, TrailReportsConfig

logger = logging.getLogger(__name__)

# "Jan 14" and "January 14"
DATE_FORMATS = ("%b %d %Y", "%B %d %Y")


def parse_report_date(text: str, today: Optional[date] = None) -> Optional[date]:
    """
    Parse a header date like "Tue, Jan 14" using the current year.

    Returns:
        The date, or None if the text has any other shape
    """
    parts = text.split(", ")
    if len(parts) != 2:
        return None

    year = (today or date.today()).year
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(f"{parts[1].strip()} {year}", fmt).date()
        except ValueError:
            continue

    logger.debug(f"Error parsing date: {text}")
    return None


def is_newer(candidate: TrailReport, existing: TrailReport) -> bool:
    """
    True only if both reports have dates and candidate's is strictly later.

    A missing date means recency is unknown, so the existing report stays.
    """
    if candidate.report_date is None or existing.report_date is None:
        return False
    return candidate.report_date > existing.report_date


def merge_reports(candidates: Iterable[tuple[str, TrailReport]]) -> dict[str, TrailReport]:
    """
    Merge (location, report) pairs keeping the newest report per location.

    The first report seen for a location is kept unless a later one is
    provably newer.
    """
    merged: dict[str, TrailReport] = {}

    for location, report in candidates:
        existing = merged.get(location)
        if existing is None or is_newer(report, existing):
            merged[location] = report

    return merged


class NordicSkiRacerAdapter(BaseAdapter):
    """
    Parser for the NordicSkiRacer trail conditions listing.

    Each region page lists reports as:
        <h4>Tue, Jan 14: Nubs Nob - XC</h4>
        <p>Report text...</p>

    Regions are fetched concurrently and merged afterwards in region order.
    """

    def __init__(self, config: TrailReportsConfig, today: Optional[date] = None):
        self.config = config
        self.today = today

    def collect(self) -> dict[str, TrailReport]:
        regions = self.config.regions
        if not regions:
            return {}

        with ThreadPoolExecutor(max_workers=len(regions)) as executor:
            futures = [executor.submit(self.collect_region, region) for region in regions]
            region_reports = [future.result() for future in futures]

        merged = merge_reports(
            candidate for reports in region_reports for candidate in reports
        )

        logger.info(f"Parsed Nordic conditions: {', '.join(merged) or 'none'}")

        # Comparison dates are internal only
        return {
            location: report.model_copy(update={"report_date": None})
            for location, report in merged.items()
        }

    def collect_region(self, region: int) -> list[tuple[str, TrailReport]]:
        """Fetch and parse one region; a failure yields no reports."""
        url = self.config.url.format(region=region)

        try:
            html = fetch(url)
            return self.parse(html)
        except Exception as e:
            logger.error(f"Error fetching region {region}: {e}")
            return []

    def parse(self, html: str) -> list[tuple[str, TrailReport]]:
        """
        Extract reports for the configured locations, in page order.

        Returns:
            List of (location segment, TrailReport) pairs
        """
        soup = self.make_soup(html)
        wanted = [location.lower() for location in self.config.locations]
        reports = []

        for header in soup.find_all("h4"):
            parts = header.get_text().strip().split(":")
            if len(parts) < 2:
                continue

            date_section = parts[0].strip()
            location_section = parts[1].strip()

            lowered = location_section.lower()
            if not any(location in lowered for location in wanted):
                continue

            paragraph = header.find_next_sibling("p")
            reports.append((location_section, TrailReport(
                last_updated=date_section,
                conditions=paragraph.get_text().strip() if paragraph else "",
                report_date=parse_report_date(date_section, self.today),
            )))

        return reports

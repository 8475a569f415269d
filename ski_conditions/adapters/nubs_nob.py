"""Adapter for the Nubs Nob conditions table."""

import logging

from ski_conditions.adapters.base import BaseAdapter, cell_at, extract_fields, index_records
from ski_conditions.http import fetch
from ski_conditions.models import ResortConditions, ResortPageConfig, SnowData

logger = logging.getLogger(__name__)

ROW_SELECTOR = ".glm-conditions-record.flex"
CELL_SELECTOR = ".conditions-cell"

# ResortConditions field -> row label
FIELD_LABELS = {
    "report_date": "Date:",
    "lifts_open": "Lifts Open:",
    "xc_trails": "XC Trail System:",
    "night_skiing": "Night Skiing:",
    "comments": "Comments:",
}

SNOW_LABEL = "New Snow since yesterday:"
SNOW_FIELDS = ("daily", "three_days", "seven_days", "ytd")


class NubsNobAdapter(BaseAdapter):
    """
    Parser for nubsnob.com/conditions-tables.

    The page is a list of label/value records:
        <div class="glm-conditions-record flex">
            <div class="conditions-cell">Lifts Open:</div>
            <div class="conditions-cell">5 of 9</div>
        </div>

    The new-snow record has four value cells (24h, 3 day, 7 day, season).
    Fetch failures are not caught here.
    """

    def __init__(self, config: ResortPageConfig):
        self.config = config

    def collect(self) -> ResortConditions:
        logger.info(f"Fetching Nubs Nob conditions from {self.config.url}")
        html = fetch(self.config.url)
        conditions = self.parse(html)
        logger.info(f"Nubs Nob: lifts open {conditions.lifts_open or '?'}, date {conditions.report_date or '?'}")
        return conditions

    def parse(self, html: str) -> ResortConditions:
        soup = self.make_soup(html)
        records = index_records(soup, ROW_SELECTOR, CELL_SELECTOR)

        snow_cells = records.get(SNOW_LABEL, [])
        snow = SnowData(**{
            name: cell_at(snow_cells, index)
            for index, name in enumerate(SNOW_FIELDS, start=1)
        })

        return ResortConditions(**extract_fields(records, FIELD_LABELS), snow_data=snow)

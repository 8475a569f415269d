"""Adapter for the Huron-Clinton Metroparks closures page."""

import logging
from concurrent.futures import ThreadPoolExecutor

from bs4 import Tag

from ski_conditions.adapters.base import BaseAdapter
from ski_conditions.http import fetch
from ski_conditions.models import BulletinSection, MetroparksConfig, ParkBulletin, ParkConfig

logger = logging.getLogger(__name__)


def matches_term(header: str, park: ParkConfig) -> bool:
    """Check a bolded header against the park's configured terms."""
    if park.match == "exact":
        return any(header == term for term in park.terms)
    if park.match == "icase":
        lowered = header.lower()
        return any(term.lower() in lowered for term in park.terms)
    return any(term in header for term in park.terms)


def _section_content(strong: Tag, header: str) -> str:
    """Text of the paragraph/list item around strong, minus the bolded lead-in."""
    block = strong.find_parent(["p", "li"])
    if block is None:
        return ""

    full_text = block.get_text().strip()
    if full_text.startswith(header):
        return full_text[len(header):].strip()
    return full_text.replace(header, "", 1).strip()


class MetroparksAdapter(BaseAdapter):
    """
    Parser for the metroparks.com park-closures page.

    The page has one collapsible panel per park:
    - panel: div.vc_tta-panel with id=<park id>
    - title: .vc_tta-title-text inside the panel
    - sections: <strong> lead-ins inside <p>/<li> blocks

    Each park is fetched separately so one bad fetch only affects that park.
    """

    def __init__(self, config: MetroparksConfig):
        self.config = config

    def collect(self) -> dict[str, ParkBulletin]:
        parks = self.config.parks
        if not parks:
            return {}

        with ThreadPoolExecutor(max_workers=len(parks)) as executor:
            futures = [(park.id, executor.submit(self.collect_park, park)) for park in parks]
            conditions = {park_id: future.result() for park_id, future in futures}

        logger.info(
            "Parsed Metropark conditions: "
            + ", ".join(f"{park_id}={len(b.sections)} sections" for park_id, b in conditions.items())
        )
        return conditions

    def collect_park(self, park: ParkConfig) -> ParkBulletin:
        """Fetch and parse one park, turning any failure into an error entry."""
        park_url = f"{self.config.url}#{park.id}"
        logger.info(f"Fetching conditions for {park.id} from {park_url}")

        try:
            html = fetch(park_url)
            return self.parse(html, park)
        except Exception as e:
            logger.error(f"Error fetching conditions for {park.id}: {e}")
            return ParkBulletin(sections=[], error=f"Failed to fetch conditions: {e}")

    def parse(self, html: str, park: ParkConfig) -> ParkBulletin:
        """Extract the park's title and matching sections from page HTML."""
        soup = self.make_soup(html)
        bulletin = ParkBulletin()

        panel = soup.select_one(f'.vc_tta-panel[id="{park.id}"]')
        if panel is None:
            logger.info(f"No panel found for {park.id}")
            return bulletin

        title = panel.select_one(".vc_tta-title-text")
        bulletin.title = title.get_text().strip() if title else ""

        for strong in panel.find_all("strong"):
            header = strong.get_text().strip()
            if not header or not matches_term(header, park):
                continue

            bulletin.sections.append(BulletinSection(
                header=header,
                content=_section_content(strong, header),
            ))

        return bulletin

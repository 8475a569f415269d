"""Base adapter interface and shared HTML extraction helpers."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from bs4 import BeautifulSoup


class BaseAdapter(ABC):
    """Base class for source adapters: fetch one source, return its fragment."""

    @abstractmethod
    def collect(self) -> Any:
        """
        Fetch and parse this adapter's source.

        Returns:
            The adapter's fragment of the conditions document
        """
        pass

    # ========== Utility Methods ==========

    @staticmethod
    def make_soup(html: str) -> BeautifulSoup:
        """Parse HTML with lxml."""
        return BeautifulSoup(html, "lxml")

    @staticmethod
    def clean_text(text: Optional[str]) -> str:
        """Clean whitespace from text."""
        if not text:
            return ""
        return " ".join(text.split())


def index_records(soup: BeautifulSoup, row_selector: str, cell_selector: str) -> dict[str, list[str]]:
    """
    Index label/value rows by the trimmed text of their first cell.

    When several rows share a label the first one wins.

    Returns:
        Mapping of label to the trimmed text of every cell in that row
        (the label itself is element 0)
    """
    records: dict[str, list[str]] = {}

    for row in soup.select(row_selector):
        cells = [cell.get_text().strip() for cell in row.select(cell_selector)]
        if cells and cells[0] not in records:
            records[cells[0]] = cells

    return records


def cell_at(cells: list[str], index: int) -> str:
    """Cell text at index, or "" if the row is shorter."""
    return cells[index] if index < len(cells) else ""


def extract_fields(records: Mapping[str, list[str]], rules: Mapping[str, str]) -> dict[str, str]:
    """
    Apply a field -> label rule table to indexed records.

    Each field gets the second cell of the row whose label matches
    exactly, or "" when no row has that label.
    """
    return {
        field: cell_at(records.get(label, []), 1)
        for field, label in rules.items()
    }

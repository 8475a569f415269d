"""Tests for parsing utilities and adapters."""

from datetime import date

import pytest

from ski_conditions.adapters.base import BaseAdapter, extract_fields, index_records
from ski_conditions.adapters.metroparks import MetroparksAdapter, matches_term
from ski_conditions.adapters.nordic_ski_racer import (
    NordicSkiRacerAdapter,
    merge_reports,
    parse_report_date,
)
from ski_conditions.adapters.nubs_nob import NubsNobAdapter
from ski_conditions.http import FetchError
from ski_conditions.models import (
    MetroparksConfig,
    ParkConfig,
    ResortPageConfig,
    TrailReport,
    TrailReportsConfig,
)

TODAY = date(2025, 1, 20)

METROPARKS_HTML = """
<html>
<body>
<div class="vc_tta-panels">
  <div class="vc_tta-panel" id="HuronMeadowsMetropark">
    <div class="vc_tta-panel-heading">
      <h4 class="vc_tta-panel-title"><a><span class="vc_tta-title-text">Huron Meadows Metropark</span></a></h4>
    </div>
    <div class="vc_tta-panel-body">
      <p><strong>Bucks Run:</strong> Open for sledding, 4 inch base.</p>
      <p><strong>Natural Snow Classic and Skate Ski Trails:</strong> Groomed this morning.</p>
      <p><strong>Golf Course:</strong> Closed for the season.</p>
    </div>
  </div>
  <div class="vc_tta-panel" id="StonyCreekMetropark">
    <div class="vc_tta-panel-heading">
      <h4 class="vc_tta-panel-title"><a><span class="vc_tta-title-text">Stony Creek Metropark</span></a></h4>
    </div>
    <div class="vc_tta-panel-body">
      <ul>
        <li><strong>Stony Creek Cross Country Ski Center:</strong> Closed, not enough snow.</li>
        <li><strong>Boat Rental:</strong> Closed.</li>
      </ul>
    </div>
  </div>
</div>
</body>
</html>
"""

NORDIC_HTML_REGION_11 = """
<html><body>
<h4>Tue, Jan 14: Nubs Nob - XC</h4>
<p>Freshly groomed, 3 inches new.</p>
<h4>Mon, Jan 13: Forbush Corner</h4>
<p>Not on the list.</p>
<h4>Sun, Jan 12: Huron Meadows Metropark</h4>
<div>ad</div>
<p>Thin cover on the hills.</p>
<h4>Announcement without a colon</h4>
<p>Ignored.</p>
</body></html>
"""

NORDIC_HTML_REGION_13 = """
<html><body>
<h4>Mon, Jan 13: Nubs Nob - XC</h4>
<p>Icy in the morning.</p>
</body></html>
"""

NUBS_NOB_HTML = """
<html><body>
<div class="glm-conditions-table">
  <div class="glm-conditions-record flex">
    <div class="conditions-cell">Date:</div>
    <div class="conditions-cell"> 1/14/2025 7:30 AM </div>
  </div>
  <div class="glm-conditions-record flex">
    <div class="conditions-cell">Lifts Open:</div>
    <div class="conditions-cell">7 of 9</div>
  </div>
  <div class="glm-conditions-record flex">
    <div class="conditions-cell">XC Trail System:</div>
    <div class="conditions-cell">Open - groomed</div>
  </div>
  <div class="glm-conditions-record flex">
    <div class="conditions-cell">New Snow since yesterday:</div>
    <div class="conditions-cell">2"</div>
    <div class="conditions-cell">5"</div>
    <div class="conditions-cell">11"</div>
    <div class="conditions-cell">86"</div>
  </div>
  <div class="glm-conditions-record flex">
    <div class="conditions-cell">Comments:</div>
    <div class="conditions-cell">Great day to ski!</div>
  </div>
  <div class="glm-conditions-record flex">
    <div class="conditions-cell">Lifts Open:</div>
    <div class="conditions-cell">duplicate row</div>
  </div>
</div>
</body></html>
"""

HURON = ParkConfig(
    id="HuronMeadowsMetropark",
    terms=["Bucks Run", "Natural Snow Classic and Skate Ski Trails"],
)
STONY = ParkConfig(id="StonyCreekMetropark", terms=["ski"], match="icase")


def trail_config():
    return TrailReportsConfig(
        url="https://trails.test/conditions.asp?Region={region}",
        regions=[11, 13],
        locations=["Nubs Nob", "Huron Meadows Metropark", "Shelby Township"],
    )


def report(text, when):
    return TrailReport(last_updated=text, conditions=text, report_date=when)


class TestParsingUtilities:
    """Test shared helpers."""

    def test_clean_text(self):
        """Test text cleaning."""
        assert BaseAdapter.clean_text("  hello   world  ") == "hello world"
        assert BaseAdapter.clean_text("multi\nline\ntext") == "multi line text"
        assert BaseAdapter.clean_text(None) == ""
        assert BaseAdapter.clean_text("") == ""

    def test_extract_fields_by_rule(self):
        """Rule table labels map to the second cell, or empty when absent."""
        soup = BaseAdapter.make_soup(NUBS_NOB_HTML)
        records = index_records(soup, ".glm-conditions-record.flex", ".conditions-cell")

        fields = extract_fields(records, {"lifts": "Lifts Open:", "missing": "Night Skiing:"})

        assert fields == {"lifts": "7 of 9", "missing": ""}


class TestMetroparksAdapter:
    """Test the park closures adapter."""

    def test_parse_matching_sections(self):
        """Only bolded headers matching the park's terms are kept."""
        adapter = MetroparksAdapter(MetroparksConfig(url="https://parks.test/", parks=[HURON]))
        bulletin = adapter.parse(METROPARKS_HTML, HURON)

        assert bulletin.title == "Huron Meadows Metropark"
        assert [s.header for s in bulletin.sections] == [
            "Bucks Run:",
            "Natural Snow Classic and Skate Ski Trails:",
        ]
        assert bulletin.sections[0].content == "Open for sledding, 4 inch base."
        assert bulletin.error is None

    def test_case_insensitive_rule_set(self):
        """A park can match on a case-insensitive substring like "ski"."""
        adapter = MetroparksAdapter(MetroparksConfig(url="https://parks.test/", parks=[STONY]))
        bulletin = adapter.parse(METROPARKS_HTML, STONY)

        assert bulletin.title == "Stony Creek Metropark"
        assert len(bulletin.sections) == 1
        assert bulletin.sections[0].header == "Stony Creek Cross Country Ski Center:"
        assert bulletin.sections[0].content == "Closed, not enough snow."

    def test_missing_panel(self):
        """A park with no panel gets empty sections and no error."""
        park = ParkConfig(id="KensingtonMetropark", terms=["ski"], match="icase")
        adapter = MetroparksAdapter(MetroparksConfig(url="https://parks.test/", parks=[park]))

        bulletin = adapter.parse(METROPARKS_HTML, park)

        assert bulletin.sections == []
        assert bulletin.error is None

    @pytest.mark.parametrize("match,header,expected", [
        ("exact", "Bucks Run", True),
        ("exact", "Bucks Run:", False),
        ("substring", "Bucks Run:", True),
        ("substring", "bucks run:", False),
        ("icase", "BUCKS RUN:", True),
    ])
    def test_match_modes(self, match, header, expected):
        park = ParkConfig(id="p", terms=["Bucks Run"], match=match)
        assert matches_term(header, park) is expected

    def test_one_park_failure_isolated(self, monkeypatch):
        """A failed park fetch yields an error entry; other parks still parse."""
        def fake_fetch(url):
            if url.endswith("#StonyCreekMetropark"):
                raise FetchError("Failed to fetch: 503")
            return METROPARKS_HTML

        monkeypatch.setattr("ski_conditions.adapters.metroparks.fetch", fake_fetch)
        adapter = MetroparksAdapter(MetroparksConfig(url="https://parks.test/", parks=[HURON, STONY]))

        conditions = adapter.collect()

        assert len(conditions["HuronMeadowsMetropark"].sections) == 2
        assert conditions["StonyCreekMetropark"].sections == []
        assert conditions["StonyCreekMetropark"].error.startswith("Failed to fetch conditions:")


class TestReportDate:
    """Test best-effort trail report dates."""

    def test_parse_short_month(self):
        assert parse_report_date("Tue, Jan 14", TODAY) == date(2025, 1, 14)

    def test_parse_long_month(self):
        assert parse_report_date("Friday, February 7", TODAY) == date(2025, 2, 7)

    @pytest.mark.parametrize("text", ["Jan 14", "Tue Jan 14", "Tue, Smarch 14", "", "a, b, c"])
    def test_unparseable(self, text):
        """Anything else is None, never a fallback date."""
        assert parse_report_date(text, TODAY) is None


class TestMergeReports:
    """Test newest-report-wins merging."""

    def test_later_date_wins_in_either_order(self):
        monday = report("Mon, Jan 13", date(2025, 1, 13))
        tuesday = report("Tue, Jan 14", date(2025, 1, 14))
        key = "Nubs Nob - XC"

        assert merge_reports([(key, monday), (key, tuesday)])[key] is tuesday
        assert merge_reports([(key, tuesday), (key, monday)])[key] is tuesday

    def test_unparsed_date_keeps_existing(self):
        """If either date is unknown, the first report stays."""
        dated = report("Tue, Jan 14", date(2025, 1, 14))
        undated = report("Yesterday", None)
        key = "Nubs Nob - XC"

        assert merge_reports([(key, dated), (key, undated)])[key] is dated
        assert merge_reports([(key, undated), (key, dated)])[key] is undated

    def test_same_date_keeps_existing(self):
        first = report("Tue, Jan 14", date(2025, 1, 14))
        second = report("Tue, Jan 14", date(2025, 1, 14))

        assert merge_reports([("k", first), ("k", second)])["k"] is first


class TestNordicSkiRacerAdapter:
    """Test the regional trail report adapter."""

    def test_parse_page(self):
        """Headers are split on the colon and matched against the allowlist."""
        adapter = NordicSkiRacerAdapter(trail_config(), today=TODAY)
        reports = dict(adapter.parse(NORDIC_HTML_REGION_11))

        assert set(reports) == {"Nubs Nob - XC", "Huron Meadows Metropark"}
        assert reports["Nubs Nob - XC"].last_updated == "Tue, Jan 14"
        assert reports["Nubs Nob - XC"].conditions == "Freshly groomed, 3 inches new."
        assert reports["Nubs Nob - XC"].report_date == date(2025, 1, 14)
        # First following <p>, skipping other siblings
        assert reports["Huron Meadows Metropark"].conditions == "Thin cover on the hills."

    def test_collect_merges_regions(self, requests_mock):
        """The same location from two regions keeps the newest report."""
        requests_mock.get("https://trails.test/conditions.asp?Region=11", text=NORDIC_HTML_REGION_11)
        requests_mock.get("https://trails.test/conditions.asp?Region=13", text=NORDIC_HTML_REGION_13)
        adapter = NordicSkiRacerAdapter(trail_config(), today=TODAY)

        conditions = adapter.collect()

        assert conditions["Nubs Nob - XC"].last_updated == "Tue, Jan 14"
        assert conditions["Nubs Nob - XC"].report_date is None
        assert set(conditions["Nubs Nob - XC"].model_dump(by_alias=True)) == {"lastUpdated", "conditions"}

    def test_region_failure_isolated(self, requests_mock):
        """A failed region contributes nothing; the other region still counts."""
        requests_mock.get("https://trails.test/conditions.asp?Region=11", status_code=500)
        requests_mock.get("https://trails.test/conditions.asp?Region=13", text=NORDIC_HTML_REGION_13)
        adapter = NordicSkiRacerAdapter(trail_config(), today=TODAY)

        conditions = adapter.collect()

        assert list(conditions) == ["Nubs Nob - XC"]
        assert conditions["Nubs Nob - XC"].conditions == "Icy in the morning."


class TestNubsNobAdapter:
    """Test the resort conditions table adapter."""

    def test_parse_conditions(self):
        adapter = NubsNobAdapter(ResortPageConfig(url="https://resort.test/"))
        conditions = adapter.parse(NUBS_NOB_HTML)

        assert conditions.report_date == "1/14/2025 7:30 AM"
        assert conditions.lifts_open == "7 of 9"  # first matching row wins
        assert conditions.xc_trails == "Open - groomed"
        assert conditions.night_skiing == ""
        assert conditions.comments == "Great day to ski!"
        assert conditions.snow_data.daily == '2"'
        assert conditions.snow_data.three_days == '5"'
        assert conditions.snow_data.seven_days == '11"'
        assert conditions.snow_data.ytd == '86"'

    def test_parse_without_snow_record(self):
        """Missing records give empty strings, not errors."""
        adapter = NubsNobAdapter(ResortPageConfig(url="https://resort.test/"))
        conditions = adapter.parse("<html><body><p>Maintenance</p></body></html>")

        assert conditions.model_dump(by_alias=True) == {
            "date": "",
            "liftsOpen": "",
            "xcTrails": "",
            "nightSkiing": "",
            "comments": "",
            "snowData": {"daily": "", "threeDays": "", "sevenDays": "", "ytd": ""},
        }

    def test_fetch_failure_propagates(self, requests_mock):
        """Unlike the other sources, a failed fetch is not absorbed."""
        requests_mock.get("https://resort.test/", status_code=502)
        adapter = NubsNobAdapter(ResortPageConfig(url="https://resort.test/"))

        with pytest.raises(FetchError):
            adapter.collect()

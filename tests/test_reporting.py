from __future__ import annotations

import pytest

from healthspan_core.grading import bar_band, grade, weakest_systems
from healthspan_core.report_html import export_report_html, render_report_html
from healthspan_core.reporting import NO_NARRATIVE, chart_series, render_text, summarize
from healthspan_core.scoring import score
from healthspan_core.share_codec import decode, encode
from healthspan_core.types import Narrative, UserInfo

TS = "2026-10-19T08:30:00+00:00"


@pytest.fixture
def neutral(catalog, user):
    return score({}, user, catalog, TS)


@pytest.mark.parametrize(
    "pct, label",
    [(100, "Optimal"), (90, "Optimal"), (89, "Good"), (75, "Good"), (74, "Moderate"), (60, "Moderate"), (59, "Needs Attention"), (0, "Needs Attention")],
)
def test_grade_bands(pct, label):
    assert grade(pct) == label


@pytest.mark.parametrize("pct, band", [(71, "good"), (70, "fair"), (41, "fair"), (40, "low"), (0, "low")])
def test_bar_bands(pct, band):
    assert bar_band(pct) == band


def test_text_export_without_narrative(neutral):
    text = render_text(neutral)
    lines = text.splitlines()

    assert lines[0] == "[4-Week Healthspan Project] Assessment result"
    assert "Name: Jordan Lee" in lines
    assert "Overall score: 96/160 (60%)" in lines
    assert "Health grade: Moderate" in lines
    assert "- Assimilation (digestion): 15/25 (60%)" in lines
    assert "- Structural (bones & muscles): 12/20 (60%)" in lines
    assert NO_NARRATIVE in lines
    assert lines[-1] == "Assessment date: 2026-10-19"


def test_text_export_is_deterministic(neutral):
    n = Narrative(summary="Steady baseline across systems.")
    assert render_text(neutral, n) == render_text(neutral, n)
    assert '"Steady baseline across systems."' in render_text(neutral, n)
    assert NO_NARRATIVE not in render_text(neutral, n)


def test_text_export_with_empty_summary_falls_back(neutral):
    assert NO_NARRATIVE in render_text(neutral, Narrative(strengths=("Posture",)))


def test_shared_text_export_is_anonymous(neutral):
    shared = decode(encode(neutral))
    text = render_text(shared)

    assert "Name: anonymous user" in text
    assert "Jordan Lee" not in text
    assert "Overall score: 96/160 (60%)" in text


def test_unparseable_timestamp_is_printed_verbatim(catalog):
    res = score({}, UserInfo("A", "30", "Other"), catalog, "yesterday")
    assert render_text(res).splitlines()[-1] == "Assessment date: yesterday"

    zulu = score({}, UserInfo("A", "30", "Other"), catalog, "2026-01-02T23:59:00Z")
    assert render_text(zulu).splitlines()[-1] == "Assessment date: 2026-01-02"


def test_chart_series(catalog, user):
    res = score({"a1": 1, "a3": 1, "a5": 1, "a2": 5, "a4": 5}, user, catalog, TS)
    charts = chart_series(res)

    assert charts["radar"][0] == {
        "system": "Assimilation",
        "label": "Assimilation (digestion)",
        "percentage": 100,
        "fullMark": 100,
    }
    assert charts["bars"][0]["band"] == "good"
    assert charts["bars"][1]["band"] == "fair"
    assert [b["max"] for b in charts["bars"]] == [25, 25, 25, 20, 20, 25, 20]


def test_summarize_and_weakest(catalog, user):
    res = score({"t1": 5, "t2": 5}, user, catalog, TS)
    assert summarize(res)["shared"] is False
    assert weakest_systems(res.system_scores, n=1) == ["Transport"]


def test_html_escapes_profile_and_narrative(catalog, tmp_path):
    res = score({}, UserInfo("<script>x</script>", "30", "Other"), catalog, TS)
    html = render_report_html(res, Narrative(summary="a < b", recommendations=("Walk & rest",)))

    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html
    assert "a &lt; b" in html
    assert "<li>Walk &amp; rest</li>" in html

    path = export_report_html(res, str(tmp_path / "r.html"))
    assert NO_NARRATIVE in (tmp_path / "r.html").read_text(encoding="utf-8")
    assert path.endswith("r.html")


def test_shared_html_shows_banner_without_profile(neutral):
    html = render_report_html(decode(encode(neutral)))
    assert "Shared result" in html
    assert "Jordan Lee" not in html

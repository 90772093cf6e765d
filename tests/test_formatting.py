from __future__ import annotations

from datetime import UTC, datetime

import pytest

from covid_sms.formatting import format_summary, rfc850, title_country
from covid_sms.stats import CountryStats

FIXED_NOW = datetime(2020, 4, 6, 15, 52, 1, tzinfo=UTC)


def test_rfc850_format() -> None:
    assert rfc850(FIXED_NOW) == "Monday, 06-Apr-20 15:52:01 UTC"


def test_rfc850_treats_naive_as_utc() -> None:
    assert rfc850(FIXED_NOW.replace(tzinfo=None)) == "Monday, 06-Apr-20 15:52:01 UTC"


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("nigeria", "Nigeria"),
        ("NIGERIA", "Nigeria"),
        ("nIgErIa", "Nigeria"),
        ("south africa", "South Africa"),
        ("cote d'ivoire", "Cote D'ivoire"),
        ("COTE D'IVOIRE", "Cote D'ivoire"),
        ("guinea-bissau", "Guinea-Bissau"),
        ("  usa ", "Usa"),
        ("", ""),
    ],
)
def test_title_country(query: str, expected: str) -> None:
    assert title_country(query) == expected


def test_format_summary_lines_in_order() -> None:
    stats = CountryStats(todayCases=10, recovered=5, deaths=1, cases=100)

    text = format_summary("nigeria", stats, now=FIXED_NOW)

    lines = text.split("\n")
    assert lines[0] == (
        "👋 Here's the summary of the Covid-19 cases in Nigeria "
        "as at Monday, 06-Apr-20 15:52:01 UTC"
    )
    assert lines[1] == ""
    assert lines[2:] == [
        "Today Cases: 10",
        "Recovered Cases: 5",
        "Deaths Recorded: 1",
        "Total Cases: 100",
    ]


def test_format_summary_uses_current_time_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("covid_sms.formatting.utcnow", lambda: FIXED_NOW)
    stats = CountryStats(todayCases=0, recovered=0, deaths=0, cases=0)

    text = format_summary("NIGERIA", stats)

    assert "in Nigeria as at Monday, 06-Apr-20 15:52:01 UTC" in text

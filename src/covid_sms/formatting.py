from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Final

from .stats import CountryStats

RFC850_FORMAT: Final[str] = "%A, %d-%b-%y %H:%M:%S %Z"

# A run of letters; an apostrophe inside a word does not start a new one.
_WORD_RE: Final[re.Pattern[str]] = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")


def utcnow() -> datetime:
    return datetime.now(UTC)


def rfc850(moment: datetime) -> str:
    """
    Format a datetime the RFC 850 way, e.g. "Monday, 15-Aug-05 15:52:01 UTC".

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.strftime(RFC850_FORMAT)


def title_country(query: str) -> str:
    """Title-case each word, e.g. cote d'ivoire -> Cote D'ivoire, guinea-bissau -> Guinea-Bissau."""
    return _WORD_RE.sub(lambda m: m.group(0).capitalize(), query.strip())


def format_summary(country: str, stats: CountryStats, now: datetime | None = None) -> str:
    """Build the SMS reply for a successful country lookup."""
    moment = now or utcnow()
    lines = [
        f"👋 Here's the summary of the Covid-19 cases in {title_country(country)} "
        f"as at {rfc850(moment)}",
        "",
        f"Today Cases: {stats.today_cases}",
        f"Recovered Cases: {stats.recovered}",
        f"Deaths Recorded: {stats.deaths}",
        f"Total Cases: {stats.cases}",
    ]
    return "\n".join(lines)

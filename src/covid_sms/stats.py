from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from requests.adapters import HTTPAdapter

from .config import Settings
from .errors import StatsDecodeError, StatsTransportError

logger = logging.getLogger(__name__)


class CountryStats(BaseModel):
    """Success shape of GET /countries/{country}; unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    today_cases: int = Field(alias="todayCases")
    recovered: int
    deaths: int
    cases: int


class StatsErrorReply(BaseModel):
    """Error shape: the API itself reports a problem (e.g. unknown country)."""

    message: str


StatsResult = CountryStats | StatsErrorReply


def decode_stats_payload(payload: Any) -> StatsResult:
    """
    Turn a parsed JSON payload into one of the two known shapes.

    The presence of a "message" key selects the error shape. Anything that
    does not validate as either raises StatsDecodeError.
    """
    if not isinstance(payload, dict):
        raise StatsDecodeError(f"expected a JSON object, got {type(payload).__name__}")

    try:
        if "message" in payload:
            return StatsErrorReply.model_validate(payload)
        return CountryStats.model_validate(payload)
    except ValidationError as exc:
        raise StatsDecodeError(f"unexpected stats payload: {exc}") from exc


def build_session() -> requests.Session:
    s = requests.Session()
    # No retries: one attempt per inbound SMS.
    adapter = HTTPAdapter(max_retries=0)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


class StatsClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or build_session()

    @classmethod
    def from_settings(cls, settings: Settings) -> StatsClient:
        return cls(settings.stats_base_url, timeout=settings.stats_timeout_seconds)

    def close(self) -> None:
        self.session.close()

    def country_url(self, country: str) -> str:
        # The raw body becomes exactly one path segment.
        return f"{self.base_url}/countries/{quote(country, safe='')}"

    def fetch_country(self, country: str) -> StatsResult:
        url = self.country_url(country)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise StatsTransportError(f"GET {url} failed: {exc}") from exc

        # Error payloads come back with 4xx codes, so the status is not checked
        # before decoding.
        try:
            payload = resp.json()
        except ValueError as exc:
            raise StatsDecodeError(
                f"GET {url} returned non-JSON body (status {resp.status_code})"
            ) from exc

        result = decode_stats_payload(payload)
        logger.info("stats lookup status=%s kind=%s", resp.status_code, type(result).__name__)
        return result

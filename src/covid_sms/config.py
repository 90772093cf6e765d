from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    return float(raw)


class Settings(BaseModel):
    # Hashable: main.py caches the shared clients per Settings value.
    model_config = ConfigDict(frozen=True)

    # --- Twilio settings for outbound SMS ---
    # Not validated here: a missing value only fails when a send is attempted.
    twilio_account_sid: str | None = Field(default_factory=lambda: os.getenv("TWILIO_ACCOUNT_SID"))
    twilio_auth_token: str | None = Field(default_factory=lambda: os.getenv("TWILIO_AUTH_TOKEN"))
    twilio_from_number: str | None = Field(default_factory=lambda: os.getenv("TWILIO_PHONE_NUMBER"))

    # --- Country statistics API ---
    stats_base_url: str = Field(
        default_factory=lambda: os.getenv("STATS_BASE_URL", "https://corona.lmao.ninja")
    )
    # None means no timeout at all (requests' default).
    stats_timeout_seconds: float | None = Field(
        default_factory=lambda: _optional_float("STATS_TIMEOUT_SECONDS")
    )

    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@lru_cache
def get_settings() -> Settings:
    return Settings()

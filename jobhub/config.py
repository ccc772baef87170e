from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env
load_dotenv()

DEFAULT_SITE_URL = "https://jobhub.example.com"
DEFAULT_API_ENDPOINT = "https://search.api.careerjet.net/v4/query"


class ConfigurationError(ValueError):
    """Raised when a setting required at call time is missing."""


@dataclass(frozen=True)
class Settings:
    careerjet_api_key: str | None
    careerjet_referer: str
    careerjet_endpoint: str
    careerjet_locale: str
    careerjet_page_size: int
    careerjet_timeout: float

    fallback_ip: str
    fallback_user_agent: str

    search_cache_ttl: int
    job_cache_ttl: int

    site_url: str
    ad_slot_id: str | None
    log_level: str

    def require_api_key(self) -> str: # API key or ConfigurationError, checked before any request
        if not self.careerjet_api_key:
            raise ConfigurationError(
                "Missing CAREERJET_API_KEY environment variable. Please set it in your environment."
            )
        return self.careerjet_api_key


def _optional_env(name: str) -> str | None: # empty strings count as unset
    value = os.getenv(name)
    if not value:
        return None
    return value.strip() or None


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer (got {value!r})") from exc


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a float (got {value!r})") from exc


def get_settings() -> Settings:
    site_url = (
        _optional_env("SITE_URL") or _optional_env("NEXT_PUBLIC_SITE_URL") or DEFAULT_SITE_URL
    ).rstrip("/")

    careerjet_referer = _optional_env("CAREERJET_REFERER") or site_url

    return Settings(
        careerjet_api_key=_optional_env("CAREERJET_API_KEY"),
        careerjet_referer=careerjet_referer,
        careerjet_endpoint=os.getenv("CAREERJET_API_ENDPOINT", DEFAULT_API_ENDPOINT),
        careerjet_locale=os.getenv("CAREERJET_LOCALE", "en_US"),
        careerjet_page_size=_parse_int(
            "CAREERJET_PAGE_SIZE", os.getenv("CAREERJET_PAGE_SIZE", "20")
        ),
        careerjet_timeout=_parse_float(
            "CAREERJET_TIMEOUT_SECONDS", os.getenv("CAREERJET_TIMEOUT_SECONDS", "10")
        ),
        fallback_ip=_optional_env("CAREERJET_FALLBACK_IP") or "8.8.8.8",
        fallback_user_agent=_optional_env("CAREERJET_FALLBACK_UA") or "JobHubBot/1.0",
        search_cache_ttl=_parse_int(
            "SEARCH_CACHE_TTL_SECONDS", os.getenv("SEARCH_CACHE_TTL_SECONDS", "600")
        ),
        job_cache_ttl=_parse_int(
            "JOB_CACHE_TTL_SECONDS", os.getenv("JOB_CACHE_TTL_SECONDS", "900")
        ),
        site_url=site_url,
        ad_slot_id=_optional_env("TINYADS_SLOT_ID") or _optional_env("NEXT_PUBLIC_TINYADS_SLOT_ID"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

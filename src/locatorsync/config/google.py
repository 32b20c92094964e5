"""Google Geocoding API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook

GOOGLE_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
GOOGLE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class GoogleGeocodingConfig:
    api_key: str
    resilience: ResilienceConfig


def get_google_geocoding_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
    cache_path: str | None = None,
) -> GoogleGeocodingConfig:
    values = require_env_vars(("GOOGLE_GEOCODE_API_KEY",))
    return GoogleGeocodingConfig(
        api_key=values["GOOGLE_GEOCODE_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="google-geocoding",
            timeout_seconds=GOOGLE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=CacheConfig(
                backend="sqlite" if cache_path else "memory",
                sqlite_path=cache_path,
                should_cache=cache_predicate,
            ),
        ),
    )

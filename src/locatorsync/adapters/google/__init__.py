"""Public interface for the Google Geocoding adapter."""

from __future__ import annotations

from .client import GoogleGeocoder, should_cache_geocode_payload
from .schema import GeocodeResponse

__all__ = ["GeocodeResponse", "GoogleGeocoder", "should_cache_geocode_payload"]

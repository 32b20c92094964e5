"""Pydantic models for the Google Geocoding API response."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GoogleBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class LatLng(GoogleBaseModel):
    lat: float
    lng: float


class Geometry(GoogleBaseModel):
    location: LatLng


class GeocodeResult(GoogleBaseModel):
    formatted_address: str | None = None
    geometry: Geometry


class GeocodeResponse(GoogleBaseModel):
    status: str
    results: list[GeocodeResult] = Field(default_factory=list["GeocodeResult"])
    error_message: str | None = None

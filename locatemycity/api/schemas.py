"""Pydantic response schemas for the REST API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ── Cities ────────────────────────────────────────────────────────────


class CityResponse(BaseModel):
    name: str
    latitude: float
    longitude: float
    country: Optional[str] = None
    state: Optional[str] = None

    # source files may carry extra descriptive fields; pass them through
    model_config = {"extra": "allow"}


class NearbyCityResponse(CityResponse):
    distance_miles: float = Field(..., alias="distanceMiles")

    model_config = {"extra": "allow", "populate_by_name": True}


class DistanceBandResponse(BaseModel):
    target_miles: float = Field(..., alias="targetMiles")
    epsilon: float
    results: list[NearbyCityResponse] = []

    model_config = {"populate_by_name": True}


# ── Status ────────────────────────────────────────────────────────────


class DatasetStatsResponse(BaseModel):
    total: int
    states: Optional[int] = None


class LoadErrorResponse(BaseModel):
    source: str
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    datasets: dict[str, int] = {}
    load_errors: list[LoadErrorResponse] = Field([], alias="loadErrors")

    model_config = {"populate_by_name": True}


class PingResponse(BaseModel):
    message: str = "Backend is running!"


class ErrorResponse(BaseModel):
    error: str

"""
City list and proximity endpoints
=================================

GET /api/cities        -- the flat worldwide city list
GET /api/cities/near   -- cities within ``radiusMiles`` of a point, nearest first
GET /api/cities/exact  -- cities ``miles`` +/- ``epsilon`` away, closest to target first
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from locatemycity.api.dependencies import get_engine, get_store
from locatemycity.api.middleware import limiter
from locatemycity.api.schemas import (
    CityResponse,
    DistanceBandResponse,
    ErrorResponse,
    NearbyCityResponse,
)
from locatemycity.config import settings
from locatemycity.domain.proximity import ProximityEngine
from locatemycity.domain.validation import parse_exact_query, parse_near_query
from locatemycity.infrastructure.repositories import DatasetStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cities", tags=["cities"])

_BAD_REQUEST = {400: {"model": ErrorResponse, "description": "Invalid query parameter"}}


@router.get(
    "",
    response_model=list[CityResponse],
    response_model_exclude_none=True,
    summary="List all cities",
)
async def list_cities(store: DatasetStore = Depends(get_store)):
    return [CityResponse.model_validate(c.to_dict()) for c in store.get_flat_cities()]


@router.get(
    "/near",
    response_model=list[NearbyCityResponse],
    response_model_exclude_none=True,
    summary="Cities within a radius",
    responses=_BAD_REQUEST,
)
@limiter.limit(settings.rate_limit)
async def cities_near(
    request: Request,
    lat: Optional[str] = Query(None, description="Centre latitude in degrees"),
    lon: Optional[str] = Query(None, description="Centre longitude in degrees"),
    radius_miles: Optional[str] = Query(
        None,
        alias="radiusMiles",
        description=f"Search radius in miles (default {settings.default_radius_miles:g})",
    ),
    engine: ProximityEngine = Depends(get_engine),
):
    query = parse_near_query(lat, lon, radius_miles)
    matches = engine.within_radius(query.lat, query.lon, query.radius_miles)
    logger.debug(
        "near(%.5f, %.5f, r=%g) -> %d cities",
        query.lat,
        query.lon,
        query.radius_miles,
        len(matches),
    )
    return [NearbyCityResponse.model_validate(m.to_dict()) for m in matches]


@router.get(
    "/exact",
    response_model=DistanceBandResponse,
    response_model_exclude_none=True,
    summary="Cities at a given distance",
    description=(
        "Returns cities whose distance from the point lies within "
        "``[max(0, miles - epsilon), miles + epsilon]``, ordered by how close "
        "they are to ``miles``."
    ),
    responses=_BAD_REQUEST,
)
@limiter.limit(settings.rate_limit)
async def cities_exact(
    request: Request,
    lat: Optional[str] = Query(None, description="Centre latitude in degrees"),
    lon: Optional[str] = Query(None, description="Centre longitude in degrees"),
    miles: Optional[str] = Query(None, description="Target distance in miles"),
    epsilon: Optional[str] = Query(
        None,
        description=f"Tolerance in miles (default {settings.default_epsilon_miles:g})",
    ),
    engine: ProximityEngine = Depends(get_engine),
):
    query = parse_exact_query(lat, lon, miles, epsilon)
    band = engine.within_band(
        query.lat, query.lon, query.target_miles, query.epsilon
    )
    logger.debug(
        "exact(%.5f, %.5f, [%g, %g]) -> %d cities",
        query.lat,
        query.lon,
        band.min_miles,
        band.max_miles,
        len(band.results),
    )
    return DistanceBandResponse(
        target_miles=band.target_miles,
        epsilon=band.epsilon,
        results=[NearbyCityResponse.model_validate(m.to_dict()) for m in band.results],
    )

"""
Status / observability endpoints
================================

GET /api/stats   -- per-dataset totals and state counts
GET /api/states  -- rock-city states, same as /api/locations/states
GET /api/health  -- dataset sizes and any load errors from startup
GET /ping        -- liveness check
"""

from fastapi import APIRouter, Depends

from locatemycity.api.dependencies import get_store
from locatemycity.api.schemas import (
    DatasetStatsResponse,
    HealthResponse,
    LoadErrorResponse,
    PingResponse,
)
from locatemycity.domain.enums import STATS_KEYS, DatasetName
from locatemycity.infrastructure.repositories import DatasetStore

router = APIRouter(tags=["status"])
ping_router = APIRouter(tags=["status"])


@router.get(
    "/stats",
    response_model=dict[str, DatasetStatsResponse],
    response_model_exclude_none=True,
    summary="Combined dataset statistics",
)
async def get_stats(store: DatasetStore = Depends(get_store)):
    result = {
        STATS_KEYS[name]: DatasetStatsResponse(total=s.total, states=s.states)
        for name, s in store.stats().items()
    }
    result["cities"] = DatasetStatsResponse(total=len(store.get_flat_cities()))
    return result


@router.get(
    "/states",
    response_model=list[str],
    summary="Sorted states of the rock-city dataset",
)
async def rock_states(store: DatasetStore = Depends(get_store)):
    return store.get_group_keys(DatasetName.ROCK)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(store: DatasetStore = Depends(get_store)):
    datasets = {name.value: len(ds) for name, ds in store.grouped.items()}
    datasets["cities"] = len(store.get_flat_cities())
    return HealthResponse(
        status="ok" if store.healthy else "degraded",
        datasets=datasets,
        load_errors=[
            LoadErrorResponse(source=e.source, message=e.message)
            for e in store.load_errors
        ],
    )


@ping_router.get("/ping", response_model=PingResponse, summary="Liveness check")
async def ping():
    return PingResponse()

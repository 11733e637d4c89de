"""
State-grouped dataset endpoints
===============================

One router per dataset, all built by ``build_grouped_router``:

GET {prefix}          -- the dataset in its source shape
GET {prefix}/flat     -- every city, each carrying its ``state``
GET {prefix}/states   -- sorted state keys
GET {prefix}/{state}  -- cities of one state (``[]`` when unknown)
"""

from __future__ import annotations

from typing import Iterable, Union

from fastapi import APIRouter, Depends

from locatemycity.api.dependencies import get_store
from locatemycity.api.schemas import CityResponse
from locatemycity.domain.entities import CityRecord
from locatemycity.domain.enums import DatasetName
from locatemycity.infrastructure.repositories import DatasetStore

# Mount point under /api for each dataset
DATASET_PREFIXES: dict[DatasetName, str] = {
    DatasetName.ROCK: "/locations",
    DatasetName.SPRING: "/springs",
    DatasetName.COLOR: "/colors",
    DatasetName.OLD: "/old",
}


def _cities(records: Iterable[CityRecord]) -> list[CityResponse]:
    return [CityResponse.model_validate(r.to_dict()) for r in records]


def build_grouped_router(dataset: DatasetName, prefix: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[f"{dataset.value} cities"])

    @router.get(
        "",
        response_model=Union[list[CityResponse], dict[str, list[CityResponse]]],
        response_model_exclude_none=True,
        summary=f"List {dataset.value} cities",
    )
    async def list_dataset(store: DatasetStore = Depends(get_store)):
        listing = store.get_grouped_dataset(dataset).listing()
        if isinstance(listing, dict):
            return {state: _cities(members) for state, members in listing.items()}
        return _cities(listing)

    @router.get(
        "/flat",
        response_model=list[CityResponse],
        response_model_exclude_none=True,
        summary=f"List {dataset.value} cities as a flat array",
    )
    async def flatten_dataset(store: DatasetStore = Depends(get_store)):
        return _cities(store.get_grouped_dataset(dataset).flatten())

    @router.get(
        "/states",
        response_model=list[str],
        summary=f"List states with {dataset.value} cities",
    )
    async def list_states(store: DatasetStore = Depends(get_store)):
        return store.get_group_keys(dataset)

    @router.get(
        "/{state}",
        response_model=list[CityResponse],
        response_model_exclude_none=True,
        summary=f"List {dataset.value} cities in one state",
    )
    async def get_state(state: str, store: DatasetStore = Depends(get_store)):
        return _cities(store.get_group(dataset, state))

    return router


routers = [build_grouped_router(name, prefix) for name, prefix in DATASET_PREFIXES.items()]

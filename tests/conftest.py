"""
Shared test fixtures.

Stores are assembled in memory with ``DatasetStore.build`` so API tests run
without touching the files under ``data/``.  Loader tests write their own
JSON into ``tmp_path``.
"""

import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, AsyncIterator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from locatemycity.api.app import create_app
from locatemycity.api.middleware import limiter
from locatemycity.domain.entities import CityRecord, GroupedDataset
from locatemycity.domain.enums import DatasetName
from locatemycity.infrastructure.repositories import DatasetStore


# ── Sample data ───────────────────────────────────────────────────────


@pytest.fixture
def flat_cities() -> tuple[CityRecord, ...]:
    """A on the equator/meridian, B one degree east, Z far away."""
    return (
        CityRecord(name="A", latitude=0.0, longitude=0.0, country="Testland"),
        CityRecord(name="B", latitude=0.0, longitude=1.0, country="Testland"),
        CityRecord(name="Z", latitude=45.0, longitude=45.0, country="Farland"),
    )


@pytest.fixture
def spring_dataset() -> GroupedDataset:
    return GroupedDataset.from_groups(
        "spring",
        {
            "Colorado": [
                CityRecord("Colorado Springs", 38.8339, -104.8214),
                CityRecord("Glenwood Springs", 39.5505, -107.3248),
            ],
            "Arkansas": [CityRecord("Hot Springs", 34.5037, -93.0552)],
        },
    )


@pytest.fixture
def rock_dataset() -> GroupedDataset:
    return GroupedDataset.from_records(
        "rock",
        [
            CityRecord("Little Rock", 34.7465, -92.2896, state="Arkansas"),
            CityRecord("Round Rock", 30.5083, -97.6789, state="Texas"),
            CityRecord("Rockford", 42.2711, -89.0940, state="Illinois"),
            CityRecord("Rock Island", 41.5095, -90.5787, state="Illinois"),
        ],
    )


@pytest.fixture
def store(flat_cities, spring_dataset, rock_dataset) -> DatasetStore:
    return DatasetStore.build(
        cities=flat_cities,
        grouped={DatasetName.SPRING: spring_dataset, DatasetName.ROCK: rock_dataset},
    )


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write *payload* as JSON to ``tmp_path / name`` and return the path."""

    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


# ── Clients ───────────────────────────────────────────────────────────


@asynccontextmanager
async def _client_for(store: DatasetStore) -> AsyncIterator[AsyncClient]:
    limiter.reset()
    app = create_app(store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def client(store: DatasetStore) -> AsyncGenerator[AsyncClient, None]:
    async with _client_for(store) as ac:
        yield ac


@pytest_asyncio.fixture
async def empty_client() -> AsyncGenerator[AsyncClient, None]:
    async with _client_for(DatasetStore.build()) as ac:
        yield ac

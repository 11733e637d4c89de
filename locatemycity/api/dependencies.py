"""FastAPI dependency injection helpers."""

from fastapi import Request

from locatemycity.domain.proximity import ProximityEngine
from locatemycity.infrastructure.repositories import DatasetStore


def get_store(request: Request) -> DatasetStore:
    """Return the dataset store built when the app was created."""
    return request.app.state.store


def get_engine(request: Request) -> ProximityEngine:
    return request.app.state.engine

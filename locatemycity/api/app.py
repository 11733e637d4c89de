"""
FastAPI application factory.

* Loads every dataset once, before the app can serve a request.
* Registers routes for the city list, proximity queries, the grouped
  datasets and status.
* Applies rate-limiting to the proximity endpoints and a CORS allow-list.
* Swagger / OpenAPI UI available at ``/docs``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from locatemycity.api.middleware import limiter
from locatemycity.api.routes import cities, grouped, status
from locatemycity.config import settings
from locatemycity.domain.proximity import ProximityEngine
from locatemycity.domain.validation import InvalidParameter
from locatemycity.infrastructure.repositories import DatasetStore

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)


async def invalid_parameter_handler(request: Request, exc: InvalidParameter):
    """Convert query validation errors into 400 responses."""
    return JSONResponse(status_code=400, content={"error": str(exc)})


def create_app(store: Optional[DatasetStore] = None) -> FastAPI:
    if store is None:
        store = DatasetStore.from_settings(settings)

    app = FastAPI(
        title="LocateMyCity API",
        description=(
            "Read-only lookup of US city classifications (rock, spring, "
            "color, old) and great-circle proximity search over a worldwide "
            "city list."
        ),
        version="1.0.0",
    )

    # Datasets are immutable from here on
    app.state.store = store
    app.state.engine = ProximityEngine(store.get_flat_cities())

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(InvalidParameter, invalid_parameter_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(cities.router, prefix="/api")
    for router in grouped.routers:
        app.include_router(router, prefix="/api")
    app.include_router(status.router, prefix="/api")
    app.include_router(status.ping_router)

    logger.info(
        "App ready: %d cities, %d load error(s)",
        len(app.state.engine),
        len(store.load_errors),
    )
    return app

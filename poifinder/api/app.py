"""
FastAPI application factory.

* Creates one empty entity store per kind on ``app.state.stores``.
* Loads the first snapshot and starts / stops the refresher via lifespan
  events.  If that first load fails the API still starts and answers 503
  until a later cycle succeeds.
* Maps ``DataUnavailable`` to 503 and applies rate-limiting.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from poifinder.api.middleware import limiter
from poifinder.api.routes import admin, search
from poifinder.config import settings
from poifinder.domain.store import DataUnavailable, build_stores
from poifinder.workers import refresher as _refresher

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load snapshots and start the refresher on startup; stop on shutdown."""
    try:
        await _refresher.run_refresh_cycle(app.state.stores, force=True)
    except Exception:
        logger.exception("Initial snapshot load failed; serving 503 until refreshed")
    await _refresher.start_refresh_loop(app.state.stores)
    yield
    await _refresher.stop_refresh_loop()


async def _data_unavailable_handler(
    request: Request, exc: DataUnavailable
) -> JSONResponse:
    logger.warning("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Nearby POI Finder API",
        description=(
            "Finds fuel stations and parking lots around a point and ranks "
            "them by price, distance, or net savings after travel cost."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.stores = build_stores(settings.h3_resolution, settings.h3_max_ring)

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(DataUnavailable, _data_unavailable_handler)

    # Routers
    app.include_router(search.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app

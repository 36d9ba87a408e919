from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from mangum import Mangum

from countryscope.config import get_settings
from countryscope.exceptions import (
    CountryNotFoundError,
    DependencyFailureError,
    UpstreamError,
)
from countryscope.http_client import shutdown_http_client
from countryscope.models import CountryDetail, CountrySummary, NewsPage
from countryscope.services import CountryAggregator, CountryService

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("countryscope.api")

app = FastAPI(
    title="CountryScope API",
    version="0.1.0",
    description=(
        "Country search with capital weather history and a paginated news feed, "
        "aggregated from public providers."
    ),
    default_response_class=ORJSONResponse,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_country_service() -> CountryService:
    return CountryService()


def get_aggregator() -> CountryAggregator:
    return CountryAggregator()


def _missing_id() -> ORJSONResponse:
    return ORJSONResponse({"error": "Country ID is required"}, status_code=400)


@app.exception_handler(CountryNotFoundError)
async def country_not_found(request: Request, exc: CountryNotFoundError):
    return ORJSONResponse(
        {"error": "Country not found", "code": exc.code}, status_code=404
    )


@app.exception_handler(DependencyFailureError)
async def dependency_failure(request: Request, exc: DependencyFailureError):
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return ORJSONResponse(
        {"error": str(exc), "stage": exc.stage.value}, status_code=500
    )


@app.exception_handler(UpstreamError)
async def upstream_failure(request: Request, exc: UpstreamError):
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return ORJSONResponse(
        {"error": "Upstream provider request failed", "provider": exc.provider},
        status_code=500,
    )


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.get(
    "/countries/search", tags=["countries"], response_model=list[CountrySummary]
)
async def search_countries(
    q: str = Query("", description="Free-text country name, at least 2 characters"),
    service: CountryService = Depends(get_country_service),
):
    return await service.search_by_name(q)


@app.get("/country", tags=["countries"], include_in_schema=False)
@app.get("/country/", tags=["countries"], include_in_schema=False)
@app.get("/country//news", tags=["news"], include_in_schema=False)
async def country_without_id():
    return _missing_id()


@app.get("/country/{id}", tags=["countries"], response_model=CountryDetail)
async def country_detail(
    id: str,
    aggregator: CountryAggregator = Depends(get_aggregator),
):
    if not id.strip():
        return _missing_id()
    return await aggregator.country_detail(id.strip().lower())


@app.get("/country/{id}/news", tags=["news"], response_model=NewsPage)
async def country_news(
    id: str,
    page: str | None = Query(
        None, description="Cursor returned as nextCursor by the previous page"
    ),
    aggregator: CountryAggregator = Depends(get_aggregator),
):
    if not id.strip():
        return _missing_id()
    return await aggregator.country_news(id.strip().lower(), page or None)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await shutdown_http_client()


handler = Mangum(app)

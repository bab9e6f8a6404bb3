from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
import uuid

from app.core.config import settings
from app.core.errors import InvalidFilter, StorageUnavailable
from app.schemas.resources import ErrorResponse, ResultPage
from app.services.meta_service import get_filter_metadata
from app.services.search_engine import parse_filter_params, search
from app.storage.base import CatalogStore
from app.storage.factory import build_catalog_store

from app.reliability.health_check import run_readiness_check, ReadinessResponse
from app.reliability.logger import service_logger


_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    global _store

    if _store is None:
        _store = build_catalog_store(settings)
    return _store


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    global _store
    if _store is not None:
        await _store.aclose()
        _store = None


app = FastAPI(title="Resource Catalog Search Service", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.perf_counter()
    request_id = str(uuid.uuid4())
    # Attach request ID to state for logging
    request.state.request_id = request_id

    response: Response = await call_next(request)

    process_time = time.perf_counter() - start_time
    service_logger.log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=process_time * 1000,
        request_id=request_id
    )
    response.headers["X-Process-Time"] = str(process_time)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(InvalidFilter)
async def invalid_filter_handler(request: Request, exc: InvalidFilter) -> JSONResponse:
    service_logger.log_rejected_filter(
        exc.message,
        field=exc.field,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=400, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed query parameters are reported the same way as invalid filter values.
    first = exc.errors()[0] if exc.errors() else {}
    loc = first.get("loc") or ()
    field = str(loc[-1]) if loc else None
    error = InvalidFilter(first.get("msg", "Invalid request parameters."), field=field)
    return await invalid_filter_handler(request, error)


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable) -> JSONResponse:
    service_logger.log_error(
        exc.message,
        error=exc,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=503, content=exc.to_dict())


@app.get("/health", tags=["meta"])
def health() -> dict:
    return {"status": "ok"}


@app.get("/health/live", tags=["meta"])
def health_live() -> dict:
    return {"status": "ok"}


@app.get("/health/ready", response_model=ReadinessResponse, tags=["meta"])
async def health_ready(store: CatalogStore = Depends(get_catalog_store)) -> ReadinessResponse:
    return await run_readiness_check(store)


@app.get("/api/v1/meta/filters", tags=["meta"])
async def meta_filters(store: CatalogStore = Depends(get_catalog_store)) -> dict:
    """Returns filter options (categories, platforms, sort keys, page sizes)."""
    return await get_filter_metadata(store)


_error_responses = {
    400: {"model": ErrorResponse, "description": "Invalid filter"},
    503: {"model": ErrorResponse, "description": "Catalog storage unavailable"},
}


@app.get("/resources", response_model=ResultPage, responses=_error_responses, tags=["resources"])
@app.get("/api/v1/resources", response_model=ResultPage, responses=_error_responses, tags=["resources"])
async def list_resources(
    search_text: Optional[str] = Query(default=None, alias="search"),
    category: Optional[str] = Query(default=None, description="Category slug."),
    platform: Optional[str] = Query(default=None),
    tags: Optional[str] = Query(default=None, description="Comma-separated required tags."),
    sort: Optional[str] = Query(default=None, description="recency, downloads, likes or alphabetical."),
    page: int = Query(default=1),
    page_size: Optional[int] = Query(default=None, alias="pageSize"),
    store: CatalogStore = Depends(get_catalog_store),
) -> ResultPage:
    spec = parse_filter_params(
        search=search_text,
        category=category,
        platform=platform,
        tags=tags,
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return await search(spec, store)

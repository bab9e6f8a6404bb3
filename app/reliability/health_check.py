from __future__ import annotations
from pydantic import BaseModel
from typing import Dict

from app.core.errors import StorageUnavailable
from app.storage.base import CatalogStore


class DependencyStatus(BaseModel):
    status: str
    details: str | None = None


class ReadinessResponse(BaseModel):
    status: str
    dependencies: Dict[str, DependencyStatus]


async def check_catalog_status(store: CatalogStore) -> DependencyStatus:
    try:
        count = 0
        async for _ in store.list_categories():
            count += 1
    except StorageUnavailable as e:
        return DependencyStatus(status="error", details=str(e))
    return DependencyStatus(
        status="ok", details=f"{store.name} store reachable ({count} categories)"
    )


def check_breaker_status(store: CatalogStore) -> DependencyStatus | None:
    breaker = getattr(store, "breaker", None)
    if breaker is None:
        return None
    return DependencyStatus(
        status=breaker.state.value,
        details=f"{breaker.failure_count} consecutive failures",
    )


async def run_readiness_check(store: CatalogStore) -> ReadinessResponse:
    catalog_status = await check_catalog_status(store)
    dependencies = {"catalog": catalog_status}

    breaker_status = check_breaker_status(store)
    if breaker_status is not None:
        dependencies["storage_circuit"] = breaker_status

    total_status = "ready"
    if catalog_status.status == "error":
        total_status = "not_ready"

    return ReadinessResponse(status=total_status, dependencies=dependencies)

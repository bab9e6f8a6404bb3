"""
Materialize the catalog store into a Polars frame for filtering and ranking.

The frame carries only the columns the predicates and comparators need,
plus `_row`, the position of the source `Resource` so that the page slice
can be mapped back to the validated models without a round trip through
Polars types.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Tuple

import polars as pl

from app.schemas.resources import Category, Resource
from app.storage.base import CatalogStore


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

RESOURCE_SCHEMA = {
    "_row": pl.Int64,
    "id": pl.Utf8,
    "title": pl.Utf8,
    "description": pl.Utf8,
    "tags": pl.List(pl.Utf8),
    "category_id": pl.Utf8,
    "platform": pl.Utf8,
    "download_count": pl.Int64,
    "like_count": pl.Int64,
    "created_ts": pl.Int64,
}


def _epoch_micros(ts: datetime) -> int:
    # Integer microseconds keep the ordering exact across time zones.
    return (ts - _EPOCH) // timedelta(microseconds=1)


def resources_to_frame(resources: List[Resource]) -> pl.DataFrame:
    rows = [
        {
            "_row": idx,
            "id": r.id,
            "title": r.title,
            "description": r.description,
            "tags": list(r.tags),
            "category_id": r.category_id,
            "platform": r.platform.value,
            "download_count": r.download_count,
            "like_count": r.like_count,
            "created_ts": _epoch_micros(r.created_at),
        }
        for idx, r in enumerate(resources)
    ]
    return pl.DataFrame(rows, schema=RESOURCE_SCHEMA)


async def load_categories(store: CatalogStore) -> List[Category]:
    return [category async for category in store.list_categories()]


async def load_resource_frame(store: CatalogStore) -> Tuple[List[Resource], pl.DataFrame]:
    """Read every resource from the store and return (resources, frame)."""
    resources = [resource async for resource in store.list_resources()]
    return resources, resources_to_frame(resources)

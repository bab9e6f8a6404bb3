from __future__ import annotations
from typing import Dict, Any
from app.core.config import settings
from app.schemas.resources import Platform, SortKey
from app.services.catalog_loader import load_categories
from app.storage.base import CatalogStore


async def get_filter_metadata(store: CatalogStore) -> Dict[str, Any]:
    """
    Filter options for the browse UI: categories (by name), platforms,
    sort keys and page size limits.
    """
    categories = await load_categories(store)
    categories = sorted(categories, key=lambda c: (c.name.lower(), c.id))

    return {
        "categories": [
            {"slug": c.slug, "name": c.name, "platform": c.platform}
            for c in categories
        ],
        "platforms": [p.value for p in Platform],
        "sortKeys": [s.value for s in SortKey],
        "defaultPageSize": settings.DEFAULT_PAGE_SIZE,
        "maxPageSize": settings.MAX_PAGE_SIZE,
    }

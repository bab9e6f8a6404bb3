from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from app.core.config import settings
from app.core.errors import InvalidFilter
from app.schemas.resources import Category, FilterSpec, Platform, ResultPage, SortKey
from app.services.catalog_loader import load_categories, load_resource_frame
from app.services.facet_service import build_facets
from app.services.filtering_engine import filter_resources
from app.services.ranking_engine import paginate, rank_resources
from app.storage.base import CatalogStore


logger = logging.getLogger(__name__)

# Sort values used by the original explore page.
SORT_ALIASES = {
    "created_at": SortKey.RECENCY,
    "title": SortKey.ALPHABETICAL,
}


def _parse_platform(value: Optional[str]) -> Optional[Platform]:
    if value is None or not value.strip():
        return None
    try:
        return Platform(value.strip().lower())
    except ValueError:
        allowed = ", ".join(p.value for p in Platform)
        raise InvalidFilter(
            f"Unknown platform '{value}'. Expected one of: {allowed}.", field="platform"
        ) from None


def _parse_sort_key(value: Optional[str]) -> SortKey:
    if value is None or not value.strip():
        return SortKey.RECENCY
    key = value.strip().lower()
    if key in SORT_ALIASES:
        return SORT_ALIASES[key]
    try:
        return SortKey(key)
    except ValueError:
        allowed = ", ".join(s.value for s in SortKey)
        raise InvalidFilter(
            f"Unknown sort key '{value}'. Expected one of: {allowed}.", field="sort"
        ) from None


def parse_filter_params(
    search: Optional[str] = None,
    category: Optional[str] = None,
    platform: Optional[str] = None,
    tags: Optional[str] = None,
    sort: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
) -> FilterSpec:
    """Build a FilterSpec from raw request parameters (tags comma-separated)."""
    tag_list = [t.strip() for t in tags.split(",")] if tags else []
    return FilterSpec(
        search_text=search or None,
        category_slug=(category or "").strip() or None,
        platform=_parse_platform(platform),
        tags=frozenset(t for t in tag_list if t),
        sort_key=_parse_sort_key(sort),
        page=page,
        page_size=page_size if page_size is not None else settings.DEFAULT_PAGE_SIZE,
    )


def validate_window(spec: FilterSpec, max_page_size: int) -> None:
    if spec.page < 1:
        raise InvalidFilter(f"page must be >= 1 (got {spec.page}).", field="page")
    if not 1 <= spec.page_size <= max_page_size:
        raise InvalidFilter(
            f"pageSize must be between 1 and {max_page_size} (got {spec.page_size}).",
            field="pageSize",
        )


def resolve_category(slug: Optional[str], categories: Iterable[Category]) -> Optional[str]:
    """Map a category slug to its id. Unknown slugs are rejected, not ignored."""
    if not slug:
        return None
    for category in categories:
        if category.slug == slug:
            return category.id
    raise InvalidFilter(f"Unknown category '{slug}'.", field="category")


async def search(
    spec: FilterSpec,
    store: CatalogStore,
    max_page_size: Optional[int] = None,
) -> ResultPage:
    """
    Evaluate `spec` against the current catalog snapshot.

    Pipeline: validate -> predicate -> sort -> paginate. `total_matched` and
    facets are computed from the same filtered frame the page is sliced from.
    Storage errors propagate unchanged; an empty match is a valid result.
    """
    validate_window(spec, max_page_size or settings.MAX_PAGE_SIZE)

    categories: List[Category] = await load_categories(store)
    category_id = resolve_category(spec.category_slug, categories)

    resources, frame = await load_resource_frame(store)

    matched = filter_resources(frame, spec, category_id)
    ranked = rank_resources(matched, spec.sort_key)
    window = paginate(ranked, spec.page, spec.page_size)

    items = [resources[idx] for idx in window.get_column("_row").to_list()]

    logger.info(
        "search matched %d of %d resources (sort=%s, page=%d, page_size=%d)",
        matched.height,
        frame.height,
        spec.sort_key.value,
        spec.page,
        spec.page_size,
    )

    return ResultPage(
        items=items,
        total_matched=matched.height,
        page=spec.page,
        page_size=spec.page_size,
        facets=build_facets(matched, categories),
    )

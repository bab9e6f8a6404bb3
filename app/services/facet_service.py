from __future__ import annotations

from typing import Iterable, List

import polars as pl

from app.schemas.resources import Category, FacetCounts, FacetValue


def _to_facet_values(counts: pl.DataFrame, column: str) -> List[FacetValue]:
    ordered = counts.sort(["count", column], descending=[True, False])
    return [
        FacetValue(value=row[column], count=row["count"])
        for row in ordered.to_dicts()
    ]


def build_facets(matched: pl.DataFrame, categories: Iterable[Category]) -> FacetCounts:
    """
    Count matched resources per category slug, platform and tag.

    Counts are taken over the full matched set, before pagination.
    Resources whose category is unknown are left out of the category facet.
    """
    categories = list(categories)
    slugs = pl.DataFrame(
        {
            "category_id": [c.id for c in categories],
            "slug": [c.slug for c in categories],
        },
        schema={"category_id": pl.Utf8, "slug": pl.Utf8},
    )

    category_counts = (
        matched.join(slugs, on="category_id", how="inner")
        .group_by("slug")
        .agg(pl.len().alias("count"))
    )

    platform_counts = matched.group_by("platform").agg(pl.len().alias("count"))

    tag_counts = (
        matched.select(pl.col("tags").explode())
        .drop_nulls()
        .group_by("tags")
        .agg(pl.len().alias("count"))
    )

    return FacetCounts(
        categories=_to_facet_values(category_counts, "slug"),
        platforms=_to_facet_values(platform_counts, "platform"),
        tags=_to_facet_values(tag_counts, "tags"),
    )

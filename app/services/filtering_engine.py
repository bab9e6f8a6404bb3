from __future__ import annotations

from typing import Optional

import polars as pl

from app.schemas.resources import FilterSpec


def normalize_search_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.lower()


def build_predicate(spec: FilterSpec, category_id: Optional[str] = None) -> pl.Expr:
    """
    Compose the conjunction of all active filter predicates.

    Predicates:
    - text (case-insensitive substring of title or description)
    - category (exact match on the resolved category id)
    - platform (exact match)
    - tags (every requested tag present, case-sensitive)

    Inactive dimensions contribute nothing, so an empty spec matches all rows.
    """
    mask = pl.lit(True)

    # Text filter (substring match, not tokenized).
    text = normalize_search_text(spec.search_text)
    if text:
        title_match = (
            pl.col("title").str.to_lowercase().str.contains(text, literal=True).fill_null(False)
        )
        description_match = (
            pl.col("description")
            .str.to_lowercase()
            .str.contains(text, literal=True)
            .fill_null(False)
        )
        mask = mask & (title_match | description_match)

    if category_id is not None:
        mask = mask & (pl.col("category_id") == category_id).fill_null(False)

    if spec.platform is not None:
        mask = mask & (pl.col("platform") == spec.platform.value)

    # Tag filter (AND semantics). Sorted so the plan is identical across runs.
    for tag in sorted(spec.tags):
        mask = mask & pl.col("tags").list.contains(tag).fill_null(False)

    return mask


def filter_resources(
    df: pl.DataFrame,
    spec: FilterSpec,
    category_id: Optional[str] = None,
) -> pl.DataFrame:
    return df.filter(build_predicate(spec, category_id))

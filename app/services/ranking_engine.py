from __future__ import annotations

from typing import Dict, List, Tuple

import polars as pl

from app.schemas.resources import SortKey


# Newest first, ids descending to break same-timestamp ties.
_RECENCY = [pl.col("created_ts"), pl.col("id")]

SORT_ORDERS: Dict[SortKey, Tuple[List[pl.Expr], List[bool]]] = {
    SortKey.RECENCY: (_RECENCY, [True, True]),
    SortKey.DOWNLOADS: ([pl.col("download_count"), *_RECENCY], [True, True, True]),
    SortKey.LIKES: ([pl.col("like_count"), *_RECENCY], [True, True, True]),
    SortKey.ALPHABETICAL: (
        [pl.col("title").str.to_lowercase(), pl.col("id")],
        [False, False],
    ),
}


def rank_resources(df: pl.DataFrame, sort_key: SortKey) -> pl.DataFrame:
    """
    Order resources by `sort_key`.

    Every order ends on `id`, so the result is a total order and repeated
    calls over the same rows return the same sequence.
    """
    by, descending = SORT_ORDERS[sort_key]
    return df.sort(by, descending=descending)


def paginate(df: pl.DataFrame, page: int, page_size: int) -> pl.DataFrame:
    """Return rows `[(page-1)*page_size, page*page_size)`; empty past the end."""
    offset = (page - 1) * page_size
    if offset >= df.height:
        return df.clear()
    return df.slice(offset, page_size)

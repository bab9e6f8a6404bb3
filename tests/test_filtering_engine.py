from __future__ import annotations

import polars as pl

from app.schemas.resources import FilterSpec, Platform
from app.services.catalog_loader import resources_to_frame
from app.services.filtering_engine import filter_resources, normalize_search_text
from tests.catalog_fixtures import sample_resources


def _ids(df: pl.DataFrame) -> set[str]:
    return set(df.get_column("id").to_list())


def _frame() -> pl.DataFrame:
    return resources_to_frame(sample_resources())


def test_empty_spec_matches_everything():
    df = _frame()
    assert filter_resources(df, FilterSpec()).height == df.height


def test_text_filter_is_case_insensitive_over_title_and_description():
    df = _frame()

    # "a" matches on title, "c" on its description ("SKY").
    assert _ids(filter_resources(df, FilterSpec(search_text="sKy"))) == {"a", "c"}
    assert _ids(filter_resources(df, FilterSpec(search_text="disk util"))) == {"e"}


def test_text_filter_is_a_literal_substring_match():
    df = _frame()
    assert filter_resources(df, FilterSpec(search_text=".*")).height == 0


def test_empty_search_text_is_not_a_filter():
    df = _frame()
    assert normalize_search_text("") == ""
    assert normalize_search_text(None) == ""
    assert filter_resources(df, FilterSpec(search_text="")).height == df.height


def test_padded_search_text_is_matched_as_given():
    df = _frame()

    # Only "c" has " sky" in its description; "Sky Game" starts with "sky".
    matched = filter_resources(df, FilterSpec(search_text=" sKy"))
    assert _ids(matched) == {"c"}
    for row in matched.to_dicts():
        assert " sky" in row["title"].lower() or " sky" in row["description"].lower()

    assert filter_resources(df, FilterSpec(search_text="   ")).height == 0


def test_tag_filter_requires_every_tag():
    df = _frame()

    assert _ids(filter_resources(df, FilterSpec(tags={"productivity"}))) == {"b", "c"}
    assert _ids(filter_resources(df, FilterSpec(tags={"productivity", "Sync"}))) == {"c"}
    assert _ids(filter_resources(df, FilterSpec(tags={"adventure", "productivity"}))) == set()


def test_tag_filter_is_case_sensitive():
    df = _frame()
    assert filter_resources(df, FilterSpec(tags={"sync"})).height == 0


def test_platform_and_category_are_exact_matches():
    df = _frame()

    assert _ids(filter_resources(df, FilterSpec(platform=Platform.ANDROID))) == {"b"}
    assert _ids(filter_resources(df, FilterSpec(), category_id="cat-games")) == {"a", "d"}


def test_dimensions_are_combined_with_and():
    df = _frame()
    spec = FilterSpec(search_text="sky", platform=Platform.IOS, tags={"productivity"})

    assert _ids(filter_resources(df, spec, category_id="cat-apps")) == {"c"}
    assert filter_resources(df, spec, category_id="cat-games").height == 0


def test_filtering_an_empty_catalog():
    df = resources_to_frame([])
    spec = FilterSpec(search_text="sky", tags={"adventure"})
    assert filter_resources(df, spec, category_id="cat-games").height == 0

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Platform(str, Enum):
    PC = "pc"
    ANDROID = "android"
    IOS = "ios"
    MOBILE = "mobile"
    OTHER = "other"


class SortKey(str, Enum):
    RECENCY = "recency"
    DOWNLOADS = "downloads"
    LIKES = "likes"
    ALPHABETICAL = "alphabetical"


class CamelModel(BaseModel):
    # JSON uses camelCase; Python code and storage rows use snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Category(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str
    platform: Optional[str] = None


class Resource(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    category_id: Optional[str] = Field(
        default=None, description="Identifier of the owning category."
    )
    platform: Platform
    download_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    created_at: datetime
    slug: Optional[str] = None
    thumb_url: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("tags", mode="before")
    @classmethod
    def unique_tags(cls, v: Optional[List[str]]) -> List[str]:
        if not v:
            return []
        # Tag sets are unique within a resource; keep first-seen order for display.
        return list(dict.fromkeys(v))

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class FilterSpec(CamelModel):
    """
    One search/browse request. Immutable once built.

    Absent or default-valued dimensions are treated as "match all".
    """

    model_config = ConfigDict(frozen=True)

    search_text: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring matched against title or description.",
    )
    category_slug: Optional[str] = Field(
        default=None, description="Slug of an existing category."
    )
    platform: Optional[Platform] = None
    tags: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Every listed tag must be present on a matching resource.",
    )
    sort_key: SortKey = SortKey.RECENCY
    page: int = Field(default=1, description="1-based page number.")
    page_size: int = Field(default=20, description="Maximum number of items per page.")

    @field_validator("tags", mode="before")
    @classmethod
    def drop_blank_tags(cls, v):
        if not v:
            return frozenset()
        return frozenset(t for t in v if t and t.strip())


class FacetValue(CamelModel):
    value: str
    count: int


class FacetCounts(CamelModel):
    categories: List[FacetValue] = Field(default_factory=list)
    platforms: List[FacetValue] = Field(default_factory=list)
    tags: List[FacetValue] = Field(default_factory=list)


class ResultPage(CamelModel):
    items: List[Resource]
    total_matched: int
    page: int
    page_size: int
    facets: FacetCounts = Field(default_factory=FacetCounts)


class ErrorResponse(BaseModel):
    error: str
    message: str
    field: Optional[str] = None

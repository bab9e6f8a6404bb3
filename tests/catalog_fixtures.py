"""Small in-memory catalogs shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Iterable

from app.core.errors import StorageUnavailable
from app.schemas.resources import Category, Resource
from app.storage.base import CatalogStore
from app.storage.memory_store import InMemoryCatalogStore


T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)

CATEGORIES = [
    Category(id="cat-games", name="Games", slug="games", platform="pc"),
    Category(id="cat-apps", name="Apps", slug="apps", platform="android"),
]


def make_resource(
    rid: str,
    title: str,
    *,
    description: str = "",
    tags: Iterable[str] = (),
    category_id: str | None = None,
    platform: str = "pc",
    downloads: int = 0,
    likes: int = 0,
    created: datetime = T0,
) -> Resource:
    return Resource(
        id=rid,
        title=title,
        description=description,
        tags=list(tags),
        category_id=category_id,
        platform=platform,
        download_count=downloads,
        like_count=likes,
        created_at=created,
    )


def sample_resources() -> list[Resource]:
    """
    Five resources with deliberate ties:
    - "b" and "c" share a creation time, as do "a" and "e".
    - "a" and "b" share a like count.
    """
    day = timedelta(days=1)
    return [
        make_resource(
            "a", "Sky Game", description="Fly above the clouds",
            tags=["adventure", "open-world"], category_id="cat-games",
            platform="pc", downloads=10, likes=3, created=T0 + day,
        ),
        make_resource(
            "b", "App One", description="Note taking",
            tags=["productivity"], category_id="cat-apps",
            platform="android", downloads=50, likes=3, created=T0 + 2 * day,
        ),
        make_resource(
            "c", "cloud Sync", description="Sync files to the SKY",
            tags=["productivity", "Sync"], category_id="cat-apps",
            platform="ios", downloads=40, likes=8, created=T0 + 2 * day,
        ),
        make_resource(
            "d", "Puzzle Box", tags=["puzzle", "adventure"], category_id="cat-games",
            platform="mobile", downloads=0, likes=0, created=T0,
        ),
        make_resource(
            "e", "alpha Tool", description="Disk utility",
            platform="other", downloads=10, likes=1, created=T0 + day,
        ),
    ]


def sample_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore(resources=sample_resources(), categories=CATEGORIES)


class UnavailableStore(CatalogStore):
    """Store whose reads always fail, as a Supabase outage would."""

    name = "unavailable"

    def __init__(self, fail_categories: bool = False) -> None:
        self.fail_categories = fail_categories

    async def list_resources(self) -> AsyncIterator[Resource]:
        raise StorageUnavailable("catalog backend is down")
        yield  # pragma: no cover

    async def list_categories(self) -> AsyncIterator[Category]:
        if self.fail_categories:
            raise StorageUnavailable("catalog backend is down")
        for category in CATEGORIES:
            yield category

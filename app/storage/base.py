from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator

from app.schemas.resources import Category, Resource


class CatalogStore(ABC):
    """
    Read access to the resource catalog.

    Implementations may page or stream internally; callers only iterate.
    Read failures are raised as `StorageUnavailable`.
    """

    name: str = "catalog"

    @abstractmethod
    def list_resources(self) -> AsyncIterator[Resource]:
        ...

    @abstractmethod
    def list_categories(self) -> AsyncIterator[Category]:
        ...

    async def aclose(self) -> None:
        return None

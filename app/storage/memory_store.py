from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import AsyncIterator, Iterable

from app.schemas.resources import Category, Resource
from app.storage.base import CatalogStore


logger = logging.getLogger(__name__)


class InMemoryCatalogStore(CatalogStore):
    """Catalog held in process memory. Used for local development and tests."""

    name = "memory"

    def __init__(
        self,
        resources: Iterable[Resource] = (),
        categories: Iterable[Category] = (),
    ) -> None:
        self._resources = tuple(resources)
        self._categories = tuple(categories)

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryCatalogStore":
        """
        Load a catalog snapshot of the form
        `{"categories": [...], "resources": [...]}`.

        A missing file yields an empty catalog.
        """
        if not path.exists():
            logger.warning("Catalog file %s not found; starting with an empty catalog.", path)
            return cls()

        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)

        categories = [Category.model_validate(row) for row in raw.get("categories", [])]
        resources = [Resource.model_validate(row) for row in raw.get("resources", [])]
        logger.info(
            "Loaded %d resources and %d categories from %s",
            len(resources),
            len(categories),
            path,
        )
        return cls(resources=resources, categories=categories)

    async def list_resources(self) -> AsyncIterator[Resource]:
        for resource in self._resources:
            yield resource

    async def list_categories(self) -> AsyncIterator[Category]:
        for category in self._categories:
            yield category

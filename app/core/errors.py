from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for errors raised while answering a catalog search."""

    code = "CatalogError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class InvalidFilter(CatalogError):
    """The caller supplied a filter value that cannot be evaluated."""

    code = "InvalidFilter"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class StorageUnavailable(CatalogError):
    """The catalog store could not be read."""

    code = "StorageUnavailable"

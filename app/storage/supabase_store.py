from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import StorageUnavailable
from app.reliability.circuit_breaker import CircuitBreaker, CircuitOpenError
from app.schemas.resources import Category, Platform, Resource
from app.storage.base import CatalogStore


logger = logging.getLogger(__name__)

RESOURCE_COLUMNS = (
    "id,title,slug,description,tags,category_id,platform,"
    "thumb_url,download_count,like_count,created_at"
)
CATEGORY_COLUMNS = "id,name,slug,platform"

_PLATFORM_VALUES = {p.value for p in Platform}


class SupabaseCatalogStore(CatalogStore):
    """
    Reads the `posts` and `categories` tables through Supabase's PostgREST API.

    Tables are paged with `limit`/`offset` in a stable order. Transport errors
    and 5xx responses are retried with exponential backoff; anything that still
    fails surfaces as `StorageUnavailable`.
    """

    name = "supabase"

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        page_size: int | None = None,
        max_retries: int | None = None,
        retry_delay_seconds: float | None = None,
        timeout_seconds: float | None = None,
        breaker: CircuitBreaker | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = (url or settings.SUPABASE_URL).rstrip("/")
        self.api_key = api_key or settings.SUPABASE_ANON_KEY
        self.page_size = page_size or settings.STORAGE_PAGE_SIZE
        self.max_retries = max(1, max_retries or settings.STORAGE_MAX_RETRIES)
        self.retry_delay_seconds = (
            settings.STORAGE_RETRY_DELAY_SECONDS
            if retry_delay_seconds is None
            else retry_delay_seconds
        )
        self.breaker = breaker or CircuitBreaker(name="supabase_catalog")
        self._client = httpx.AsyncClient(
            base_url=f"{self.url}/rest/v1",
            timeout=timeout_seconds or settings.STORAGE_TIMEOUT_SECONDS,
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    def is_configured(self) -> bool:
        return bool(self.url and self.api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_resources(self) -> AsyncIterator[Resource]:
        async for row in self._paginate("posts", RESOURCE_COLUMNS, order="id.asc"):
            yield self._parse(Resource, _coerce_platform(row))

    async def list_categories(self) -> AsyncIterator[Category]:
        async for row in self._paginate("categories", CATEGORY_COLUMNS, order="name.asc,id.asc"):
            yield self._parse(Category, row)

    async def _paginate(
        self, table: str, columns: str, order: str
    ) -> AsyncIterator[Dict[str, Any]]:
        offset = 0
        while True:
            params = {
                "select": columns,
                "order": order,
                "limit": str(self.page_size),
                "offset": str(offset),
            }
            try:
                rows = await self.breaker.acall(self._get_with_retry, table, params)
            except CircuitOpenError as exc:
                raise StorageUnavailable(
                    f"Catalog storage is temporarily unavailable ({exc})"
                ) from exc

            for row in rows:
                yield row

            if len(rows) < self.page_size:
                return
            offset += self.page_size

    async def _get_with_retry(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = await self._client.get(f"/{table}", params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                if exc.response.status_code < 500:
                    logger.warning(
                        "Supabase rejected read of %s: %s %s",
                        table,
                        exc.response.status_code,
                        exc.response.text,
                    )
                    raise StorageUnavailable(
                        f"Reading '{table}' failed with status {exc.response.status_code}"
                    ) from exc
                last_error = exc
            except httpx.TransportError as exc:
                last_error = exc
            else:
                data = response.json()
                if not isinstance(data, list):
                    raise StorageUnavailable(f"Unexpected payload while reading '{table}'")
                return data

            logger.warning(
                "Supabase read of %s failed (attempt %d/%d): %s",
                table,
                attempt + 1,
                self.max_retries,
                last_error,
            )
            if attempt + 1 < self.max_retries:
                await asyncio.sleep(self.retry_delay_seconds * (2 ** attempt))

        raise StorageUnavailable(
            f"Reading '{table}' failed after {self.max_retries} attempts"
        ) from last_error

    @staticmethod
    def _parse(model, row: Dict[str, Any]):
        try:
            return model.model_validate(row)
        except ValidationError as exc:
            raise StorageUnavailable(
                f"Malformed {model.__name__.lower()} row {row.get('id')!r}"
            ) from exc


def _coerce_platform(row: Dict[str, Any]) -> Dict[str, Any]:
    # Rows written before the platform enum was fixed may hold free-form values.
    platform = str(row.get("platform") or "").strip().lower()
    if platform not in _PLATFORM_VALUES:
        platform = Platform.OTHER.value
    return {**row, "platform": platform}

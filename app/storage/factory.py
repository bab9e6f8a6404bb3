from __future__ import annotations

from app.core.config import Settings
from app.storage.base import CatalogStore
from app.storage.memory_store import InMemoryCatalogStore
from app.storage.supabase_store import SupabaseCatalogStore


def build_catalog_store(config: Settings) -> CatalogStore:
    """Instantiate the catalog backend selected by CATALOG_BACKEND."""
    backend = config.CATALOG_BACKEND
    if backend == "memory":
        return InMemoryCatalogStore.from_json_file(config.CATALOG_PATH)
    if backend == "supabase":
        return SupabaseCatalogStore(
            url=config.SUPABASE_URL,
            api_key=config.SUPABASE_ANON_KEY,
            page_size=config.STORAGE_PAGE_SIZE,
            max_retries=config.STORAGE_MAX_RETRIES,
            retry_delay_seconds=config.STORAGE_RETRY_DELAY_SECONDS,
            timeout_seconds=config.STORAGE_TIMEOUT_SECONDS,
        )
    raise ValueError(f"Unknown CATALOG_BACKEND: {backend!r}")

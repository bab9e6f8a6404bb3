from dotenv import load_dotenv
load_dotenv()
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """
    Service configuration.

    Values can be overridden via environment variables (or a local `.env`).
    """

    # Catalog backend: "memory" reads CATALOG_PATH, "supabase" talks to PostgREST.
    CATALOG_BACKEND: str = os.getenv("CATALOG_BACKEND", "memory").lower()
    CATALOG_PATH: Path = Path(os.getenv("CATALOG_PATH", "data/catalog.json"))

    # Supabase (hosted Postgres exposed through PostgREST)
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

    # Storage adapter behaviour
    STORAGE_PAGE_SIZE: int = int(os.getenv("STORAGE_PAGE_SIZE", "1000"))
    STORAGE_MAX_RETRIES: int = int(os.getenv("STORAGE_MAX_RETRIES", "3"))
    STORAGE_RETRY_DELAY_SECONDS: float = float(
        os.getenv("STORAGE_RETRY_DELAY_SECONDS", "0.5")
    )
    STORAGE_TIMEOUT_SECONDS: float = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "8.0"))

    # Result window bounds
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    CORS_ALLOW_ORIGINS: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000")
        )
    )


settings = Settings()

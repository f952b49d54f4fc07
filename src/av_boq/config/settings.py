"""Configuration settings for the application."""
import os
from dataclasses import dataclass, field
from typing import Optional

# Try to load .env manually if not loaded
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass


@dataclass
class ModelSettings:
    boq_model: str = os.getenv("BOQ_MODEL", "gemini-2.5-pro")
    details_model: str = os.getenv("BOQ_DETAILS_MODEL", "gemini-2.5-flash")
    generation_temperature: float = 0.1


@dataclass
class CacheSettings:
    # Server-side TTL must exceed the local reuse window
    server_ttl_seconds: int = int(os.getenv("BOQ_CACHE_SERVER_TTL", 3600))
    local_ttl_seconds: int = int(os.getenv("BOQ_CACHE_LOCAL_TTL", 3000))
    store_path: str = os.getenv("BOQ_CACHE_STORE", ".cache/context_cache.json")
    failure_threshold: int = 3
    recovery_timeout: int = 300


@dataclass
class Settings:
    models: ModelSettings = field(default_factory=ModelSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    prompt_profile: str = "v1_avixa"
    catalog_path: Optional[str] = os.getenv("BOQ_CATALOG_PATH") or None

    # API Keys
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")


settings = Settings()

"""
opencafe.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide key material from repr/logging (collection encryption keys).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, e.g. `OPENCAFE_DATABASE_URL`, `OPENCAFE_ADMINS_KEY`.
    Defaults are safe for local dev only; the encryption keys must be replaced in prod.
    """

    model_config = SettingsConfigDict(env_prefix="OPENCAFE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "opencafe"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./opencafe.db"
    # Upper bound on a single store round-trip (token scans included).
    store_timeout_seconds: float = 10.0

    # Per-collection Fernet keys (urlsafe base64, 32 bytes).
    admins_key: str = Field(default="b3BlbmNhZmUtZGV2LWFkbWlucy1rZXktMDAwMDAwMDA=", repr=False)
    customers_key: str = Field(
        default="b3BlbmNhZmUtZGV2LWN1c3RvbWVycy1rZXktMDAwMDA=", repr=False
    )
    cards_key: str = Field(default="b3BlbmNhZmUtZGV2LWNhcmRzLWtleS0wMDAwMDAwMDA=", repr=False)

    def collection_keys(self) -> dict[str, str]:
        return {
            "admins": self.admins_key,
            "customers": self.customers_key,
            "cards": self.cards_key,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Keys are generated once per deployment (`Fernet.generate_key()`); rotating one
# makes every record encrypted with the old key unreadable.

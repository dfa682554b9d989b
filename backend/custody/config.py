"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - custody_admin_address is normalized before use
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from custody.core.domain_types import KeyStrategy, normalize_address


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://custody:custody@db:5432/custody"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Custody deployment
    custody_admin_address: str = "0x1"
    custody_key_strategy: KeyStrategy = KeyStrategy.ADMIN_ADDRESS
    custody_resource_seed: str = "custody_vault"

    @field_validator("custody_admin_address")
    @classmethod
    def normalize_admin(cls, v: str) -> str:
        return normalize_address(v)

    # Ledger faucet (dev/test networks only)
    ledger_faucet_enabled: bool = False

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

# orangeslice/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from orangeslice.common.strings.splitters import csv_to_list


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    prefix: str = "/api"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False

    @field_validator("cors_allow_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    @classmethod
    def _split_csv(cls, v):
        return csv_to_list(v)


class DBConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    driver: str = "postgresql+psycopg"
    host: str = "localhost"
    port: int = 5432
    name: str = "orangeslice"
    user: str = "orangeslice"
    password: str = "orangeslice"
    schema_name: str = "public"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_pre_ping: bool = True
    pool_recycle: int = 1800
    create_all: bool = False  # dev/test convenience; production runs alembic

    # Optional single URL (if set, it takes precedence)
    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("url", "DATABASE_URL", "database_url"),
    )

    @computed_field  # type: ignore[misc]
    @property
    def effective_url(self) -> str:
        if self.url:
            return self.url
        return f"{self.driver}://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"

    @property
    def is_sqlite(self) -> bool:
        return self.effective_url.startswith("sqlite")


class AuthConfig(BaseModel):
    """Hosted user-pool endpoints. Tokens are validated remotely, never locally."""
    userinfo_url: str = "https://auth.example.com/oauth2/userInfo"
    signout_url: str = "https://auth.example.com/oauth2/revoke"
    client_id: str = ""
    timeout_sec: float = 10.0


class CatalogConfig(BaseModel):
    placeholder_image_url: str = "https://via.placeholder.com/400x200?text=No+Image"
    status_log_size: int = Field(50, ge=1, le=1000)
    resubscribe_interval_sec: float = Field(5.0, ge=0)


class FeatureFlags(BaseModel):
    seed_default_tags: bool = True
    mirror_enabled: bool = True

    @field_validator("*", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "orangeslice"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Sub-configs --------
    api: APIConfig = APIConfig()
    db: DBConfig = DBConfig()
    auth: AuthConfig = AuthConfig()
    catalog: CatalogConfig = CatalogConfig()
    features: FeatureFlags = FeatureFlags()

    # -------- Alembic / migrations --------
    alembic_script_location: str = "orangeslice/database/alembic"
    alembic_version_table_schema: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Convenience: DB URL & schema =====
    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        return self.db.effective_url

    @computed_field  # type: ignore[misc]
    @property
    def db_schema(self) -> Optional[str]:
        """App schema, or None when tables live in the default/public schema (always None on SQLite)."""
        if self.db.is_sqlite:
            return None
        s = (self.db.schema_name or "").strip()
        if not s or s.lower() == "public":
            return None
        return s


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this where config is needed at import time:
        from orangeslice.common.settings import get_settings
        cfg = get_settings()
    Runtime objects receive their Settings through the AppContext instead.
    """
    return Settings()  # pydantic_settings will read from .env automatically

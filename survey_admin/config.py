"""Configuration loading.

Rules:
- Primary source: ``survey_config.json`` at the project root.
- Overrides: environment variables, then optional text files under ``config/``.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("survey_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


def _truthy(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str
    ssl_required: bool = Field(default=False)
    auto_apply_migrations: bool = Field(default=True)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class ServerConfig(BaseModel):
    port: int = Field(default=3000, gt=0, lt=65536)
    environment: str = Field(default="development")

    @field_validator("environment")
    @classmethod
    def environment_must_be_allowed(cls, v: str) -> str:
        allowed = {"development", "test", "production"}
        if v not in allowed:
            raise ValueError(f"server.environment must be one of {sorted(allowed)}")
        return v


class LibraryConfig(BaseModel):
    page_size: int = Field(default=100, gt=0, le=1000)


class AppConfig(BaseModel):
    database: DatabaseConfig
    server: ServerConfig
    library: LibraryConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in ``config/`` (optional)
    3) survey_config.json at project root
    4) Development defaults
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Database
    dsn = (
        _env("TEST_DATABASE_URL")
        or _env("DATABASE_URL")
        or _read_config_file("database.url")
        or _base("database.dsn")
        or "sqlite+pysqlite:///:memory:"
    )
    ssl_required_text = _env("DATABASE_SSL_REQUIRED") or _read_config_file("database.ssl.required") or _base("database.ssl_required", "false")
    auto_migrate_text = _env("AUTO_APPLY_MIGRATIONS") or _read_config_file("database.auto_apply_migrations") or _base("database.auto_apply_migrations", "true")

    # Server
    port_text = _env("PORT") or _read_config_file("server.port") or _base("server.port", "3000")
    environment = (_env("APP_ENV") or _read_config_file("server.environment") or _base("server.environment", "development")).strip()

    # Question library
    page_size_text = _env("LIBRARY_PAGE_SIZE") or _read_config_file("library.page_size") or _base("library.page_size", "100")

    try:
        cfg = AppConfig(
            database=DatabaseConfig(
                dsn=dsn,
                ssl_required=_truthy(ssl_required_text),
                auto_apply_migrations=_truthy(auto_migrate_text),
            ),
            server=ServerConfig(port=int(str(port_text).strip()), environment=environment),
            library=LibraryConfig(page_size=int(str(page_size_text).strip())),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "ServerConfig",
    "LibraryConfig",
    "load_config",
]

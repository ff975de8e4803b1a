"""
Gateway configuration: one YAML file plus environment overrides.

Load order (last wins):
- defaults on the models below
- the YAML file (`CONFIG_PATH`, or `config/config.yaml` at the repo root)
- environment variables listed in `ENV_OVERRIDES`

The file may use the older block names (`jwt`, `redis`, `meilisearch`);
they are read as `auth`, `cache` and `search`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"

DEFAULT_TOKEN_SECRET = "dev-secret"
DEFAULT_TOKEN_EXPIRY_SECONDS = 86400

# env var -> (section, field); section None means a top-level field.
# Applied in order, so a later entry wins for the same field.
ENV_OVERRIDES: dict[str, tuple[str | None, str]] = {
    "SERVER_HOST": ("server", "host"),
    "FASTIFY_PORT": ("server", "port"),
    "SERVER_PORT": ("server", "port"),
    "JWT_SECRET": ("auth", "secret"),
    "JWT_EXPIRATION": ("auth", "token_expiry_seconds"),
    "REDIS_HOST": ("cache", "host"),
    "REDIS_PORT": ("cache", "port"),
    "MEILISEARCH_URL": ("search", "url"),
    "MEILISEARCH_API_KEY": ("search", "api_key"),
    "POSTGRES_HOST": ("database", "host"),
    "POSTGRES_PORT": ("database", "port"),
    "POSTGRES_USER": ("database", "user"),
    "POSTGRES_PASSWORD": ("database", "password"),
    "POSTGRES_DB": ("database", "name"),
    "DATABASE_URL": ("database", "url"),
    "LEASE_SERVICE_URL": ("lease_service", "url"),
    "LOG_LEVEL": (None, "log_level"),
}

_BLOCK_ALIASES = {
    "jwt": "auth",
    "redis": "cache",
    "meilisearch": "search",
    "leaseService": "lease_service",
    "logLevel": "log_level",
}


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ServerConfig(_Section):
    host: str = "0.0.0.0"
    port: int = 3000


class AuthConfig(_Section):
    secret: str = DEFAULT_TOKEN_SECRET
    token_expiry_seconds: int = Field(
        default=DEFAULT_TOKEN_EXPIRY_SECONDS,
        validation_alias=AliasChoices("token_expiry_seconds", "tokenExpirySeconds", "expiration"),
    )
    algorithm: str = "HS256"


class SessionConfig(_Section):
    secret: str = ""
    expiration: int = DEFAULT_TOKEN_EXPIRY_SECONDS


class CacheConfig(_Section):
    host: str = "127.0.0.1"
    port: int = 6379
    password: str | None = None
    db: int = 0


class SearchConfig(_Section):
    url: str = "http://127.0.0.1:7700"
    api_key: str | None = Field(default=None, validation_alias=AliasChoices("api_key", "apiKey"))
    index: str = "leases"


class DatabaseConfig(_Section):
    host: str = "postgres"
    port: int = 5432
    user: str = "leasing_user"
    password: str = "secure_pass"
    name: str = Field(default="leasing_db", validation_alias=AliasChoices("name", "db_name", "database"))
    # A full DSN wins over the individual fields when set.
    url: str | None = None


class LeaseServiceConfig(_Section):
    url: str = "http://lease-service:3001"


class Config(_Section):
    server: ServerConfig = Field(default_factory=ServerConfig)
    auth: AuthConfig | None = None
    session: SessionConfig | None = None
    cache: CacheConfig | None = None
    search: SearchConfig | None = None
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    lease_service: LeaseServiceConfig = Field(default_factory=LeaseServiceConfig)
    log_level: str = "INFO"


def config_path() -> Path:
    raw = os.environ.get("CONFIG_PATH", "").strip()
    return Path(raw) if raw else DEFAULT_CONFIG_PATH


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file {path} is not valid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level.")
    return data


def _canonical_blocks(data: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    # Old names first so the canonical block wins when both are present.
    for key, value in sorted(data.items(), key=lambda kv: kv[0] not in _BLOCK_ALIASES):
        if value is None:
            # An empty block (`server:`) counts as absent.
            continue
        out[_BLOCK_ALIASES.get(key, key)] = value
    return out


def _apply_env(data: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    for env_name, (section, field) in ENV_OVERRIDES.items():
        raw = (environ.get(env_name) or "").strip()
        if not raw:
            continue
        if section is None:
            data[field] = raw
            continue

        block = data.get(section)
        block = dict(block) if isinstance(block, dict) else {}
        block[field] = raw
        data[section] = block
    return data


def load(path: str | Path | None = None, *, environ: dict[str, str] | None = None) -> Config:
    """
    Build the process configuration. Raises ConfigError on a missing file,
    bad YAML or values the models reject.
    """
    resolved = Path(path) if path is not None else config_path()
    env = dict(os.environ) if environ is None else environ

    data = _apply_env(_canonical_blocks(_read_yaml(resolved)), env)
    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {resolved}: {exc}") from exc

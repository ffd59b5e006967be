import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

PLACEHOLDER_POLICIES = {"drop", "raise"}
SWEEP_MODES = {"background", "inline"}


def _build_database_url() -> str:
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    db_user = os.environ["POSTGRES_USER"]
    db_password = os.environ["POSTGRES_PASSWORD"]
    db_name = os.environ["POSTGRES_DB"]
    db_host = os.environ["POSTGRES_HOST"]
    db_port = os.environ["POSTGRES_PORT"]

    return f"postgresql+psycopg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_choice(name: str, default: str, allowed: set[str]) -> str:
    value = (os.getenv(name) or default).strip().lower()
    if value not in allowed:
        raise ValueError(f"{name} must be one of {sorted(allowed)}, got {value!r}")
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str
    redis_url: Optional[str] = None
    cache_ttl_seconds: int = 3600
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout_seconds: float = 60.0
    placeholder_policy: str = "drop"
    slot_sweep_mode: str = "background"
    sql_echo: bool = False


def load_settings() -> Settings:
    return Settings(
        database_url=_build_database_url(),
        redis_url=os.getenv("REDIS_URL") or None,
        cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", "3600")),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
        openai_timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60")),
        placeholder_policy=_env_choice("PLACEHOLDER_POLICY", "drop", PLACEHOLDER_POLICIES),
        slot_sweep_mode=_env_choice("SLOT_SWEEP_MODE", "background", SWEEP_MODES),
        sql_echo=_env_flag("SQL_ECHO", "false"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

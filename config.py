"""
Centralised settings loader (pydantic-settings, reads `.env`).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime / DB ────────────────────────────────────────────────
    env_name: str = Field("local", validation_alias="ENV_NAME")
    database_url: str = Field(
        "sqlite+aiosqlite:///./mealplan.db", validation_alias="DATABASE_URL"
    )
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    auto_create_tables: bool = Field(False, validation_alias="AUTO_CREATE_TABLES")

    # ─── plan generation knobs ──────────────────────────────────────
    recipe_candidate_limit: int = Field(50, ge=1, validation_alias="RECIPE_CANDIDATE_LIMIT")
    plan_top_n: int = Field(3, ge=1, validation_alias="PLAN_TOP_N")
    # unset in prod → fresh variety on every regeneration
    plan_random_seed: int | None = Field(None, validation_alias="PLAN_RANDOM_SEED")

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    github_token: str = ""
    slack_bot_token: str = ""
    airtable_api_key: str = ""  # Only needed when record_backend == "airtable"

    # Supabase (default task record store)
    supabase_url: str = ""
    supabase_key: str = ""

    # Backends
    github_api_url: str = "https://api.github.com"
    slack_api_url: str = "https://slack.com/api"
    airtable_api_url: str = "https://api.airtable.com/v0"
    record_backend: str = "supabase"  # "supabase" or "airtable"
    http_timeout_seconds: float = 30.0

    # Pipeline config
    llm_model: str = "claude-3-5-haiku-20241022"
    extraction_max_tokens: int = 2000
    decisions_dir: str = "_codex/decisions"
    task_table: str = "tasks"
    projects_config_path: str = "config.yml"
    proposal_ttl_seconds: float = 60 * 60

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = get_settings()

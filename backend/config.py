"""Service configuration with environment-specific profiles.

Values come from the process environment (a local ``.env`` file is loaded
first) layered over an ``APP_ENV`` profile: dev, staging or production.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CATALOG_PATH = os.path.join(os.path.dirname(__file__), "data", "exercises.csv")


@dataclass(frozen=True)
class Settings:
    """Immutable service settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"
    catalog_path: str = DEFAULT_CATALOG_PATH

    # Session structure
    warmup_minutes: int = 5
    cooldown_minutes: int = 5
    gap_fill_threshold_seconds: int = 300

    # Recency balancing
    recent_plan_window: int = 5
    underused_threshold: int = 2

    # Basic-tier policy: let unrecognized basic-class exercises through
    # whenever the user declared any equipment at all.
    lenient_basic_equipment: bool = True

    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    openai_model: str = "gpt-4o-mini"
    openai_api_key: str = ""

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def has_llm(self) -> bool:
        return bool(self.openai_api_key)


_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
        "cors_origins": [],
    },
}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        catalog_path=os.getenv("EXERCISE_CATALOG_PATH", DEFAULT_CATALOG_PATH),
        warmup_minutes=int(os.getenv("WARMUP_MINUTES", "5")),
        cooldown_minutes=int(os.getenv("COOLDOWN_MINUTES", "5")),
        gap_fill_threshold_seconds=int(os.getenv("GAP_FILL_THRESHOLD_SECONDS", "300")),
        recent_plan_window=int(os.getenv("RECENT_PLAN_WINDOW", "5")),
        underused_threshold=int(os.getenv("UNDERUSED_THRESHOLD", "2")),
        lenient_basic_equipment=_env_bool("LENIENT_BASIC_EQUIPMENT", True),
        cors_origins=_env_list("CORS_ORIGINS", profile.get("cors_origins", ["*"])),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_api_key=os.getenv("OPENAI_API_KEY", "").strip(),
    )

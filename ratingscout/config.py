"""
Runtime settings for RatingScout, read from environment variables
(optionally seeded from a .env file, see env.load_env).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    timeout: float = 15.0
    max_retries: int = 3
    retry_delay: float = 1.0
    user_agent: str = DEFAULT_USER_AGENT
    # MyAnimeList's default search page size
    max_results: int = 10
    store_path: Path = Path("data/current.json")
    log_level: str = "INFO"
    log_dir: Path = Path("logs")


def _get_number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}")
    if value < 0:
        raise ValueError(f"{key} must not be negative, got {raw!r}")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from `env` (defaults to os.environ)."""
    env = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        timeout=_get_number(env, "RATINGSCOUT_TIMEOUT", defaults.timeout, float),
        max_retries=_get_number(env, "RATINGSCOUT_MAX_RETRIES", defaults.max_retries, int),
        retry_delay=_get_number(env, "RATINGSCOUT_RETRY_DELAY", defaults.retry_delay, float),
        user_agent=env.get("RATINGSCOUT_USER_AGENT") or defaults.user_agent,
        max_results=_get_number(env, "RATINGSCOUT_MAX_RESULTS", defaults.max_results, int),
        store_path=Path(env.get("RATINGSCOUT_STORE") or defaults.store_path),
        log_level=(env.get("RATINGSCOUT_LOG_LEVEL") or defaults.log_level).upper(),
        log_dir=Path(env.get("RATINGSCOUT_LOG_DIR") or defaults.log_dir),
    )

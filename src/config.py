from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os

import pytz
from dotenv import load_dotenv

from src.coingecko_api.client import DEFAULT_API_URL
from src.converter.rate_service import DEFAULT_HISTORY_TTL, DEFAULT_RATE_TTL

DEFAULT_TIMEZONE = "Europe/Moscow"


@dataclass(frozen=True)
class Settings:
    api_url: str
    cache_dir: Path
    rate_ttl: int
    history_ttl: int
    request_timeout: float
    timezone: pytz.BaseTzInfo
    log_level: str


def default_cache_dir() -> Path:
    base = os.getenv('XDG_CACHE_HOME') or str(Path.home() / '.cache')
    return Path(base) / 'tonrub'


def _number_from_env(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment, after loading a .env file if present"""
    load_dotenv(env_file)

    timezone_name = os.getenv('TONRUB_TIMEZONE', DEFAULT_TIMEZONE)
    try:
        timezone = pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError:
        raise ValueError(f"Unknown timezone: {timezone_name}")

    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown log level: {log_level}")

    cache_dir = os.getenv('TONRUB_CACHE_DIR')

    return Settings(
        api_url=os.getenv('COINGECKO_API_URL', DEFAULT_API_URL),
        cache_dir=Path(cache_dir) if cache_dir else default_cache_dir(),
        rate_ttl=_number_from_env('CACHE_TTL', DEFAULT_RATE_TTL),
        history_ttl=_number_from_env('HISTORY_CACHE_TTL', DEFAULT_HISTORY_TTL),
        request_timeout=_number_from_env('REQUEST_TIMEOUT', 10, cast=float),
        timezone=timezone,
        log_level=log_level,
    )

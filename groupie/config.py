"""Application configuration constants and environment-backed settings."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import env

ROOT_DIR: Path = Path(__file__).resolve().parent.parent

# Server
DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8080
# Per-connection socket deadlines, in seconds
READ_TIMEOUT_SECONDS: float = 5.0
WRITE_TIMEOUT_SECONDS: float = 10.0

# Seed and translation data
ARTISTS_FILE: Path = ROOT_DIR / "data" / "artists.json"
TRANSLATIONS_FILE: Path = ROOT_DIR / "data" / "translations.json"

# Locale selection
DEFAULT_LOCALE: str = "fr"
LOCALE_PARAM: str = "lang"
LOCALE_COOKIE: str = "lang"
LOCALE_COOKIE_MAX_AGE: int = 86400 * 30

# Upstream artist API proxy
UPSTREAM_BASE_URL: str = "https://groupietrackers.herokuapp.com/api"
UPSTREAM_TIMEOUT_SECONDS: float = 10.0
UPSTREAM_RESOURCES = ("artists", "locations", "dates", "relation")

# Cache
CACHE_DEFAULT_TTL_SECONDS: float = 300.0
CACHE_MAX_ENTRIES: int = 512

# CORS
CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type"]


@dataclass(frozen=True)
class Settings:
    """Typed view of the configuration after environment overrides."""

    host: str
    port: int
    read_timeout: float
    write_timeout: float
    artists_file: Path
    translations_file: Path
    default_locale: str
    upstream_url: str
    upstream_timeout: float
    proxy_cache_ttl: float
    proxy_cache_size: int
    log_level: str
    log_file: Optional[str]
    debug: bool


def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""

    return Settings(
        host=env.get_str("GROUPIE_HOST", DEFAULT_HOST),
        port=env.get_int("GROUPIE_PORT", DEFAULT_PORT),
        read_timeout=env.get_float("GROUPIE_READ_TIMEOUT", READ_TIMEOUT_SECONDS),
        write_timeout=env.get_float("GROUPIE_WRITE_TIMEOUT", WRITE_TIMEOUT_SECONDS),
        artists_file=Path(env.get_str("GROUPIE_ARTISTS_FILE", str(ARTISTS_FILE))),
        translations_file=Path(env.get_str("GROUPIE_TRANSLATIONS_FILE", str(TRANSLATIONS_FILE))),
        default_locale=env.get_str("GROUPIE_DEFAULT_LOCALE", DEFAULT_LOCALE).lower(),
        upstream_url=env.get_str("GROUPIE_UPSTREAM_URL", UPSTREAM_BASE_URL).rstrip("/"),
        upstream_timeout=env.get_float("GROUPIE_UPSTREAM_TIMEOUT", UPSTREAM_TIMEOUT_SECONDS),
        proxy_cache_ttl=env.get_float("GROUPIE_PROXY_CACHE_TTL", CACHE_DEFAULT_TTL_SECONDS),
        proxy_cache_size=env.get_int("GROUPIE_PROXY_CACHE_SIZE", CACHE_MAX_ENTRIES),
        log_level=env.get_str("GROUPIE_LOG_LEVEL", "INFO").upper(),
        log_file=env.get_str("GROUPIE_LOG_FILE", "") or None,
        debug=env.get_bool("GROUPIE_DEBUG", False),
    )

"""Environment helper utilities for runtime configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

ENV_PREFIX = "GROUPIE_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def load_env(path: Optional[Path] = None) -> Dict[str, str]:
    """Read KEY=VALUE lines from a .env file into os.environ.

    Variables already present in the environment win. Lines may carry a
    leading ``export``. Names outside the ``GROUPIE_`` prefix are ignored.
    Returns the parsed mapping.
    """

    env_path = Path(path) if path else Path(__file__).resolve().parent.parent / ".env"
    if not env_path.is_file():
        return {}

    parsed: Dict[str, str] = {}
    for line in (raw.strip() for raw in env_path.read_text(encoding="utf-8").splitlines()):
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        name, sep, raw_value = line.partition("=")
        if not sep or line.startswith("#"):
            continue
        env_name = _normalize_key(name)
        if env_name:
            parsed[env_name] = raw_value.strip().strip('"').strip("'")

    for env_name, value in parsed.items():
        os.environ.setdefault(env_name, value)
    return parsed


def get_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_int(name: str, default: int) -> int:
    try:
        return int(os.environ[name])
    except (KeyError, TypeError, ValueError):
        return default


def get_float(name: str, default: float) -> float:
    try:
        return float(os.environ[name])
    except (KeyError, TypeError, ValueError):
        return default


def get_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _normalize_key(key: str) -> Optional[str]:
    name = key.strip().replace(" ", "_").upper()
    if not name.startswith(ENV_PREFIX):
        return None
    return name

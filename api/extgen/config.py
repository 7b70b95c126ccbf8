from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_ICON_MAX_DIMENSION = 1024


@dataclass(frozen=True)
class ExtgenConfig:
    icon_max_dimension: int
    icon_font_path: str
    log_level: int
    log_file: str


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_log_level(name: str, default: int = logging.INFO) -> int:
    raw = os.environ.get(name, "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


def get_settings() -> ExtgenConfig:
    max_dim = _env_int("EXTGEN_ICON_MAX_DIMENSION", DEFAULT_ICON_MAX_DIMENSION)
    return ExtgenConfig(
        icon_max_dimension=max_dim if max_dim > 0 else DEFAULT_ICON_MAX_DIMENSION,
        icon_font_path=os.environ.get("EXTGEN_ICON_FONT_PATH", "").strip(),
        log_level=_env_log_level("EXTGEN_LOG_LEVEL"),
        log_file=os.environ.get("EXTGEN_LOG_FILE", "").strip(),
    )


def auth_disabled() -> bool:
    mode = os.environ.get("AUTH_MODE", "").strip().lower()
    if mode in {"0", "false", "no", "off", "disabled"}:
        return True
    v = os.environ.get("AUTH_DISABLED", "").strip().lower()
    return v in {"1", "true", "yes", "on"}


def expected_api_key() -> str:
    key = os.environ.get("EXTGEN_API_KEY", "").strip()
    if not key:
        raise RuntimeError("EXTGEN_API_KEY is not set")
    return key

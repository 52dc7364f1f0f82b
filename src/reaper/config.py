# src/reaper/config.py

"""Application settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole process, built on first use.
- CLI flags win over the environment; the environment wins over defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "REAPER"

DEFAULT_CONFIG_PATH = Path("~/reaper.toml")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_file: Path | None

    # ---- Repository config file ----
    config_path: Path

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "reaper") or "reaper"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_file = _env_path(_k("LOG_FILE"), None)
        config_path = _env_path(_k("CONFIG"), None) or DEFAULT_CONFIG_PATH.expanduser()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_file=log_file,
            config_path=config_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        # Never override variables that are already set in the environment.
        load_dotenv(find_dotenv(usecwd=True), override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def resolve_config_path(flag_value: str | None, settings: Settings) -> Path:
    """--config flag > REAPER_CONFIG > ~/reaper.toml"""
    if flag_value:
        return Path(flag_value).expanduser()
    return settings.config_path

# src/hwctl/config.py

"""Settings loaded from environment variables.

All variables share the HWCTL_ prefix. Nothing here touches the data file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

APP_VERSION = "0.3.0"

ENV_PREFIX = "HWCTL"

DEFAULT_DATA_PATH = Path("~/.local/share/hwctl/homework.yml")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default.expanduser()
    return Path(raw).expanduser()


def _env_optional_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Data ----
    data_path: Path
    vault_root: Path

    # ---- Logging ----
    log_level: str
    log_dir: Optional[Path]


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings(
        data_path=_env_path(_k("DATA"), DEFAULT_DATA_PATH),
        vault_root=_env_path(_k("VAULT"), Path.cwd()),
        log_level=_env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING",
        log_dir=_env_optional_path(_k("LOG_DIR")),
    )

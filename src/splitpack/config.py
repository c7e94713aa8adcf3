"""Application settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

BYTES_PER_MB = 1024 * 1024
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    default_max_mb: float
    output_dir: Path
    log_level: str


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default).strip()
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"Invalid value for {name}: {raw!r} is not a number") from None
    if value <= 0:
        raise RuntimeError(f"Invalid value for {name}: must be positive")
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip().upper()
    if raw not in LOG_LEVELS:
        raise RuntimeError(
            f"Invalid value for {name}: {raw!r} is not one of {', '.join(LOG_LEVELS)}"
        )
    return raw


@lru_cache()
def get_settings() -> Settings:
    load_dotenv(Path.cwd() / ".env")

    return Settings(
        default_max_mb=_env_float("SPLITPACK_DEFAULT_MAX_MB", "2"),
        output_dir=Path(os.getenv("SPLITPACK_OUTPUT_DIR", ".")),
        log_level=_env_log_level("SPLITPACK_LOG_LEVEL", "INFO"),
    )

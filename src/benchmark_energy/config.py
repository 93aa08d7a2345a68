"""Environment configuration.

All settings come from environment variables so the server can be configured
from an MCP client's launch config.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .core.clients.stats import find_stats_dir
from .core.models import DEFAULT_ENERGY_CONFIG, EnergyConfig

logger = logging.getLogger(__name__)

DEFAULT_STEAM_ROOTS = ("~/.local/share/Steam", "~/.steam/steam")


def _get_env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, value, default)
        return default


def _get_env_positive_float(name: str, default: float) -> float:
    value = _get_env_float(name, default)
    if value <= 0:
        logger.warning("Ignoring %s=%s: must be positive, using %s", name, value, default)
        return default
    return value


def get_energy_config() -> EnergyConfig:
    """Energy scale from BENCHMARK_ENERGY_BASE / BENCHMARK_ENERGY_INCREMENT."""
    return EnergyConfig(
        base=_get_env_positive_float("BENCHMARK_ENERGY_BASE", DEFAULT_ENERGY_CONFIG.base),
        increment=_get_env_positive_float("BENCHMARK_ENERGY_INCREMENT", DEFAULT_ENERGY_CONFIG.increment),
    )


def get_log_level() -> str:
    level = os.environ.get("BENCHMARK_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(getattr(logging, level, None), int):
        logger.warning("Ignoring BENCHMARK_LOG_LEVEL=%r: unknown level, using INFO", level)
        return "INFO"
    return level


def get_catalogue_path(override: str = "") -> Path:
    path = override or os.environ.get("BENCHMARK_CATALOGUE_PATH", "")
    if not path:
        raise ValueError("BENCHMARK_CATALOGUE_PATH environment variable is required (path to the threshold catalogue JSON)")
    return Path(path).expanduser()


def get_steam_roots() -> list[Path]:
    roots = []
    if os.environ.get("STEAM_PATH"):
        roots.append(Path(os.environ["STEAM_PATH"]).expanduser())
    roots.extend(Path(r).expanduser() for r in DEFAULT_STEAM_ROOTS)
    return roots


def get_stats_dir(override: str = "") -> Path:
    """Stats directory from the argument, BENCHMARK_STATS_DIR, or the Steam libraries."""
    explicit = override or os.environ.get("BENCHMARK_STATS_DIR", "")
    if explicit:
        return Path(explicit).expanduser()

    found: Optional[Path] = find_stats_dir(get_steam_roots())
    if found is None:
        raise ValueError("No stats directory found. Set BENCHMARK_STATS_DIR or STEAM_PATH.")
    return found

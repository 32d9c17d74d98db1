"""Configuration file management for finboard."""

import copy
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from finboard.domain.models import SalarySplit

DEFAULT_CONFIG: dict[str, Any] = {
    "base_salary": 7000,
    "salary_split": {
        "fixed_costs": 55,
        "investments": 25,
        "savings": 15,
        "fun": 5,
    },
    "fire": {
        "swr_percent": 4,
        "annual_return_percent": 7,
    },
    "limiters": {
        "stock-prices": {"limit": 10, "window_seconds": 60},
        "ocr": {"limit": 5, "window_seconds": 60},
    },
}


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "finboard" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(copy.deepcopy(DEFAULT_CONFIG), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_or_default(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration layered over the defaults.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary. Plain defaults if the file doesn't exist.
    """
    try:
        user_config = load_config(config_path)
    except FileNotFoundError:
        return copy.deepcopy(DEFAULT_CONFIG)

    return merge_config(DEFAULT_CONFIG, user_config)


def get_salary_split(config: dict[str, Any]) -> SalarySplit:
    """Get the salary split percentages from config."""
    split = config.get("salary_split", DEFAULT_CONFIG["salary_split"])
    return SalarySplit(
        fixed_costs=float(split.get("fixed_costs", 0)),
        investments=float(split.get("investments", 0)),
        savings=float(split.get("savings", 0)),
        fun=float(split.get("fun", 0)),
    )


def get_limiter_preset(name: str, config: dict[str, Any]) -> dict[str, Any]:
    """Get a rate limiter preset by name.

    Args:
        name: Limiter name (e.g., "stock-prices").
        config: Configuration dictionary.

    Returns:
        Dictionary with limit and window_seconds.

    Raises:
        KeyError: If the preset is not configured or lacks a field.
    """
    limiters = config.get("limiters", {})
    if name not in limiters:
        raise KeyError(f"Rate limiter '{name}' is not configured")

    preset = limiters[name]
    missing = [field for field in ("limit", "window_seconds") if field not in preset]
    if missing:
        raise KeyError(f"Rate limiter '{name}' is missing {', '.join(missing)}")

    return {
        "limit": int(preset["limit"]),
        "window_seconds": float(preset["window_seconds"]),
    }

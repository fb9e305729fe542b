"""
YAML → engine config loader.

Loads tunable defaults from engine.yaml (bundled with the package) and
optionally merges user overrides from ~/.workout-engine/engine.yaml.

Usage:
    from workout_engine.core.engine.config_loader import load_engine_config
    cfg = load_engine_config()
    rest = cfg.get("set_defaults", {}).get("rest_seconds", 60)

If the bundled YAML cannot be read, lookups fall back to the Python defaults
in config.py.  If the user override file exists but has parse errors, a
warning is emitted and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; warn and return {} if it is unreadable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(
            f"workout-engine: ignoring config file {path} ({exc})",
            stacklevel=3,
        )
        return {}
    return data if isinstance(data, dict) else {}


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled engine.yaml, or None if not found."""
    ref = importlib.resources.files("workout_engine").joinpath("engine.yaml")
    if ref.is_file():
        return Path(str(ref))
    candidate = Path(__file__).parent.parent.parent / "engine.yaml"
    return candidate if candidate.exists() else None


def get_user_config_dir() -> Path:
    """Return ~/.workout-engine (may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".workout-engine"


def get_user_yaml_path() -> Path | None:
    """Return ~/.workout-engine/engine.yaml if it exists, else None."""
    p = get_user_config_dir() / "engine.yaml"
    return p if p.exists() else None


def load_engine_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge engine configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/workout_engine/engine.yaml
    2. User override (``user_path`` or ~/.workout-engine/engine.yaml)

    Args:
        user_path: Explicit override file; defaults to the home-dir location

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = deep_merge(config, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = deep_merge(config, user_cfg)

    return config

"""
YAML → Settings loader.

Runtime settings (backend locations, table names, default catalog source)
are loaded from the bundled defaults.yaml, deep-merged with an optional
user file at ~/.ideal-weight/config.yaml, then with environment variables.

Usage:
    from ideal_weight.io.config_loader import load_settings
    settings = load_settings()

If the user override file exists but cannot be parsed, a warning is
issued and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..catalog.resolver import DEFAULT_RPC_FUNCTION, SOURCE_CHOICES
from .serializers import ValidationError, validate_choice, validate_positive

# env var → (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "SUPABASE_URL": ("supabase", "url"),
    "SUPABASE_ANON_KEY": ("supabase", "key"),
    "IDEAL_WEIGHT_RPC_FUNCTION": ("supabase", "rpc_function"),
    "IDEAL_WEIGHT_MANIFEST_URL": ("manifest", "url"),
    "IDEAL_WEIGHT_DATA_DIR": ("manifest", "data_dir"),
    "IDEAL_WEIGHT_SOURCE": ("catalog", "source"),
}


@dataclass(frozen=True)
class Settings:
    """Where the exercise catalog comes from and how to reach it."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    rpc_function: str = DEFAULT_RPC_FUNCTION
    exercises_table: str = "exercises"
    involvement_table: str = "exercise_muscles"
    request_timeout: float = 10.0
    manifest_url: str | None = None
    data_dir: Path | None = None
    manifest_name: str = "manifest.json"
    source: str = "auto"

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"ideal-weight: ignoring config file {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _env_overrides(environ: dict[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled defaults.yaml, or None if not found."""
    try:
        ref = importlib.resources.files("ideal_weight").joinpath("defaults.yaml")
        with importlib.resources.as_file(ref) as p:
            return p if Path(p).exists() else None
    except Exception:
        candidate = Path(__file__).parent.parent / "defaults.yaml"
        return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.ideal-weight/config.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".ideal-weight" / "config.yaml"
    return p if p.exists() else None


def settings_from_dict(config: dict[str, Any]) -> Settings:
    """
    Build Settings from a merged config dict.

    Raises:
        ValidationError: If the source is unknown or the timeout is not positive
    """
    supabase = config.get("supabase") or {}
    manifest = config.get("manifest") or {}
    catalog = config.get("catalog") or {}

    source = str(catalog.get("source") or "auto")
    validate_choice(source, SOURCE_CHOICES, "catalog.source")

    try:
        timeout = float(supabase.get("request_timeout", 10.0))
    except (TypeError, ValueError) as e:
        raise ValidationError("supabase.request_timeout must be a number") from e
    validate_positive(timeout, "supabase.request_timeout")

    data_dir = manifest.get("data_dir")
    return Settings(
        supabase_url=supabase.get("url") or None,
        supabase_key=supabase.get("key") or None,
        rpc_function=str(supabase.get("rpc_function") or DEFAULT_RPC_FUNCTION),
        exercises_table=str(supabase.get("exercises_table") or "exercises"),
        involvement_table=str(supabase.get("involvement_table") or "exercise_muscles"),
        request_timeout=timeout,
        manifest_url=manifest.get("url") or None,
        data_dir=Path(data_dir).expanduser() if data_dir else None,
        manifest_name=str(manifest.get("name") or "manifest.json"),
        source=source,
    )


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """
    Load and merge settings.

    Load order (later overrides earlier):
    1. Bundled src/ideal_weight/defaults.yaml
    2. User override at ~/.ideal-weight/config.yaml
    3. Environment variables (see ENV_OVERRIDES)
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        config = _deep_merge(config, _load_yaml_file(user))

    env = dict(os.environ) if environ is None else environ
    config = _deep_merge(config, _env_overrides(env))

    return settings_from_dict(config)

"""Photopick configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (PHOTOPICK_DRIVE_API_KEY, PHOTOPICK_ROOT_FOLDER_ID, PHOTOPICK_DB)
  3. Per-project photopick.yaml
  4. Global ~/.photopick/config.yaml  (defaults only — no API keys)
  5. Hardcoded defaults

The Drive API key is only ever read from the environment.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import logging
import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".photopick"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "photopick.yaml"

API_KEY_ENV = "PHOTOPICK_DRIVE_API_KEY"

# Matches api_key, apikey, api-key, api_secret, *_token, token, *_secret,
# secret, password, passwd, credential(s).
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["drive", "selection", "catalog", "logging"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class DriveCfg:
    """Storage provider settings (photopick.yaml: drive:).

    Attributes:
        root_folder_id: Default folder to sync when a user has none configured.
        api_base: Base URL of the Drive v3 files endpoint.
        timeout: Per-request timeout in seconds.
        thumbnail_size: Width in pixels requested for thumbnail locators.
        max_concurrency: Ceiling on simultaneous folder queries (0 = unbounded).
        api_key: Populated from PHOTOPICK_DRIVE_API_KEY only; never from YAML.
    """

    root_folder_id: str = ""
    api_base: str = "https://www.googleapis.com/drive/v3/files"
    timeout: int = 30
    thumbnail_size: int = 400
    max_concurrency: int = 8
    api_key: str | None = None


@dataclass
class SelectionCfg:
    """Selection defaults (photopick.yaml: selection:)."""

    default_limit: int = 150


@dataclass
class CatalogCfg:
    """Catalog database location (photopick.yaml: catalog:)."""

    db: str = ".photopick.db"


@dataclass
class LoggingCfg:
    """Logging verbosity (photopick.yaml: logging:)."""

    level: str = "WARNING"


@dataclass
class PhotopickConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    drive: DriveCfg = field(default_factory=DriveCfg)
    selection: SelectionCfg = field(default_factory=SelectionCfg)
    catalog: CatalogCfg = field(default_factory=CatalogCfg)
    logging: LoggingCfg = field(default_factory=LoggingCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {API_KEY_ENV}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{path}': {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> PhotopickConfig:
    """Build a *PhotopickConfig* from a merged raw YAML dict."""
    cfg = PhotopickConfig()

    try:
        if "drive" in data:
            d = data["drive"] or {}
            cfg.drive = DriveCfg(
                root_folder_id=str(d.get("root_folder_id") or cfg.drive.root_folder_id),
                api_base=str(d.get("api_base", cfg.drive.api_base)),
                timeout=int(d.get("timeout", cfg.drive.timeout)),
                thumbnail_size=int(d.get("thumbnail_size", cfg.drive.thumbnail_size)),
                max_concurrency=int(d.get("max_concurrency", cfg.drive.max_concurrency)),
            )

        if "selection" in data:
            s = data["selection"] or {}
            cfg.selection = SelectionCfg(
                default_limit=int(s.get("default_limit", cfg.selection.default_limit)),
            )

        if "catalog" in data:
            c = data["catalog"] or {}
            cfg.catalog = CatalogCfg(db=str(c.get("db", cfg.catalog.db)))

        if "logging" in data:
            lg = data["logging"] or {}
            cfg.logging = LoggingCfg(level=str(lg.get("level", cfg.logging.level)).upper())
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid configuration value: {exc}") from exc

    if cfg.selection.default_limit < 0:
        raise ConfigError("selection.default_limit must be zero or greater.")
    if cfg.drive.max_concurrency < 0:
        raise ConfigError("drive.max_concurrency must be zero (unbounded) or greater.")
    if cfg.logging.level not in logging.getLevelNamesMapping():
        raise ConfigError(
            f"logging.level '{cfg.logging.level}' is not a known level "
            "(DEBUG, INFO, WARNING, ERROR, CRITICAL)."
        )

    return cfg


def _apply_env_overrides(cfg: PhotopickConfig) -> PhotopickConfig:
    """Apply PHOTOPICK_* environment variable overrides (layer 2)."""
    if key := os.environ.get(API_KEY_ENV):
        cfg.drive.api_key = key
    if folder := os.environ.get("PHOTOPICK_ROOT_FOLDER_ID"):
        cfg.drive.root_folder_id = folder
    if db := os.environ.get("PHOTOPICK_DB"):
        cfg.catalog.db = db
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> PhotopickConfig:
    """Load and return a merged *PhotopickConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *photopick.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *PhotopickConfig* with env var overrides applied.

    Raises:
        ConfigError: If any config file contains API-key-like fields or
            values of the wrong type.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _check_no_api_keys(raw_project, project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    return _apply_env_overrides(cfg)


def write_project_config(project_dir: Path, root_folder_id: str = "") -> Path:
    """Write a starter *photopick.yaml* into *project_dir* if none exists.

    Returns:
        Path to the project config file.
    """
    target = project_dir / _PROJECT_CONFIG_NAME
    if target.exists():
        return target

    content = (
        "# Photopick project configuration.\n"
        f"# NEVER store the Drive API key here — use:  export {API_KEY_ENV}=...\n"
        "\n"
        "drive:\n"
        f"  root_folder_id: {root_folder_id!r}\n"
        "  thumbnail_size: 400\n"
        "  max_concurrency: 8\n"
        "\n"
        "selection:\n"
        "  default_limit: 150\n"
        "\n"
        "catalog:\n"
        "  db: .photopick.db\n"
        "\n"
        "logging:\n"
        "  level: WARNING\n"
    )
    target.write_text(content, encoding="utf-8")
    return target

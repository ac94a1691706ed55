"""TOML-based configuration for acceptance runs.

Loads ~/.flexcheck/defaults.toml (global) and flexcheck.toml (project),
merges them, applies environment overrides and builds the typed settings
used by the harness:

    [gcp]
    project = "my-project"
    zone = "us-central1-b"
    lookup_timeout = 60

    [terraform]
    binary = "/usr/local/bin/terraform"

    [logging]
    level = "DEBUG"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from flexcheck.core.exceptions import ConfigurationError
from flexcheck.harness.terraform import TerraformSettings
from flexcheck.logging import LogConfig
from flexcheck.providers.gcp.config import GCP

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".flexcheck" / "defaults.toml"
PROJECT_CONFIG_NAME = "flexcheck.toml"

_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "GOOGLE_PROJECT": ("gcp", "project"),
    "GOOGLE_REGION": ("gcp", "region"),
    "GOOGLE_ZONE": ("gcp", "zone"),
    "TF_BINARY": ("terraform", "binary"),
}


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything an acceptance run needs."""

    gcp: GCP = field(default_factory=GCP)
    terraform: TerraformSettings = field(default_factory=TerraformSettings)
    logging: LogConfig | None = None


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def _apply_env(config: RawConfig, environ: dict[str, str]) -> RawConfig:
    result = dict(config)
    for var, (section, key) in _ENV_OVERRIDES.items():
        if value := environ.get(var):
            result[section] = {**result.get(section, {}), key: value}
    return result


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    return _apply_env(merged, dict(os.environ) if environ is None else environ)


def _build[T](cls: type[T], section: str, raw: Any) -> T:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"[{section}] must be a table")
    valid = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    if unknown := sorted(set(raw) - valid):
        raise ConfigurationError(
            f"Unknown key(s) in [{section}]: {', '.join(unknown)}. "
            f"Valid: {', '.join(sorted(valid))}"
        )
    return cls(**raw)


def load_settings(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    config = load_config(project_dir=project_dir, global_path=global_path, environ=environ)

    if unknown := sorted(set(config) - {"gcp", "terraform", "logging"}):
        raise ConfigurationError(f"Unknown section(s): {', '.join(unknown)}")

    raw_logging = config.get("logging")
    return Settings(
        gcp=_build(GCP, "gcp", config.get("gcp", {})),
        terraform=_build(TerraformSettings, "terraform", config.get("terraform", {})),
        logging=_build(LogConfig, "logging", raw_logging) if raw_logging is not None else None,
    )

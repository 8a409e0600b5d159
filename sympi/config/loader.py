# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: turns a YAML file into a validated, frozen SympiConfig.

A config file usually sits next to the versions files it refers to
(etc/sympi.yaml and etc/openmpi.conf), so a relative `run.versions_file`
is taken relative to the config file, not to wherever sympi was started
from. Output, scratch and log paths stay relative to the working directory:
they describe where the campaign runs, not where it was configured.

Any failure stops here with a ConfigError. A campaign that starts from a
half-understood config wastes hours of cluster time before anybody notices.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from sympi.config.exceptions import ConfigLoadError, ConfigValidationError
from sympi.config.schema import SympiConfig

DEFAULT_CONFIG_VERSION = "1.0.0"


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Raises:
        ConfigLoadError: Missing, unreadable, not YAML, or not a mapping.
    """
    if not config_path.is_file():
        reason = "not a file" if config_path.exists() else "not found"
        raise ConfigLoadError(f"Config file {reason}: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            parsed = yaml.safe_load(f)
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"{config_path} must contain a YAML mapping, got {type(parsed).__name__}"
        )
    return parsed


def _anchor_versions_file(raw: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    run_section = raw.get("run")
    if not isinstance(run_section, dict):
        return raw

    versions_file = run_section.get("versions_file")
    if not isinstance(versions_file, str) or Path(versions_file).is_absolute():
        return raw

    anchored = str(base_dir / versions_file)
    return {**raw, "run": {**run_section, "versions_file": anchored}}


def load_config(config_path: Path) -> SympiConfig:
    """
    Load a config file into a SympiConfig.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (missing fields, wrong types, unknown keys).
    """
    raw = _anchor_versions_file(_read_yaml_file(config_path), config_path.parent)

    try:
        return SympiConfig.model_validate(raw)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err


def default_config() -> SympiConfig:
    """The config used when no --config is given on the command line."""
    return SympiConfig.model_validate({"global": {"config_version": DEFAULT_CONFIG_VERSION}})

"""
Configuration loader — reads reqbundle.yml into domain models.

This is the primary entry point for loading project configuration.
It reads YAML, validates against Pydantic schemas, and returns
typed domain objects. All option defaults are resolved here, once.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from reqbundle.core.models.options import InstallationOptions
from reqbundle.core.models.project import Project
from reqbundle.core.models.unit import DeploymentUnit

logger = logging.getLogger(__name__)

# Default config filename
PROJECT_CONFIG_FILE = "reqbundle.yml"


class ConfigError(Exception):
    """Raised when project configuration is invalid or missing."""


def find_project_file(start_dir: Path | None = None) -> Path | None:
    """Search for reqbundle.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to reqbundle.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_project(path: Path | None = None) -> Project:
    """Load and validate project configuration.

    Args:
        path: Explicit path to reqbundle.yml. If None, searches upward.

    Returns:
        Validated Project model.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if path is None:
        path = find_project_file()

    if path is None:
        raise ConfigError(f"No {PROJECT_CONFIG_FILE} found. Specify one with --config.")

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading project config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    project = parse_project(data, source=str(path))
    logger.info("Loaded project '%s' with %d units", project.name, len(project.units))
    return project


def parse_project(data: dict, source: str = "<config>") -> Project:
    """Validate an already-parsed mapping into a Project."""
    options_data = data.get("requirements") or {}
    if not isinstance(options_data, dict):
        raise ConfigError(f"'requirements' must be a mapping in {source}")

    functions = data.get("functions") or {}
    if not isinstance(functions, dict):
        raise ConfigError(f"'functions' must be a mapping of name → settings in {source}")

    try:
        options = InstallationOptions.model_validate(options_data)
        units = [
            DeploymentUnit.model_validate({"name": str(name), **(settings or {})})
            for name, settings in functions.items()
        ]
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e
    except TypeError as e:
        raise ConfigError(f"Invalid unit settings in {source}: {e}") from e

    return Project(name=str(data.get("name", "")), options=options, units=units)


def service_path(config_path: Path) -> Path:
    """Get the service directory from a config file path."""
    return config_path.parent.resolve()

#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the recoder CLI.

This module finds configuration files, loads them from TOML, YAML or JSON,
and validates them into a :class:`RecoderConfig`. A configuration holds
named recipes that the command line can refer to as ``@name``, a default
log level and the block size used when reading input streams.

Example ``.recoder.toml``::

    log_level = "INFO"
    block_size = 4096

    [recipes]
    shout = "MC/UCU"
    attr = "URI/UTF8/XMLATT"

"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from recoder.constants import DEFAULT_STREAM_BLOCK_SIZE
from recoder.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RECODER_CONFIG"
DEDICATED_CONFIG_FILENAMES = [".recoder.toml", ".recoder.yaml", ".recoder.yml", ".recoder.json"]
RECIPE_ALIAS_PREFIX = "@"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class RecoderConfig:
    """Validated CLI configuration.

    Parameters
    ----------
    recipes : dict[str, str]
        Recipe aliases, usable on the command line as ``@name``
    log_level : str, optional
        Log level used when neither ``--log-level`` nor ``--verbose`` is given
    block_size : int
        Characters read from an input stream per block
    source : Path, optional
        File the configuration was loaded from

    """

    recipes: Dict[str, str] = field(default_factory=dict)
    log_level: Optional[str] = None
    block_size: int = DEFAULT_STREAM_BLOCK_SIZE
    source: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[Path] = None) -> RecoderConfig:
        """Validate a loaded mapping.

        Raises
        ------
        ConfigError
            If the mapping has unknown keys or values of the wrong type

        """
        path = str(source) if source is not None else None
        unknown = sorted(set(data) - {"recipes", "log_level", "block_size"})
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}", config_path=path)

        recipes = data.get("recipes", {})
        if not isinstance(recipes, dict):
            raise ConfigError(f"'recipes' must be a table, got {type(recipes).__name__}", config_path=path)
        for name, recipe in recipes.items():
            if not isinstance(name, str) or not isinstance(recipe, str):
                raise ConfigError(f"Recipe alias '{name}' must map a name to a recipe string", config_path=path)

        log_level = data.get("log_level")
        if log_level is not None:
            if not isinstance(log_level, str) or log_level.upper() not in _LOG_LEVELS:
                raise ConfigError(
                    f"'log_level' must be one of {', '.join(_LOG_LEVELS)}, got {log_level!r}", config_path=path
                )
            log_level = log_level.upper()

        block_size = data.get("block_size", DEFAULT_STREAM_BLOCK_SIZE)
        if isinstance(block_size, bool) or not isinstance(block_size, int) or block_size <= 0:
            raise ConfigError(f"'block_size' must be a positive integer, got {block_size!r}", config_path=path)

        return cls(recipes=dict(recipes), log_level=log_level, block_size=block_size, source=source)

    def resolve_recipe(self, recipe: str) -> str:
        """Expand a ``@name`` alias; other recipes are returned unchanged.

        Raises
        ------
        ConfigError
            If the alias is not defined

        """
        if not recipe.startswith(RECIPE_ALIAS_PREFIX):
            return recipe
        name = recipe[len(RECIPE_ALIAS_PREFIX) :]
        if name not in self.recipes:
            known = ", ".join(sorted(self.recipes)) or "none"
            raise ConfigError(
                f"Unknown recipe alias '{name}' (defined: {known})",
                config_path=str(self.source) if self.source is not None else None,
            )
        resolved = self.recipes[name]
        logger.debug(f"Resolved recipe alias '{name}' to '{resolved}'")
        return resolved


def _load_pyproject_recoder_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.recoder] table of a pyproject.toml file.

    Returns an empty dict when the table is absent.
    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {e}", str(pyproject_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading {pyproject_path}: {e}", str(pyproject_path), e) from e

    config = data.get("tool", {}).get("recoder", {})
    if not isinstance(config, dict):
        raise ConfigError(
            f"[tool.recoder] section in {pyproject_path} must be a table, got {type(config).__name__}",
            str(pyproject_path),
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file in ``start_dir`` or one of its parents.

    Each directory is checked for ``.recoder.toml``, ``.recoder.yaml``,
    ``.recoder.yml`` and ``.recoder.json``, then for a ``pyproject.toml``
    with a ``[tool.recoder]`` table. The first match wins.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start from, defaults to the working directory

    Returns
    -------
    Path or None
        The configuration file found, if any

    """
    current = (start_dir if start_dir is not None else Path.cwd()).resolve()

    while True:
        for filename in DEDICATED_CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_recoder_section(pyproject_path):
                    return pyproject_path
            except ConfigError as e:
                logger.debug(f"Skipping unreadable {pyproject_path}: {e}")

        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load a raw configuration mapping from a TOML, YAML, JSON or pyproject.toml file.

    Raises
    ------
    ConfigError
        If the file is missing, unreadable, of an unsupported type, or does
        not contain a mapping

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigError(f"Configuration file does not exist: {config_path}", str(config_path))

    if config_path.name.lower() == "pyproject.toml":
        return _load_pyproject_recoder_section(config_path)

    ext = config_path.suffix.lower()
    if ext == ".toml":
        return _load_toml_config(config_path)
    if ext in (".yaml", ".yml"):
        return _load_yaml_config(config_path)
    if ext == ".json":
        return _load_json_config(config_path)
    raise ConfigError(f"Unsupported config file format: {ext or config_path.name}. Use .toml, .yaml or .json")


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading TOML config {config_path}: {e}", str(config_path), e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading JSON config {config_path}: {e}", str(config_path), e) from e

    if not isinstance(config, dict):
        raise ConfigError(f"JSON config file must contain an object, got {type(config).__name__}", str(config_path))
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {config_path}: {e}", str(config_path), e) from e
    except OSError as e:
        raise ConfigError(f"Error reading YAML config {config_path}: {e}", str(config_path), e) from e

    # An empty YAML document loads as None
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"YAML config file must contain a mapping, got {type(config).__name__}", str(config_path))
    return config


def load_config_with_priority(
    explicit_path: Optional[str] = None,
    env_var_path: Optional[str] = None,
    discover: bool = True,
    start_dir: Optional[Path] = None,
) -> RecoderConfig:
    """Load the configuration that applies to this invocation.

    Priority order (highest to lowest):
    1. Explicit config file path (``--config``)
    2. Path from the ``RECODER_CONFIG`` environment variable
    3. A file discovered from the working directory upwards

    Parameters
    ----------
    explicit_path : str, optional
        Path given with ``--config``
    env_var_path : str, optional
        Path taken from ``RECODER_CONFIG``
    discover : bool, default True
        Whether to search for a configuration file when no path is given
    start_dir : Path, optional
        Where discovery starts, defaults to the working directory

    Returns
    -------
    RecoderConfig
        The validated configuration, or the defaults when none was found

    Raises
    ------
    ConfigError
        If a configuration file was found or named but is invalid

    """
    path: Optional[Path] = None
    if explicit_path:
        path = Path(explicit_path)
    elif env_var_path:
        path = Path(env_var_path)
    elif discover:
        path = find_config_in_parents(start_dir)

    if path is None:
        return RecoderConfig()

    logger.debug(f"Loading configuration from {path}")
    return RecoderConfig.from_dict(load_config_file(path), source=path)


__all__ = [
    "CONFIG_ENV_VAR",
    "RecoderConfig",
    "find_config_in_parents",
    "load_config_file",
    "load_config_with_priority",
]

#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for redactmd.

Configuration is read from JSON, TOML or YAML files, or from the
``[tool.redactmd]`` table of a ``pyproject.toml``. Recognized keys:

log_level
    Default logging level for the command line (e.g. ``"INFO"``)
markdown
    Table of MarkdownRendererOptions fields
parser
    Table of MarkdownParserOptions fields other than ``redact`` and
    ``recognize_placeholders``, which are chosen per operation

Example ``.redactmd.toml``::

    log_level = "INFO"

    [markdown]
    emphasis_symbol = "_"
    bullet_symbols = "-"

"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import fields
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from redactmd.constants import CONFIG_ENV_VAR, CONFIG_FILENAMES
from redactmd.exceptions import FileError, ValidationError
from redactmd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

logger = logging.getLogger(__name__)

PYPROJECT_FILENAME = "pyproject.toml"

# Chosen by each operation, never by configuration
_RESERVED_PARSER_KEYS = frozenset({"redact", "recognize_placeholders"})


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.redactmd]`` table of a pyproject.toml, or ``{}`` if absent.

    Raises
    ------
    ValidationError
        If the file is not valid TOML or the table is not a table

    """
    data = _load_toml_config(pyproject_path)
    section = data.get("tool", {}).get("redactmd", {})
    if not isinstance(section, dict):
        raise ValidationError(
            f"[tool.redactmd] section in {pyproject_path} must be a table, got {type(section).__name__}",
            parameter_name="config",
        )
    return section


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file in ``start_dir`` or one of its parents.

    Each directory is checked for the dedicated config files in
    CONFIG_FILENAMES order and then for a pyproject.toml holding a
    ``[tool.redactmd]`` table. Unreadable pyproject files are skipped.

    Parameters
    ----------
    start_dir : Path, optional
        Directory to start from, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / PYPROJECT_FILENAME
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ValidationError as e:
                logger.debug("Ignoring %s during config discovery: %s", pyproject_path, e.message)

        parent = current.parent
        if parent == current:
            return None
        current = parent


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    Searches ``start_dir`` (default: cwd) and its parents, then the user's
    home directory.
    """
    found = find_config_in_parents(start_dir)
    if found:
        return found

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML or pyproject.toml file.

    The format is chosen from the file name and extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary

    Raises
    ------
    FileError
        If the file does not exist or cannot be read
    ValidationError
        If the content cannot be parsed or has an unsupported format

    """
    config_path = Path(config_path)

    if not config_path.is_file():
        raise FileError(f"Configuration file does not exist: {config_path}", file_path=str(config_path))

    ext = config_path.suffix.lower()
    if config_path.name.lower() == PYPROJECT_FILENAME:
        config = _load_pyproject_section(config_path)
    elif ext == ".toml":
        config = _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        config = _load_yaml_config(config_path)
    elif ext == ".json":
        config = _load_json_config(config_path)
    else:
        raise ValidationError(
            f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml",
            parameter_name="config",
            parameter_value=str(config_path),
        )

    logger.debug("Loaded configuration from %s", config_path)
    return config


def _read_bytes(config_path: Path) -> bytes:
    try:
        return config_path.read_bytes()
    except OSError as e:
        raise FileError(f"Error reading config file {config_path}: {e}", str(config_path), e) from e


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from a TOML file."""
    raw = _read_bytes(config_path)
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(
            f"Invalid TOML in config file {config_path}: {e}", parameter_name="config", original_error=e
        ) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from a JSON file."""
    raw = _read_bytes(config_path)
    try:
        config = json.loads(raw.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(
            f"Invalid JSON in config file {config_path}: {e}", parameter_name="config", original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ValidationError(
            f"JSON config file must contain an object, got {type(config).__name__}", parameter_name="config"
        )
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from a YAML file. An empty file is an empty config."""
    raw = _read_bytes(config_path)
    try:
        config = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValidationError(
            f"Invalid YAML in config file {config_path}: {e}", parameter_name="config", original_error=e
        ) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValidationError(
            f"YAML config file must contain a mapping, got {type(config).__name__}", parameter_name="config"
        )
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries, ``override`` winning.

    Nested dictionaries are merged recursively rather than replaced.

    Examples
    --------
    >>> merge_configs({"markdown": {"emphasis_symbol": "_"}}, {"markdown": {"bullet_symbols": "-"}})
    {'markdown': {'emphasis_symbol': '_', 'bullet_symbols': '-'}}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load configuration with priority handling.

    Priority order (highest to lowest):

    1. Explicit config file path (``--config``)
    2. ``env_var_path``, or the ``REDACTMD_CONFIG`` environment variable when
       ``env_var_path`` is None
    3. Auto-discovered config file

    Returns
    -------
    dict
        Loaded configuration, empty if no file was found

    """
    if explicit_path:
        return load_config_file(explicit_path)

    if env_var_path is None:
        env_var_path = os.environ.get(CONFIG_ENV_VAR)
    if env_var_path:
        return load_config_file(env_var_path)

    discovered = discover_config_file()
    if discovered:
        return load_config_file(discovered)

    return {}


def _options_kwargs(table: Any, options_class: type, table_name: str, reserved: frozenset = frozenset()) -> dict:
    """Validate a config table against the fields of an options dataclass."""
    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ValidationError(
            f"[{table_name}] must be a table, got {type(table).__name__}", parameter_name=table_name
        )

    known = {f.name for f in fields(options_class)} - reserved
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValidationError(
            f"Unknown option(s) in [{table_name}]: {', '.join(unknown)}",
            parameter_name=table_name,
            parameter_value=unknown,
        )
    return dict(table)


def renderer_options_from_config(config: Dict[str, Any]) -> MarkdownRendererOptions:
    """Build renderer options from the ``markdown`` table of a config.

    Raises
    ------
    ValidationError
        If the table has unknown keys or invalid values

    """
    kwargs = _options_kwargs(config.get("markdown"), MarkdownRendererOptions, "markdown")
    try:
        return MarkdownRendererOptions(**kwargs)
    except ValueError as e:
        raise ValidationError(f"Invalid [markdown] option: {e}", parameter_name="markdown", original_error=e) from e


def parser_options_from_config(config: Dict[str, Any]) -> MarkdownParserOptions:
    """Build base parser options from the ``parser`` table of a config.

    Raises
    ------
    ValidationError
        If the table has unknown or reserved keys

    """
    kwargs = _options_kwargs(config.get("parser"), MarkdownParserOptions, "parser", _RESERVED_PARSER_KEYS)
    return MarkdownParserOptions(**kwargs)

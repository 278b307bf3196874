"""Collection of raw configuration sources in precedence order."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .cli import CommandLine
from .exceptions import ConfigFileError
from .exceptions import ConfigFileParseError
from .models import ConfigOptions
from .utils import MISSING
from .utils import resolve_prefix

logger = logging.getLogger(__name__)

CONFIG_JSON_FILE_ENV = "CONFIG_JSON_FILE"
DEFAULT_CONFIG_FILE = "config.json"
YAML_SUFFIXES = (".yaml", ".yml")


def resolve_config_file_path(
    options: ConfigOptions, command_line_path: str | None, environ: Mapping[str, str]
) -> Path | None:
    """Decide which configuration file to read.

    Resolution order (first match wins):
    1. --config-json-file on the command line
    2. CONFIG_JSON_FILE environment variable
    3. Path given as the json_file option
    4. config.json in the working directory

    Returns:
        Path to read, or None when the file source is disabled
    """
    if options.json_file is False:
        return None

    option_path = None if isinstance(options.json_file, bool) else options.json_file
    candidate = command_line_path or environ.get(CONFIG_JSON_FILE_ENV) or option_path or DEFAULT_CONFIG_FILE
    return Path(candidate)


def read_config_file(path: Path) -> Any:
    """Read and parse a configuration file.

    JSON unless the suffix says YAML.

    Args:
        path: File to read

    Returns:
        Parsed data, or an empty dict if the file doesn't exist

    Raises:
        ConfigFileParseError: If the content cannot be parsed
        ConfigFileError: If the file exists but cannot be read
    """
    if not path.exists():
        logger.debug(f"No configuration file at {path}")
        return {}

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigFileParseError(path, str(e)) from e
    except OSError as e:
        raise ConfigFileError(f"Failed to read configuration from {path}: {e}") from e

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigFileParseError(path, str(e)) from e
        data = data if data is not None else {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigFileParseError(path, str(e)) from e

    logger.debug(f"Read configuration from {path}")
    return data


def collect_sources(options: ConfigOptions, command_line: CommandLine, environ: Mapping[str, str]) -> list[Any]:
    """Gather raw sources, lowest precedence first.

    Order:
    1. Defaults from options.defaults_fn (called once, here)
    2. Configuration file content
    3. Sub-tree of the file at options.prefix (MISSING when absent)
    4. Command-line overrides

    Returns:
        List of four raw values to merge in order
    """
    if command_line.positionals:
        logger.warning(f"Unrecognized command line options: {' '.join(command_line.positionals)}")

    defaults = options.defaults_fn() if options.defaults_fn else None

    path = resolve_config_file_path(options, command_line.config_json_file, environ)
    file_data = read_config_file(path) if path is not None else {}

    prefixed = resolve_prefix(file_data, options.prefix) if options.prefix else MISSING
    if options.prefix and prefixed is MISSING:
        logger.debug(f"Prefix '{options.prefix}' not found in configuration file")

    return [
        defaults if defaults is not None else {},
        file_data,
        prefixed,
        command_line.overrides,
    ]

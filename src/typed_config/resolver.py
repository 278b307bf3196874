"""Configuration resolver and accessor."""

import dataclasses
import json
import logging
import os
import sys
from typing import Any

from .cli import CommandLine
from .cli import parse_command_line
from .cli import usage_text
from .exceptions import UndefinedConfigKeyError
from .models import ConfigOptions
from .models import Outcome
from .models import Resolution
from .schema import Schema
from .schema import as_schema
from .schema import key_paths
from .sources import collect_sources
from .utils import MISSING
from .utils import lookup_path
from .utils import merge_sources

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Resolves one schema against defaults, a config file and the command line.

    Merge order (later overrides earlier):
    1. Defaults (lowest priority)
    2. Configuration file
    3. Prefixed sub-tree of the configuration file
    4. Command-line overrides (highest priority)

    Args:
        schema: Schema instance, or a type pydantic can validate
        options: Source options (defaults to ConfigOptions())
    """

    def __init__(self, schema: Any, options: ConfigOptions | None = None):
        self.schema: Schema = as_schema(schema)
        self.options = options or ConfigOptions()

    def resolve(self) -> Resolution:
        """Merge all sources and validate the result.

        Help and print-config flags come back as an EXIT resolution
        carrying the text to print; the caller decides whether to exit.

        Returns:
            Resolution with the validated configuration, or an exit request

        Raises:
            ConfigFileParseError: If the configuration file is malformed
            MergeConflictError: If sources disagree on the type of a key
            SchemaValidationError: If the merged data does not satisfy the schema
        """
        command_line = self._parse_command_line()

        if command_line.help:
            return Resolution(Outcome.EXIT, output=usage_text(self._program(), self.key_paths()))

        sources = collect_sources(self.options, command_line, self._environ())
        merged = merge_sources(*sources)
        logger.debug(f"Merged configuration keys: {sorted(merged)}")

        config = self.schema.validate(merged)
        logger.info(f"Resolved configuration with {self.schema!r}")

        if command_line.print_config:
            return Resolution(Outcome.EXIT, config=config, output=json.dumps(self.schema.dump(config), indent=2))

        return Resolution(Outcome.RESOLVED, config=config)

    def key_paths(self) -> list[str]:
        """List every dotted key path the schema declares."""
        return key_paths(self.schema.fields())

    # ===== Private Helpers =====

    def _parse_command_line(self) -> CommandLine:
        if not self.options.command_line:
            return CommandLine()
        argv = self.options.argv if self.options.argv is not None else sys.argv[1:]
        return parse_command_line(argv, self.schema.fields())

    def _environ(self):
        return self.options.environ if self.options.environ is not None else os.environ

    def _program(self) -> str:
        return self.options.program or self.options.prefix or (sys.argv[0] if sys.argv else "") or "python <script>"


class ConfigGetter:
    """Read-only access to a validated configuration by dotted key path.

    Example:
        ```python
        get_config = get_config_getter(Settings)
        port = get_config("server.port")
        timeout = get_config("client.timeout", 30)
        ```
    """

    def __init__(self, config: Any, schema: Schema):
        self._config = config
        self.schema = schema

    @property
    def config(self) -> Any:
        """The validated configuration value."""
        return self._config

    def __call__(self, key: str, fallback: Any = MISSING) -> Any:
        return self.get(key, fallback)

    def get(self, key: str, fallback: Any = MISSING) -> Any:
        """Get the value at a dotted key path.

        Args:
            key: Dotted path, e.g. "server.port"
            fallback: Value returned when the key has no value

        Returns:
            The configured value, or fallback

        Raises:
            UndefinedConfigKeyError: If the key has no value and no fallback was given
        """
        value = lookup_path(self._config, key)
        if value is MISSING or value is None:
            if fallback is MISSING:
                raise UndefinedConfigKeyError(key)
            return fallback
        return value

    def keys(self) -> list[str]:
        """List every dotted key path the schema declares."""
        return key_paths(self.schema.fields())

    def __repr__(self) -> str:
        return f"ConfigGetter({self.schema!r})"


def get_config_getter(schema: Any, options: ConfigOptions | None = None, **overrides: Any) -> ConfigGetter:
    """Resolve configuration once and return an accessor for it.

    Keyword arguments override fields of options, e.g.
    ``get_config_getter(Settings, prefix="apps.api", json_file=False)``.

    Prints usage text or the resolved configuration and exits with status 0
    when --help or --print-config is given.

    Raises:
        ConfigFileParseError: If the configuration file is malformed
        MergeConflictError: If sources disagree on the type of a key
        SchemaValidationError: If the merged data does not satisfy the schema
    """
    options = dataclasses.replace(options or ConfigOptions(), **overrides)
    resolver = ConfigResolver(schema, options)
    resolution = resolver.resolve()

    if resolution.exit_requested:
        print(resolution.output)
        sys.exit(resolution.exit_code)

    return ConfigGetter(resolution.config, resolver.schema)

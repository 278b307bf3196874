"""Exceptions for typed-config."""

from typing import Any


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileError(ConfigError):
    """Error reading the configuration file."""

    pass


class ConfigFileParseError(ConfigFileError):
    """Configuration file exists but its content cannot be parsed."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        super().__init__(f"Failed to parse configuration file {path}: {reason}")


class MergeConflictError(ConfigError):
    """Two sources disagree on the structural type of a key."""

    def __init__(self, key: str, override_type: type):
        self.key = key
        self.override_type = override_type
        super().__init__(f"Cannot merge '{key}' into an object from type {override_type.__name__}")


class ConfigValidationError(ConfigError):
    """Error validating configuration data."""

    pass


class SchemaValidationError(ConfigValidationError):
    """Merged configuration data does not satisfy the schema.

    Attributes:
        errors: Structured error detail reported by the validator
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(message)


class UndefinedConfigKeyError(ConfigError, KeyError):
    """Accessor called with a key that has no value and no fallback."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"The config variable '{self.key}' is not defined."


class CommandLineError(ConfigError):
    """Process arguments cannot be parsed."""

    pass

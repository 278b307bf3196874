"""Data models for typed-config."""

import os
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Outcome(Enum):
    """Result kind of a resolution.

    EXIT means a command-line flag asked for output and process exit
    instead of a configuration.
    """

    RESOLVED = "resolved"
    EXIT = "exit"


@dataclass(frozen=True)
class ConfigOptions:
    """Options controlling which sources feed the configuration.

    Attributes:
        prefix: Dotted path within the config file whose sub-tree is hoisted to the root
        json_file: True for the default file name, a path, or False to skip the file source
        command_line: Whether process arguments are parsed as overrides
        defaults_fn: Zero-argument callable returning partial default values
        argv: Arguments to parse instead of sys.argv[1:]
        environ: Environment to read instead of os.environ
        program: Program name shown in usage text
    """

    prefix: str | None = None
    json_file: bool | str | os.PathLike = True
    command_line: bool = True
    defaults_fn: Callable[[], Mapping[str, Any] | None] | None = None
    argv: Sequence[str] | None = None
    environ: Mapping[str, str] | None = None
    program: str | None = None


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving configuration sources.

    Attributes:
        outcome: Whether a configuration was produced or an exit was requested
        config: Validated configuration (RESOLVED only)
        output: Text to print before exiting (EXIT only)
        exit_code: Process exit status (EXIT only)
    """

    outcome: Outcome
    config: Any = None
    output: str = ""
    exit_code: int = 0

    @property
    def exit_requested(self) -> bool:
        return self.outcome is Outcome.EXIT

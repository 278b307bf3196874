"""Command-line parsing for configuration overrides.

Control flags (help, print-config, config file path) are handled by argparse.
Every other ``--key value`` pair becomes an override at that key path:

    --server.port 8080        {"server": {"port": "8080"}}
    --log-level=debug         {"log_level": "debug"}   (with a schema declaring log_level)
    --verbose                 {"verbose": True}
    --no-cache                {"cache": False}
    --tag a --tag b           {"tag": ["a", "b"]}

Values stay strings; converting them is the schema's job.
"""

import argparse
import re
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from .exceptions import CommandLineError
from .exceptions import MergeConflictError
from .schema import FieldTree
from .utils import MISSING
from .utils import split_key_path

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[-_]+")


@dataclass(frozen=True)
class CommandLine:
    """Parsed process arguments.

    Attributes:
        overrides: Nested mapping of override values
        positionals: Arguments that are not options
        help: Whether usage text was requested
        print_config: Whether the resolved configuration should be printed
        config_json_file: Configuration file path given on the command line
    """

    overrides: dict[str, Any] = field(default_factory=dict)
    positionals: list[str] = field(default_factory=list)
    help: bool = False
    print_config: bool = False
    config_json_file: str | None = None


class _ControlParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message: str):
        raise CommandLineError(message)


def _control_parser() -> argparse.ArgumentParser:
    parser = _ControlParser(add_help=False, allow_abbrev=False, exit_on_error=False)
    parser.add_argument("--help", action="store_true", dest="help")
    parser.add_argument("--print-config", "--printConfig", action="store_true", dest="print_config")
    parser.add_argument("--config-json-file", "--configJsonFile", dest="config_json_file")
    return parser


def parse_command_line(argv: Sequence[str], fields: FieldTree | None = None) -> CommandLine:
    """Parse process arguments into control flags and configuration overrides.

    Args:
        argv: Arguments without the program name
        fields: Declared schema field names, used to normalize key spellings

    Returns:
        CommandLine with overrides and flags

    Raises:
        CommandLineError: If a control flag is malformed, e.g. --config-json-file without a path
        MergeConflictError: If a key is given both a value and nested keys
    """
    argv = list(argv)
    rest: list[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, rest = argv[:split], argv[split + 1 :]

    # Only the exact token -h; values such as -hello are not flags
    short_help = "-h" in argv
    argv = [token for token in argv if token != "-h"]

    try:
        namespace, extras = _control_parser().parse_known_args(argv)
    except argparse.ArgumentError as e:
        raise CommandLineError(str(e)) from e
    overrides, positionals = _tokenize(extras, fields or {})

    return CommandLine(
        overrides=overrides,
        positionals=positionals + rest,
        help=namespace.help or short_help,
        print_config=namespace.print_config,
        config_json_file=namespace.config_json_file,
    )


def _is_option(token: str) -> bool:
    return token.startswith("--") and len(token) > 2


def _tokenize(tokens: list[str], fields: FieldTree) -> tuple[dict[str, Any], list[str]]:
    overrides: dict[str, Any] = {}
    positionals: list[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if not _is_option(token):
            positionals.append(token)
            i += 1
            continue

        name, sep, value = token[2:].partition("=")
        if sep:
            _assign(overrides, name, value, fields)
        elif _is_negation(name, fields):
            _assign(overrides, name[3:], False, fields)
        elif i + 1 < len(tokens) and not _is_option(tokens[i + 1]):
            _assign(overrides, name, tokens[i + 1], fields)
            i += 1
        else:
            _assign(overrides, name, True, fields)
        i += 1

    return overrides, positionals


def _is_negation(name: str, fields: FieldTree) -> bool:
    if not name.startswith("no-") or len(name) <= 3:
        return False
    # A declared field spelled no-<x> is a key, not a negation
    return normalize_key(split_key_path(name)[0], fields) not in fields


def _assign(overrides: dict[str, Any], name: str, value: Any, fields: FieldTree) -> None:
    segments = split_key_path(name)
    node = overrides
    tree: FieldTree | None = fields
    path: list[str] = []

    for segment in segments[:-1]:
        key = normalize_key(segment, tree)
        path.append(key)
        child = node.get(key, MISSING)
        if child is MISSING:
            child = node[key] = {}
        elif not isinstance(child, dict):
            raise MergeConflictError(".".join(path), dict)
        node = child
        tree = tree.get(key) if tree else None

    leaf = normalize_key(segments[-1], tree)
    path.append(leaf)
    existing = node.get(leaf, MISSING)
    if existing is MISSING:
        node[leaf] = value
    elif isinstance(existing, dict):
        raise MergeConflictError(".".join(path), type(value))
    elif isinstance(existing, list):
        existing.append(value)
    else:
        node[leaf] = [existing, value]


def key_words(name: str) -> list[str]:
    """Split a key into lowercase words, so kebab, snake and camel spellings compare equal."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _CAMEL_BOUNDARY.sub(r"\1_\2", name)
    return [word.lower() for word in _SEPARATORS.split(name) if word]


def normalize_key(segment: str, tree: FieldTree | None) -> str:
    """Map a command-line key segment onto the declared field it spells, if any."""
    if not tree or segment in tree:
        return segment
    words = key_words(segment)
    for name in tree:
        if key_words(name) == words:
            return name
    return segment


def usage_text(program: str, key_paths: Sequence[str] = ()) -> str:
    """Render the help screen."""
    lines = [
        f"Usage: {program} [--config-json-file <file>] [--<key> <value>]",
        "Options:",
        "  --config-json-file <file>  Path to config JSON file",
        "  --print-config             Display parsed config and exit",
        "  --<key> <value>            Override config value",
        "  -h, --help                 Show this message and exit",
    ]
    if key_paths:
        lines.append("Configuration keys:")
        lines.extend(f"  {path}" for path in key_paths)
    return "\n".join(lines)

"""Tests for command-line parsing."""

import pytest
from typed_config import CommandLineError
from typed_config import MergeConflictError
from typed_config.cli import key_words
from typed_config.cli import normalize_key
from typed_config.cli import parse_command_line
from typed_config.cli import usage_text

FIELDS = {
    "some_value": None,
    "someObject": {"nestedFlag": None},
    "no_proxy": None,
    "cache": None,
}


class TestParseCommandLine:
    """Test parse_command_line function."""

    def test_empty(self):
        """Test no arguments gives no overrides and no flags."""
        parsed = parse_command_line([])
        assert parsed.overrides == {}
        assert parsed.positionals == []
        assert parsed.help is False
        assert parsed.print_config is False
        assert parsed.config_json_file is None

    def test_key_value_forms(self):
        """Test --key value and --key=value."""
        parsed = parse_command_line(["--a", "1", "--b=two"])
        assert parsed.overrides == {"a": "1", "b": "two"}

    def test_dotted_keys_nest(self):
        """Test dotted keys build nested mappings."""
        parsed = parse_command_line(["--server.port", "80", "--server.host=h"])
        assert parsed.overrides == {"server": {"port": "80", "host": "h"}}

    def test_bare_flag_is_true(self):
        """Test a flag without value is True."""
        parsed = parse_command_line(["--verbose", "--debug=1", "--last"])
        assert parsed.overrides == {"verbose": True, "debug": "1", "last": True}

    def test_negated_flag_is_false(self):
        """Test --no-x sets x to False."""
        parsed = parse_command_line(["--no-cache"])
        assert parsed.overrides == {"cache": False}

    def test_declared_no_field_is_not_negation(self):
        """Test a declared field starting with no_ is a key."""
        parsed = parse_command_line(["--no-proxy", "localhost"], FIELDS)
        assert parsed.overrides == {"no_proxy": "localhost"}

    def test_negative_number_value(self):
        """Test a negative number is taken as a value."""
        parsed = parse_command_line(["--offset", "-5"])
        assert parsed.overrides == {"offset": "-5"}

    def test_repeated_key_collects_list(self):
        """Test repeated keys collect into a list."""
        parsed = parse_command_line(["--tag", "a", "--tag", "b", "--tag", "c"])
        assert parsed.overrides == {"tag": ["a", "b", "c"]}

    def test_positionals(self):
        """Test bare arguments are positionals."""
        parsed = parse_command_line(["stray", "--a", "1", "other"])
        assert parsed.overrides == {"a": "1"}
        assert parsed.positionals == ["stray", "other"]

    def test_double_dash_ends_options(self):
        """Test everything after -- is positional."""
        parsed = parse_command_line(["--a", "1", "--", "--b", "2"])
        assert parsed.overrides == {"a": "1"}
        assert parsed.positionals == ["--b", "2"]

    def test_control_flags(self):
        """Test help, print-config and config file flags are not overrides."""
        parsed = parse_command_line(["--help", "--print-config", "--config-json-file", "c.json", "--a", "1"])
        assert parsed.help is True
        assert parsed.print_config is True
        assert parsed.config_json_file == "c.json"
        assert parsed.overrides == {"a": "1"}

    def test_control_flags_camel_case(self):
        """Test camelCase spellings of control flags."""
        parsed = parse_command_line(["--printConfig", "--configJsonFile=c.json"])
        assert parsed.print_config is True
        assert parsed.config_json_file == "c.json"
        assert parsed.overrides == {}

    def test_short_help(self):
        """Test -h requests help."""
        assert parse_command_line(["-h"]).help is True

    def test_value_starting_with_h_is_not_help(self):
        """Test a value such as -hello is an override, not the -h flag."""
        parsed = parse_command_line(["--name", "-hello"])
        assert parsed.help is False
        assert parsed.overrides == {"name": "-hello"}

    def test_config_file_flag_without_path(self):
        """Test a missing --config-json-file value raises instead of exiting."""
        with pytest.raises(CommandLineError):
            parse_command_line(["--config-json-file"])

    def test_spellings_normalized_to_fields(self):
        """Test kebab, snake and camel spellings map onto declared fields."""
        parsed = parse_command_line(["--some-value", "x"], FIELDS)
        assert parsed.overrides == {"some_value": "x"}

        parsed = parse_command_line(["--someValue=y"], FIELDS)
        assert parsed.overrides == {"some_value": "y"}

        parsed = parse_command_line(["--some-object.nested-flag", "true"], FIELDS)
        assert parsed.overrides == {"someObject": {"nestedFlag": "true"}}

    def test_unknown_keys_kept_as_written(self):
        """Test keys without a declared field are not renamed."""
        parsed = parse_command_line(["--module-sources.provider-a", "src"], FIELDS)
        assert parsed.overrides == {"module-sources": {"provider-a": "src"}}

    def test_value_then_nested_conflicts(self):
        """Test a key cannot be both a value and a parent."""
        with pytest.raises(MergeConflictError) as exc_info:
            parse_command_line(["--a", "1", "--a.b", "2"])
        assert exc_info.value.key == "a"

    def test_nested_then_value_conflicts(self):
        """Test a parent key cannot then take a value."""
        with pytest.raises(MergeConflictError) as exc_info:
            parse_command_line(["--a.b", "2", "--a", "1"])
        assert exc_info.value.key == "a"


class TestKeySpelling:
    """Test key_words and normalize_key."""

    def test_key_words(self):
        """Test words extracted from different spellings."""
        assert key_words("someValue") == ["some", "value"]
        assert key_words("some-value") == ["some", "value"]
        assert key_words("some_value") == ["some", "value"]
        assert key_words("HTTPPort") == ["http", "port"]

    def test_normalize_without_fields(self):
        """Test segments are unchanged without declared fields."""
        assert normalize_key("some-value", None) == "some-value"
        assert normalize_key("some-value", {}) == "some-value"

    def test_normalize_exact_match_first(self):
        """Test an exact declared name wins."""
        assert normalize_key("some_value", FIELDS) == "some_value"


class TestUsageText:
    """Test usage_text function."""

    def test_lists_options(self):
        """Test the usage text names the program and options."""
        text = usage_text("app.py")
        assert text.startswith("Usage: app.py [--config-json-file <file>]")
        assert "--print-config" in text
        assert "Configuration keys:" not in text

    def test_lists_keys(self):
        """Test declared keys are listed."""
        text = usage_text("app.py", ["a", "a.b"])
        assert "Configuration keys:" in text
        assert "  a.b" in text

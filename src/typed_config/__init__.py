"""typed-config: schema-validated deploy-time configuration from layered sources.

This library merges configuration from four sources, lowest precedence first:
- Defaults returned by a caller-supplied function
- A JSON (or YAML) configuration file
- A sub-tree of that file selected by a dotted prefix
- Command-line arguments (--key value, --nested.key value)

The merged data is validated once against a schema (a pydantic model or any
object implementing the Schema protocol) and read through a dotted-path
accessor.

Public API:
    get_config_getter: Resolve configuration and return an accessor
    ConfigResolver: Resolution without process exit, for embedding and tests
    ConfigGetter: Dotted-path accessor over a validated configuration
    ConfigOptions: Source options (prefix, json_file, command_line, defaults_fn)
    Schema, PydanticSchema: Schema capability interface and pydantic adapter
    deep_merge: Merge function with list-append semantics
    ConfigError and subclasses: Exception types

Example:
    ```python
    from pydantic import BaseModel
    from typed_config import get_config_getter

    class Database(BaseModel):
        host: str = "localhost"
        port: int = 5432

    class Settings(BaseModel):
        name: str = "service"
        database: Database = Database()

    get_config = get_config_getter(Settings, prefix="apps.api")

    get_config("name")            # str
    get_config("database.port")   # int
    get_config("missing", 7)      # 7
    ```

Command line:
    python app.py --config-json-file prod.json --database.port 6543
    python app.py --print-config
"""

from .exceptions import CommandLineError
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigFileParseError
from .exceptions import ConfigValidationError
from .exceptions import MergeConflictError
from .exceptions import SchemaValidationError
from .exceptions import UndefinedConfigKeyError
from .models import ConfigOptions
from .models import Outcome
from .models import Resolution
from .resolver import ConfigGetter
from .resolver import ConfigResolver
from .resolver import get_config_getter
from .schema import PydanticSchema
from .schema import Schema
from .utils import MISSING
from .utils import deep_merge

__version__ = "0.1.0"

__all__ = [
    "get_config_getter",
    "ConfigResolver",
    "ConfigGetter",
    "ConfigOptions",
    "Outcome",
    "Resolution",
    "Schema",
    "PydanticSchema",
    "deep_merge",
    "MISSING",
    "ConfigError",
    "CommandLineError",
    "ConfigFileError",
    "ConfigFileParseError",
    "ConfigValidationError",
    "MergeConflictError",
    "SchemaValidationError",
    "UndefinedConfigKeyError",
]

"""Schema capability interface and the pydantic adapter behind it."""

import logging
import types
import typing
from typing import Any
from typing import Protocol
from typing import runtime_checkable

from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic import ValidationError

from .exceptions import SchemaValidationError

logger = logging.getLogger(__name__)

# Nested field names; None marks a leaf or a field whose keys are not declared
FieldTree = dict[str, "FieldTree | None"]


@runtime_checkable
class Schema(Protocol):
    """What the resolver needs from a schema.

    A schema validates candidate data into a defaulted value, turns such a
    value back into plain data and describes its declared field names.
    """

    def validate(self, data: Any) -> Any: ...

    def dump(self, value: Any) -> Any: ...

    def fields(self) -> FieldTree: ...


class PydanticSchema:
    """Schema backed by any type pydantic can validate, usually a BaseModel subclass.

    Args:
        type_: Model class or other type understood by pydantic.TypeAdapter
    """

    def __init__(self, type_: Any):
        self.type_ = type_
        self._adapter = TypeAdapter(type_)

    def validate(self, data: Any) -> Any:
        """Validate and default merged data.

        Raises:
            SchemaValidationError: If pydantic rejects the data
        """
        try:
            return self._adapter.validate_python(data)
        except ValidationError as e:
            logger.debug(f"{self!r} rejected configuration with {e.error_count()} error(s)")
            raise SchemaValidationError(str(e), errors=e.errors(include_url=False)) from e

    def dump(self, value: Any) -> Any:
        """Convert a validated value into JSON-compatible plain data."""
        return self._adapter.dump_python(value, mode="json")

    def fields(self) -> FieldTree:
        return model_field_tree(self.type_)

    def __repr__(self) -> str:
        return f"PydanticSchema({getattr(self.type_, '__name__', self.type_)!r})"


def as_schema(schema: Any) -> Schema:
    """Return schema as-is when it already satisfies Schema, else wrap it for pydantic."""
    if not isinstance(schema, type) and isinstance(schema, Schema):
        return schema
    return PydanticSchema(schema)


def model_field_tree(type_: Any, _seen: frozenset = frozenset()) -> FieldTree:
    """Describe the field names a model declares, recursing into nested models.

    Non-model types have no declared fields and give an empty tree. A model
    that refers back to itself is a leaf below its first occurrence.
    """
    model = _model_class(type_)
    if model is None:
        return {}

    seen = _seen | {model}
    tree: FieldTree = {}
    for name, field in model.model_fields.items():
        nested = _model_class(field.annotation)
        if nested is None or nested in seen:
            tree[name] = None
        else:
            tree[name] = model_field_tree(nested, seen)
    return tree


def key_paths(tree: FieldTree, parent: str = "") -> list[str]:
    """Flatten a field tree into every dotted key path it declares."""
    paths = []
    for name, subtree in tree.items():
        path = f"{parent}.{name}" if parent else name
        paths.append(path)
        if subtree:
            paths.extend(key_paths(subtree, path))
    return paths


def _model_class(annotation: Any) -> type[BaseModel] | None:
    """Find the model class in an annotation, looking through Optional/Union."""
    origin = typing.get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return annotation
        return None
    if origin is typing.Annotated:
        return _model_class(typing.get_args(annotation)[0])
    if origin not in (typing.Union, types.UnionType):
        return None
    for arg in typing.get_args(annotation):
        model = _model_class(arg)
        if model is not None:
            return model
    return None

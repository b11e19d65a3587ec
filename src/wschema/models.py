"""Core enums, constants, and definition records for the schema engine.

Enums:
    SchemaType   -- Type tag of every schema variant (the closed set the
                    registry in ``schemas`` resolves).
    IssueCode    -- Vocabulary of validation failures.
    UnknownKeys  -- Object policy for keys not declared in the shape
                    (strip, passthrough, strict).

Records:
    Check            -- One post-validation rule attached to a schema.
    SchemaDefinition -- Immutable configuration a schema node is built from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    from .context import ParseContext, Payload


class SchemaType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NONE = "none"
    UNKNOWN = "unknown"
    DATE = "date"
    LITERAL = "literal"
    ENUM = "enum"
    INSTANCE_OF = "instance_of"
    CUSTOM = "custom"
    ARRAY = "array"
    RECORD = "record"
    OBJECT = "object"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    CATCH = "catch"
    REFINE = "refine"
    TRANSFORM = "transform"
    PIPE = "pipe"
    LAZY = "lazy"
    FUNCTION = "function"


class IssueCode(StrEnum):
    INVALID_TYPE = "invalid_type"
    INVALID_LITERAL = "invalid_literal"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_UNION = "invalid_union"
    INVALID_UNION_DISCRIMINATOR = "invalid_union_discriminator"
    UNRECOGNIZED_KEYS = "unrecognized_keys"
    INVALID_STRING = "invalid_string"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_FINITE = "not_finite"
    INVALID_DATE = "invalid_date"
    INVALID_FUNCTION_ARITY = "invalid_function_arity"
    INVALID_FUNCTION_ARGUMENT = "invalid_function_argument"
    INVALID_FUNCTION_RETURN = "invalid_function_return"
    CUSTOM = "custom"


class UnknownKeys(StrEnum):
    """What an object schema does with keys its shape does not declare.

    strip       -- drop them from the output (default)
    passthrough -- copy them to the output unvalidated
    strict      -- report an ``unrecognized_keys`` issue
    """

    STRIP = "strip"
    PASSTHROUGH = "passthrough"
    STRICT = "strict"


# Python type name -> name used in ``received`` of invalid_type issues
TYPE_NAMES: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "float",
    bool: "boolean",
    type(None): "none",
    list: "list",
    tuple: "tuple",
    dict: "dict",
    set: "set",
    bytes: "bytes",
}

# rapidfuzz score (0-100) a candidate needs before it is offered as a suggestion
DEFAULT_SUGGESTION_CUTOFF: float = 80.0


def type_name(value: Any) -> str:
    """Name of a value's runtime type as reported in issues."""
    if callable(value) and not isinstance(value, type):
        return "function"
    return TYPE_NAMES.get(type(value), type(value).__name__)


@dataclass(frozen=True)
class Check:
    """A rule run after a schema's own validation succeeded.

    ``fn`` inspects ``payload.value`` and either appends issues or replaces
    the value (trim, lower, ...). ``params`` records the rule's arguments so
    exporters can read them back (``{"minimum": 3}``).
    """

    name: str
    fn: Callable[[Payload, ParseContext], None]
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SchemaDefinition:
    """Immutable configuration of one schema node."""

    type: SchemaType
    params: Mapping[str, Any] = field(default_factory=dict)
    checks: tuple[Check, ...] = ()
    message: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.params, MappingProxyType):
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def check_params(self, name: str) -> list[Mapping[str, Any]]:
        """Params of every attached check called ``name``, in order."""
        return [c.params for c in self.checks if c.name == name]

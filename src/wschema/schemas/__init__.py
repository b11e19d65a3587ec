"""Schema variant registry -- maps SchemaType tags to schema classes.

The set of variants is closed: every SchemaType resolves to exactly one
class implementing ``Schema._validate``.

Variants:
    string    -- str values; length/pattern/format checks and trim/lower/upper
                 transforms. Optional str() coercion.
    number    -- int/float (never bool, never NaN); bound, integer, multiple
                 and finiteness checks. Optional float() coercion.
    primitives -- boolean, none, unknown, literal, date, instance_of and
                 custom predicates.
    enum      -- ordered set of allowed strings; exposes ``options``.
    array     -- list/tuple of one element schema; record -- mapping of key
                 and value schemas. Element/key issues are re-based under
                 their index/key.
    object    -- declared shape of field schemas with an unknown-keys policy
                 (strip, passthrough, strict). Supports extend/pick/omit/
                 partial/required/keyof.
    union     -- first matching option wins; discriminated unions dispatch on
                 a literal tag field.
    wrappers  -- optional, nullable, default, catch, refine, transform, pipe
                 and lazy (recursive) wrappers around another schema.
    function  -- callable contract with positional input schemas and an
                 optional output schema; ``implement`` wraps a function with
                 arity, argument and (sync or awaited) return validation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import DefinitionError
from ..models import SchemaType

if TYPE_CHECKING:
    from ..core import Schema


def get_schema_class(schema_type: SchemaType | str) -> type[Schema]:
    """Return the schema class for a type tag.

    Raises DefinitionError for tags outside the registry.
    """
    try:
        schema_type = SchemaType(schema_type)
    except ValueError:
        raise DefinitionError(f"Unknown schema type '{schema_type}'") from None

    if schema_type == SchemaType.STRING:
        from .string import StringSchema

        return StringSchema

    if schema_type == SchemaType.NUMBER:
        from .number import NumberSchema

        return NumberSchema

    if schema_type == SchemaType.ENUM:
        from .enum import EnumSchema

        return EnumSchema

    if schema_type == SchemaType.ARRAY:
        from .array import ArraySchema

        return ArraySchema

    if schema_type == SchemaType.RECORD:
        from .array import RecordSchema

        return RecordSchema

    if schema_type == SchemaType.OBJECT:
        from .object import ObjectSchema

        return ObjectSchema

    if schema_type == SchemaType.FUNCTION:
        from .function import FunctionSchema

        return FunctionSchema

    if schema_type in (SchemaType.UNION, SchemaType.DISCRIMINATED_UNION):
        from .union import DiscriminatedUnionSchema, UnionSchema

        return UnionSchema if schema_type == SchemaType.UNION else DiscriminatedUnionSchema

    from . import primitives, wrappers

    for module in (primitives, wrappers):
        for cls in module.SCHEMA_CLASSES:
            if cls.schema_type == schema_type:
                return cls

    raise DefinitionError(f"No schema class registered for '{schema_type.value}'")

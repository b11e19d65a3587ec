"""Structural export to JSON Schema and pydantic.

Only structure crosses over. Checks with a direct JSON Schema keyword
(lengths, bounds, patterns, formats) are exported; refinements, transforms
and custom predicates are not.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Literal, Optional, Union

from pydantic import ConfigDict, Field, create_model

from .core import Schema
from .errors import DefinitionError
from .models import SchemaType, UnknownKeys
from .schemas.array import ArraySchema
from .schemas.number import NumberSchema
from .schemas.object import ObjectSchema
from .schemas.string import StringSchema
from .schemas.wrappers import DefaultSchema, LazySchema

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"

# number check name -> JSON Schema keyword
_NUMBER_BOUNDS = {
    "gte": ("minimum", "minimum"),
    "gt": ("exclusiveMinimum", "minimum"),
    "lte": ("maximum", "maximum"),
    "lt": ("exclusiveMaximum", "maximum"),
}

_STRING_FORMATS = {"email": "email", "url": "uri"}


class _JsonSchemaExporter:
    """Walks a schema tree; recursive (lazy) nodes become ``$defs`` refs."""

    def __init__(self) -> None:
        self.defs: dict[str, dict[str, Any]] = {}
        self._lazy_names: dict[int, str] = {}

    def export(self, schema: Schema[Any]) -> dict[str, Any]:
        result = self._convert(schema)
        if schema.description:
            result["description"] = schema.description
        return result

    def _lazy(self, schema: LazySchema[Any]) -> dict[str, Any]:
        name = self._lazy_names.get(id(schema))
        if name is None:
            name = f"lazy{len(self._lazy_names)}"
            self._lazy_names[id(schema)] = name
            self.defs[name] = self.export(schema.schema)
        return {"$ref": f"#/$defs/{name}"}

    def _string(self, schema: StringSchema) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "string"}
        definition = schema.definition
        if schema.min_length is not None:
            result["minLength"] = schema.min_length
        if schema.max_length is not None:
            result["maxLength"] = schema.max_length
        for params in definition.check_params("length"):
            result["minLength"] = result["maxLength"] = params["exact"]
        patterns = [p["pattern"] for p in definition.check_params("regex")]
        if len(patterns) == 1:
            result["pattern"] = patterns[0]
        elif patterns:
            result["allOf"] = [{"pattern": p} for p in patterns]
        for check, fmt in _STRING_FORMATS.items():
            if definition.check_params(check):
                result["format"] = fmt
        return result

    def _number(self, schema: NumberSchema) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "integer" if schema.is_int else "number"}
        for check in schema.definition.checks:
            if check.name in _NUMBER_BOUNDS:
                keyword, param = _NUMBER_BOUNDS[check.name]
                result[keyword] = check.params[param]
            elif check.name == "multiple_of":
                result["multipleOf"] = check.params["multiple_of"]
        return result

    def _array(self, schema: ArraySchema[Any]) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "array", "items": self.export(schema.element)}
        for params in schema.definition.check_params("min_items"):
            result["minItems"] = params["minimum"]
        for params in schema.definition.check_params("max_items"):
            result["maxItems"] = params["maximum"]
        return result

    def _object(self, schema: ObjectSchema) -> dict[str, Any]:
        properties = {}
        required = []
        for key, field in schema.shape.items():
            properties[key] = self.export(field)
            if not field.accepts_missing:
                required.append(key)
        result: dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            result["required"] = required
        if schema.unknown_keys == UnknownKeys.STRICT:
            result["additionalProperties"] = False
        return result

    def _convert(self, schema: Schema[Any]) -> dict[str, Any]:
        kind = schema.schema_type
        params = schema.definition.params

        if kind == SchemaType.STRING:
            return self._string(schema)
        if kind == SchemaType.NUMBER:
            return self._number(schema)
        if kind == SchemaType.BOOLEAN:
            return {"type": "boolean"}
        if kind == SchemaType.NONE:
            return {"type": "null"}
        if kind == SchemaType.DATE:
            return {"type": "string", "format": "date-time"}
        if kind == SchemaType.LITERAL:
            return {"const": params["value"]}
        if kind == SchemaType.ENUM:
            return {"type": "string", "enum": list(schema.options)}
        if kind == SchemaType.ARRAY:
            return self._array(schema)
        if kind == SchemaType.RECORD:
            return {"type": "object", "additionalProperties": self.export(schema.value_schema)}
        if kind == SchemaType.OBJECT:
            return self._object(schema)
        if kind == SchemaType.UNION:
            return {"anyOf": [self.export(o) for o in schema.options]}
        if kind == SchemaType.DISCRIMINATED_UNION:
            return {"oneOf": [self.export(o) for o in schema.options]}
        if kind == SchemaType.NULLABLE:
            return {"anyOf": [self.export(schema.inner), {"type": "null"}]}
        if kind == SchemaType.DEFAULT:
            result = self.export(schema.inner)
            if not callable(params.get("value")):
                result["default"] = params.get("value")
            return result
        if kind in (SchemaType.OPTIONAL, SchemaType.CATCH, SchemaType.REFINE, SchemaType.TRANSFORM):
            return self.export(schema.inner)
        if kind == SchemaType.PIPE:
            return self.export(schema.source)
        if kind == SchemaType.LAZY:
            return self._lazy(schema)
        if kind == SchemaType.FUNCTION:
            raise DefinitionError("function schemas have no JSON Schema form")
        # unknown, instance_of, custom: anything goes
        return {}


def to_json_schema(schema: Schema[Any]) -> dict[str, Any]:
    """JSON Schema (draft 2020-12) describing the structure ``schema`` accepts."""
    exporter = _JsonSchemaExporter()
    result = {"$schema": JSON_SCHEMA_DIALECT, **exporter.export(schema)}
    if exporter.defs:
        result["$defs"] = exporter.defs
    return result


_EXTRA = {
    UnknownKeys.STRIP: "ignore",
    UnknownKeys.PASSTHROUGH: "allow",
    UnknownKeys.STRICT: "forbid",
}


def _field_name(name: str, key: str) -> str:
    return f"{name}{key.title().replace('_', '')}"


def _pydantic_field(schema: Schema[Any], name: str) -> tuple[Any, Any]:
    """(annotation, default) pair for ``create_model``."""
    annotation = to_pydantic(schema, name)
    if isinstance(schema, DefaultSchema):
        value = schema.definition.params.get("value")
        if callable(value):
            return annotation, Field(default_factory=value)
        return annotation, value
    if schema.accepts_missing:
        return Optional[annotation], None
    return annotation, ...


def to_pydantic(schema: Schema[Any], name: str = "Model") -> Any:
    """Pydantic-compatible type for ``schema``.

    Objects become ``create_model`` classes (nested objects are named after
    their field: ``Model`` -> ``ModelAuthor``); everything else maps to a
    typing annotation. Checks are not carried over.
    """
    kind = schema.schema_type
    params = schema.definition.params

    if kind == SchemaType.STRING:
        return str
    if kind == SchemaType.NUMBER:
        return int if schema.is_int else float
    if kind == SchemaType.BOOLEAN:
        return bool
    if kind == SchemaType.NONE:
        return type(None)
    if kind == SchemaType.DATE:
        return datetime
    if kind == SchemaType.LITERAL:
        return Literal[params["value"]]
    if kind == SchemaType.ENUM:
        return Literal[tuple(schema.options)]
    if kind == SchemaType.INSTANCE_OF:
        return schema.cls
    if kind == SchemaType.ARRAY:
        return list[to_pydantic(schema.element, name)]
    if kind == SchemaType.RECORD:
        return dict[to_pydantic(schema.key_schema, name), to_pydantic(schema.value_schema, name)]
    if kind == SchemaType.OBJECT:
        fields = {
            key: _pydantic_field(field, _field_name(name, key))
            for key, field in schema.shape.items()
        }
        config = ConfigDict(
            extra=_EXTRA[schema.unknown_keys], arbitrary_types_allowed=True
        )
        return create_model(name, __config__=config, **fields)
    if kind in (SchemaType.UNION, SchemaType.DISCRIMINATED_UNION):
        return Union[tuple(to_pydantic(o, name) for o in schema.options)]
    if kind in (SchemaType.OPTIONAL, SchemaType.NULLABLE):
        return Optional[to_pydantic(schema.inner, name)]
    if kind in (SchemaType.DEFAULT, SchemaType.CATCH, SchemaType.REFINE):
        return to_pydantic(schema.inner, name)
    if kind == SchemaType.PIPE:
        return to_pydantic(schema.target, name)
    if kind == SchemaType.FUNCTION:
        return Callable[..., Any]
    # unknown, custom, transform (output type unknown), lazy (may recurse)
    return Any


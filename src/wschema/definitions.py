"""Build schema trees from plain (JSON-like) definitions.

Example::

    {
        "type": "object",
        "unknown_keys": "strict",
        "shape": {
            "title": {"type": "string", "min_length": 1},
            "language": {"type": "enum", "values": ["en", "de"], "optional": true},
            "chapters": {"type": "array", "element": {"type": "string"}},
        },
    }

Every node takes ``type`` plus the keys its type understands, and the
common keys ``description``, ``message``, ``optional``, ``nullable`` and
``default``. Anything else raises DefinitionError naming the node's
location (``$.shape.title``).
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Mapping

from loguru import logger

from .core import Schema
from .errors import DefinitionError
from .schemas import array as array_mod
from .schemas import enum as enum_mod
from .schemas import function as function_mod
from .schemas import number as number_mod
from .schemas import object as object_mod
from .schemas import primitives, string as string_mod
from .schemas import union as union_mod
from .schemas import wrappers

log = logger.bind(component="definitions")

_COMMON_KEYS = frozenset({"type", "description", "message", "optional", "nullable", "default"})

_STRING_FORMATS = ("email", "url")


def _string(node: Mapping[str, Any], location: str) -> Schema:
    schema = string_mod.string(coerce=bool(node.get("coerce", False)), message=node.get("message"))
    if "min_length" in node:
        schema = schema.min(node["min_length"])
    if "max_length" in node:
        schema = schema.max(node["max_length"])
    if "length" in node:
        schema = schema.length(node["length"])
    if "pattern" in node:
        schema = schema.regex(node["pattern"])
    for key in ("starts_with", "ends_with", "includes"):
        if key in node:
            schema = getattr(schema, key)(node[key])
    fmt = node.get("format")
    if fmt is not None:
        if fmt not in _STRING_FORMATS:
            raise DefinitionError(
                f"unknown string format '{fmt}' (expected one of {', '.join(_STRING_FORMATS)})",
                location,
            )
        schema = getattr(schema, fmt)()
    return schema


def _number(node: Mapping[str, Any], location: str) -> Schema:
    schema = number_mod.number(coerce=bool(node.get("coerce", False)), message=node.get("message"))
    if node["type"] == "integer":
        schema = schema.int()
    if "minimum" in node:
        schema = schema.gte(node["minimum"])
    if "exclusive_minimum" in node:
        schema = schema.gt(node["exclusive_minimum"])
    if "maximum" in node:
        schema = schema.lte(node["maximum"])
    if "exclusive_maximum" in node:
        schema = schema.lt(node["exclusive_maximum"])
    if "multiple_of" in node:
        schema = schema.multiple_of(node["multiple_of"])
    if node.get("finite"):
        schema = schema.finite()
    return schema


def _as_datetime(value: Any, location: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise DefinitionError(f"expected an ISO-8601 date, got {value!r}", location) from None


def _date(node: Mapping[str, Any], location: str) -> Schema:
    schema = primitives.date(coerce=bool(node.get("coerce", False)), message=node.get("message"))
    if "minimum" in node:
        schema = schema.min(_as_datetime(node["minimum"], f"{location}.minimum"))
    if "maximum" in node:
        schema = schema.max(_as_datetime(node["maximum"], f"{location}.maximum"))
    return schema


def _require(node: Mapping[str, Any], key: str, location: str) -> Any:
    if key not in node:
        raise DefinitionError(f"'{node['type']}' definition needs '{key}'", location)
    return node[key]


def _array(node: Mapping[str, Any], location: str) -> Schema:
    element = schema_from_dict(_require(node, "element", location), f"{location}.element")
    schema = array_mod.array(element, message=node.get("message"))
    if "min_items" in node:
        schema = schema.min(node["min_items"])
    if "max_items" in node:
        schema = schema.max(node["max_items"])
    return schema


def _record(node: Mapping[str, Any], location: str) -> Schema:
    key = (
        schema_from_dict(node["key"], f"{location}.key")
        if "key" in node
        else string_mod.string()
    )
    value = schema_from_dict(_require(node, "value", location), f"{location}.value")
    return array_mod.record(key, value, message=node.get("message"))


def _object(node: Mapping[str, Any], location: str) -> Schema:
    shape = _require(node, "shape", location)
    if not isinstance(shape, Mapping):
        raise DefinitionError("'shape' must be a mapping", f"{location}.shape")
    fields = {
        name: schema_from_dict(field, f"{location}.shape.{name}")
        for name, field in shape.items()
    }
    return object_mod.object(
        fields,
        unknown_keys=node.get("unknown_keys", "strip"),
        message=node.get("message"),
    )


def _options(node: Mapping[str, Any], location: str) -> list[Schema]:
    options = _require(node, "options", location)
    if not isinstance(options, list):
        raise DefinitionError("'options' must be a list", f"{location}.options")
    return [schema_from_dict(o, f"{location}.options[{i}]") for i, o in enumerate(options)]


def _union(node: Mapping[str, Any], location: str) -> Schema:
    return union_mod.union(_options(node, location), message=node.get("message"))


def _discriminated_union(node: Mapping[str, Any], location: str) -> Schema:
    return union_mod.discriminated_union(
        _require(node, "discriminator", location),
        _options(node, location),
        message=node.get("message"),
    )


def _function(node: Mapping[str, Any], location: str) -> Schema:
    inputs = node.get("input", [])
    if not isinstance(inputs, list):
        raise DefinitionError("'input' must be a list", f"{location}.input")
    output = node.get("output")
    return function_mod.function(
        [schema_from_dict(s, f"{location}.input[{i}]") for i, s in enumerate(inputs)],
        None if output is None else schema_from_dict(output, f"{location}.output"),
        message=node.get("message"),
    )


# type tag -> (builder, keys the tag accepts besides the common ones)
_BUILDERS: dict[str, tuple[Callable[[Mapping[str, Any], str], Schema], frozenset[str]]] = {
    "string": (_string, frozenset({
        "coerce", "min_length", "max_length", "length", "pattern",
        "starts_with", "ends_with", "includes", "format",
    })),
    "number": (_number, frozenset({
        "coerce", "minimum", "maximum", "exclusive_minimum",
        "exclusive_maximum", "multiple_of", "finite",
    })),
    "boolean": (lambda node, loc: primitives.boolean(message=node.get("message")), frozenset()),
    "none": (lambda node, loc: primitives.none(message=node.get("message")), frozenset()),
    "unknown": (lambda node, loc: primitives.unknown(), frozenset()),
    "literal": (
        lambda node, loc: primitives.literal(_require(node, "value", loc), node.get("message")),
        frozenset({"value"}),
    ),
    "enum": (
        lambda node, loc: enum_mod.enum(_require(node, "values", loc), node.get("message")),
        frozenset({"values"}),
    ),
    "date": (_date, frozenset({"coerce", "minimum", "maximum"})),
    "array": (_array, frozenset({"element", "min_items", "max_items"})),
    "record": (_record, frozenset({"key", "value"})),
    "object": (_object, frozenset({"shape", "unknown_keys"})),
    "union": (_union, frozenset({"options"})),
    "discriminated_union": (_discriminated_union, frozenset({"discriminator", "options"})),
    "function": (_function, frozenset({"input", "output"})),
}
_BUILDERS["integer"] = _BUILDERS["number"]
_BUILDERS["null"] = _BUILDERS["none"]
_BUILDERS["any"] = _BUILDERS["unknown"]


def schema_from_dict(data: Mapping[str, Any], location: str = "$") -> Schema:
    """Build a schema from a plain definition.

    Raises DefinitionError (with ``location``) for unknown types, unknown
    keys, missing required keys or definitions the builders reject.
    """
    if not isinstance(data, Mapping):
        raise DefinitionError(f"definition must be a mapping, got {data!r}", location)
    type_tag = data.get("type")
    if type_tag not in _BUILDERS:
        raise DefinitionError(f"unknown schema type {type_tag!r}", location)

    build, allowed = _BUILDERS[type_tag]
    unexpected = sorted(set(data) - _COMMON_KEYS - allowed)
    if unexpected:
        raise DefinitionError(
            f"unexpected key(s) for '{type_tag}': {', '.join(unexpected)}", location
        )

    try:
        schema = build(data, location)
        if data.get("description"):
            schema = schema.describe(data["description"])
        if "default" in data:
            schema = wrappers.default(schema, data["default"])
        if data.get("nullable"):
            schema = wrappers.nullable(schema)
        if data.get("optional"):
            schema = wrappers.optional(schema)
    except DefinitionError as exc:
        if exc.location != "$":
            raise
        raise DefinitionError(exc.reason, location) from exc
    except (TypeError, ValueError, re.error) as exc:
        raise DefinitionError(f"invalid '{type_tag}' definition: {exc}", location) from exc

    log.debug(f"built {type_tag} schema at {location}")
    return schema

"""Object schema -- a declared shape of named field schemas.

Fields are validated in declaration order, each in its own child payload
re-based under the field name. Keys the shape does not declare are handled
by the ``UnknownKeys`` policy (strip by default).
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterable

from ..context import ParseContext, Payload
from ..core import Schema, require_schema
from ..errors import DefinitionError
from ..issues import closest_match
from ..models import IssueCode, SchemaDefinition, SchemaType, UnknownKeys, type_name
from .enum import EnumSchema, enum
from .wrappers import OptionalSchema, optional


def _check_shape(shape: Mapping[str, Any]) -> dict[str, Schema[Any]]:
    checked = {}
    for key, field in shape.items():
        if not isinstance(key, str):
            raise DefinitionError(f"object keys must be strings, got {key!r}")
        checked[key] = require_schema(field, f"field '{key}'")
    return checked


class ObjectSchema(Schema[dict[str, Any]]):
    schema_type = SchemaType.OBJECT

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._shape = MappingProxyType(_check_shape(definition.params.get("shape", {})))
        try:
            self._unknown_keys = UnknownKeys(definition.params.get("unknown_keys", "strip"))
        except ValueError:
            raise DefinitionError(
                f"unknown_keys must be one of {[p.value for p in UnknownKeys]}"
            ) from None

    @property
    def shape(self) -> Mapping[str, Schema[Any]]:
        return self._shape

    @property
    def unknown_keys(self) -> UnknownKeys:
        return self._unknown_keys

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        data = payload.value
        if not isinstance(data, Mapping):
            self._issue(
                payload, IssueCode.INVALID_TYPE,
                expected="object", received=type_name(data),
            )
            return payload

        result: dict[str, Any] = {}
        for key, field in self._shape.items():
            if key not in data:
                if not field.accepts_missing:
                    payload.add_issue(
                        IssueCode.INVALID_TYPE,
                        schema=field.schema_type.value,
                        message=field.definition.message,
                        path=(key,),
                        input=None,
                        expected=field.schema_type.value,
                        received="missing",
                    )
                    if ctx.abort_early:
                        break
                    continue
                child = field.run(payload.child(None), ctx)
                if not payload.merge(key, child):
                    if ctx.abort_early:
                        break
                    continue
                # optional fields stay absent; defaults and catches fill in
                if child.value is not None:
                    result[key] = child.value
                continue

            child = field.run(payload.child(data[key]), ctx)
            if payload.merge(key, child):
                result[key] = child.value
            elif ctx.abort_early:
                break

        extra = [key for key in data if key not in self._shape]
        if extra and not (ctx.abort_early and payload.issues):
            if self._unknown_keys == UnknownKeys.PASSTHROUGH:
                for key in extra:
                    result[key] = data[key]
            elif self._unknown_keys == UnknownKeys.STRICT:
                self._unrecognized(payload, extra, ctx)

        payload.value = result
        return payload

    def _unrecognized(self, payload: Payload, extra: list[Any], ctx: ParseContext) -> None:
        keys = sorted(extra, key=str)
        details: dict[str, Any] = {"keys": keys}
        for key in keys:
            suggestion = closest_match(key, list(self._shape), ctx.suggestion_cutoff)
            if suggestion is not None:
                details["suggestion"] = suggestion
                break
        self._issue(payload, IssueCode.UNRECOGNIZED_KEYS, **details)

    # -- Shape composition (each returns a new schema) --

    def _with_shape(
        self, shape: Mapping[str, Schema[Any]], unknown_keys: UnknownKeys | None = None
    ) -> ObjectSchema:
        params = {
            "shape": dict(shape),
            "unknown_keys": unknown_keys or self._unknown_keys,
        }
        return self._with_definition(params=params)

    def _known(self, keys: Iterable[str], action: str) -> list[str]:
        keys = list(keys)
        missing = [k for k in keys if k not in self._shape]
        if missing:
            raise DefinitionError(f"cannot {action} keys not in shape: {missing}")
        return keys

    def extend(self, fields: Mapping[str, Schema[Any]]) -> ObjectSchema:
        """Add (or replace) fields; later fields override earlier ones."""
        return self._with_shape({**self._shape, **fields})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        """Combine two shapes; ``other``'s fields and unknown-keys policy win."""
        return self._with_shape({**self._shape, **other.shape}, other.unknown_keys)

    def pick(self, *keys: str) -> ObjectSchema:
        picked = self._known(keys, "pick")
        return self._with_shape({k: self._shape[k] for k in self._shape if k in picked})

    def omit(self, *keys: str) -> ObjectSchema:
        dropped = set(self._known(keys, "omit"))
        return self._with_shape({k: v for k, v in self._shape.items() if k not in dropped})

    def partial(self, *keys: str) -> ObjectSchema:
        """Make ``keys`` (all fields when none given) optional.

        Fields that may already be absent (defaults, catches) are left as is.
        """
        targets = set(self._known(keys, "make partial")) if keys else set(self._shape)
        shape = {}
        for key, field in self._shape.items():
            if key in targets and not field.accepts_missing:
                field = optional(field)
            shape[key] = field
        return self._with_shape(shape)

    def required(self, *keys: str) -> ObjectSchema:
        """Undo ``optional`` on ``keys`` (all fields when none given)."""
        targets = set(self._known(keys, "require")) if keys else set(self._shape)
        shape = {}
        for key, field in self._shape.items():
            while key in targets and isinstance(field, OptionalSchema):
                field = field.unwrap()
            shape[key] = field
        return self._with_shape(shape)

    def strict(self) -> ObjectSchema:
        return self._with_shape(self._shape, UnknownKeys.STRICT)

    def passthrough(self) -> ObjectSchema:
        return self._with_shape(self._shape, UnknownKeys.PASSTHROUGH)

    def strip(self) -> ObjectSchema:
        return self._with_shape(self._shape, UnknownKeys.STRIP)

    def keyof(self) -> EnumSchema:
        return enum(self._shape)


def object(
    shape: Mapping[str, Schema[Any]],
    unknown_keys: UnknownKeys | str = UnknownKeys.STRIP,
    message: str | None = None,
) -> ObjectSchema:
    return ObjectSchema(
        SchemaDefinition(
            type=SchemaType.OBJECT,
            params={"shape": dict(shape), "unknown_keys": unknown_keys},
            message=message,
        )
    )

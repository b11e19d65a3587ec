"""Array and record schemas.

Each element (or key/value pair) is validated in its own child payload;
failing children are re-based under their index (or key) and merged into
the parent, so one parse reports every bad element unless the context asks
to abort early.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from ..context import ParseContext, Payload
from ..core import Schema, require_count, require_schema
from ..models import IssueCode, SchemaDefinition, SchemaType, type_name

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


class ArraySchema(Schema[list[T]], Generic[T]):
    """Lists and tuples of one element schema; the output is always a new list
    (tuples are coerced), holding each element's parsed value.
    """

    schema_type = SchemaType.ARRAY

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._element: Schema[T] = require_schema(
            definition.params.get("element"), "array element"
        )

    @property
    def element(self) -> Schema[T]:
        return self._element

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        items = payload.value
        if not isinstance(items, (list, tuple)):
            self._issue(
                payload, IssueCode.INVALID_TYPE,
                expected="array", received=type_name(items),
            )
            return payload

        result = []
        for index, item in enumerate(items):
            child = self._element.run(payload.child(item), ctx)
            result.append(child.value)
            if not payload.merge(index, child) and ctx.abort_early:
                break
        payload.value = result
        return payload

    def min(self, count: int, message: str | None = None) -> ArraySchema[T]:
        require_count(count, "min items")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if len(payload.value) < count:
                self._check_issue(
                    payload, IssueCode.TOO_SMALL, message,
                    type="array", minimum=count, inclusive=True,
                )

        return self._with_check("min_items", check, minimum=count)

    def max(self, count: int, message: str | None = None) -> ArraySchema[T]:
        require_count(count, "max items")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if len(payload.value) > count:
                self._check_issue(
                    payload, IssueCode.TOO_BIG, message,
                    type="array", maximum=count, inclusive=True,
                )

        return self._with_check("max_items", check, maximum=count)

    def length(self, count: int, message: str | None = None) -> ArraySchema[T]:
        return self.min(count, message).max(count, message)

    def nonempty(self, message: str | None = None) -> ArraySchema[T]:
        return self.min(1, message)


class RecordSchema(Schema[dict[K, V]], Generic[K, V]):
    schema_type = SchemaType.RECORD

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._key: Schema[K] = require_schema(definition.params.get("key"), "record key")
        self._value: Schema[V] = require_schema(
            definition.params.get("value"), "record value"
        )

    @property
    def key_schema(self) -> Schema[K]:
        return self._key

    @property
    def value_schema(self) -> Schema[V]:
        return self._value

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        data = payload.value
        if not isinstance(data, Mapping):
            self._issue(
                payload, IssueCode.INVALID_TYPE,
                expected="mapping", received=type_name(data),
            )
            return payload

        result: dict[Any, Any] = {}
        for key, item in data.items():
            key_payload = self._key.run(payload.child(key), ctx)
            value_payload = self._value.run(payload.child(item), ctx)
            key_ok = payload.merge(key, key_payload)
            value_ok = payload.merge(key, value_payload)
            if key_ok and value_ok:
                result[key_payload.value] = value_payload.value
            elif ctx.abort_early:
                break
        payload.value = result
        return payload


def array(element: Schema[T], message: str | None = None) -> ArraySchema[T]:
    """Schema for a list (or tuple, coerced to list) of ``element`` values."""
    return ArraySchema(
        SchemaDefinition(type=SchemaType.ARRAY, params={"element": element}, message=message)
    )


def record(
    key: Schema[K], value: Schema[V], message: str | None = None
) -> RecordSchema[K, V]:
    return RecordSchema(
        SchemaDefinition(
            type=SchemaType.RECORD, params={"key": key, "value": value}, message=message
        )
    )

"""Leaf schemas: boolean, none, unknown, literal, date, instance_of, custom."""

from __future__ import annotations

from datetime import date as _date
from datetime import datetime, time, timezone
from typing import Any, Callable

from ..context import ParseContext, Payload
from ..core import Schema, ensure_sync
from ..errors import DefinitionError
from ..models import IssueCode, SchemaDefinition, SchemaType, type_name


class BooleanSchema(Schema[bool]):
    schema_type = SchemaType.BOOLEAN

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if isinstance(payload.value, bool):
            return payload
        self._issue(
            payload, IssueCode.INVALID_TYPE,
            expected="boolean", received=type_name(payload.value),
        )
        return payload


class NoneSchema(Schema[None]):
    schema_type = SchemaType.NONE

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if payload.value is None:
            return payload
        self._issue(
            payload, IssueCode.INVALID_TYPE,
            expected="none", received=type_name(payload.value),
        )
        return payload


class UnknownSchema(Schema[Any]):
    """Accepts anything, unchanged."""

    schema_type = SchemaType.UNKNOWN

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        return payload


def _same_literal(a: Any, b: Any) -> bool:
    # 1 == True and 1 == 1.0 in Python; a literal matches its own type only
    return type(a) is type(b) and a == b


class LiteralSchema(Schema[Any]):
    schema_type = SchemaType.LITERAL

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        if "value" not in definition.params:
            raise DefinitionError("literal schema needs a 'value'")
        self._value = definition.params["value"]

    @property
    def value(self) -> Any:
        return self._value

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if _same_literal(payload.value, self._value):
            return payload
        self._issue(payload, IssueCode.INVALID_LITERAL, expected=self._value)
        return payload


def _as_datetime(value: _date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time())


def _date_bound(bound: Any, what: str) -> datetime:
    if not isinstance(bound, _date):
        raise DefinitionError(f"{what} must be a date or datetime, got {bound!r}")
    return _as_datetime(bound)


def _aligned(value: datetime, limit: datetime) -> tuple[datetime, datetime]:
    """Make a naive/aware pair comparable; the naive side is read as UTC."""
    if (value.tzinfo is None) == (limit.tzinfo is None):
        return value, limit
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc), limit
    return value, limit.replace(tzinfo=timezone.utc)


class DateSchema(Schema[datetime]):
    """``datetime``/``date`` values and ISO-8601 strings; output is a ``datetime``.

    With ``coerce=True`` POSIX timestamps are accepted too (read as UTC).
    """

    schema_type = SchemaType.DATE

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._coerce = bool(definition.params.get("coerce", False))

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        value = payload.value
        if isinstance(value, _date):
            payload.value = _as_datetime(value)
            return payload
        if isinstance(value, str):
            try:
                payload.value = datetime.fromisoformat(value)
            except ValueError:
                self._issue(payload, IssueCode.INVALID_DATE)
            return payload
        if self._coerce and isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                payload.value = datetime.fromtimestamp(value, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                self._issue(payload, IssueCode.INVALID_DATE)
            return payload
        self._issue(
            payload, IssueCode.INVALID_TYPE,
            expected="date", received=type_name(value),
        )
        return payload

    def min(self, bound: _date, message: str | None = None) -> DateSchema:
        limit = _date_bound(bound, "min date")

        def check(payload: Payload, ctx: ParseContext) -> None:
            value, lower = _aligned(payload.value, limit)
            if value < lower:
                self._check_issue(
                    payload, IssueCode.TOO_SMALL, message,
                    type="date", minimum=limit.isoformat(), inclusive=True,
                )

        return self._with_check("min_date", check, minimum=limit.isoformat())

    def max(self, bound: _date, message: str | None = None) -> DateSchema:
        limit = _date_bound(bound, "max date")

        def check(payload: Payload, ctx: ParseContext) -> None:
            value, upper = _aligned(payload.value, limit)
            if value > upper:
                self._check_issue(
                    payload, IssueCode.TOO_BIG, message,
                    type="date", maximum=limit.isoformat(), inclusive=True,
                )

        return self._with_check("max_date", check, maximum=limit.isoformat())


class InstanceOfSchema(Schema[Any]):
    schema_type = SchemaType.INSTANCE_OF

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        cls = definition.params.get("cls")
        if not isinstance(cls, type):
            raise DefinitionError(f"instance_of needs a class, got {cls!r}")
        self._cls = cls

    @property
    def cls(self) -> type:
        return self._cls

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if isinstance(payload.value, self._cls):
            return payload
        self._issue(
            payload, IssueCode.INVALID_TYPE,
            expected=self._cls.__name__, received=type_name(payload.value),
        )
        return payload


class CustomSchema(Schema[Any]):
    """Accepts values for which ``predicate`` is truthy (everything when None)."""

    schema_type = SchemaType.CUSTOM

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._predicate: Callable[[Any], bool] | None = definition.params.get("predicate")

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if self._predicate is None:
            return payload
        if not ensure_sync(self._predicate(payload.value)):
            self._issue(payload, IssueCode.CUSTOM)
        return payload


SCHEMA_CLASSES: tuple[type[Schema], ...] = (
    BooleanSchema,
    NoneSchema,
    UnknownSchema,
    LiteralSchema,
    DateSchema,
    InstanceOfSchema,
    CustomSchema,
)


def boolean(message: str | None = None) -> BooleanSchema:
    return BooleanSchema(SchemaDefinition(type=SchemaType.BOOLEAN, message=message))


def none(message: str | None = None) -> NoneSchema:
    return NoneSchema(SchemaDefinition(type=SchemaType.NONE, message=message))


def unknown() -> UnknownSchema:
    return UnknownSchema(SchemaDefinition(type=SchemaType.UNKNOWN))


def literal(value: Any, message: str | None = None) -> LiteralSchema:
    return LiteralSchema(
        SchemaDefinition(type=SchemaType.LITERAL, params={"value": value}, message=message)
    )


def date(coerce: bool = False, message: str | None = None) -> DateSchema:
    return DateSchema(
        SchemaDefinition(type=SchemaType.DATE, params={"coerce": coerce}, message=message)
    )


def instance_of(cls: type, message: str | None = None) -> InstanceOfSchema:
    return InstanceOfSchema(
        SchemaDefinition(type=SchemaType.INSTANCE_OF, params={"cls": cls}, message=message)
    )


def custom(
    predicate: Callable[[Any], bool] | None = None, message: str | None = None
) -> CustomSchema:
    return CustomSchema(
        SchemaDefinition(
            type=SchemaType.CUSTOM, params={"predicate": predicate}, message=message
        )
    )

"""Enum schema -- an ordered set of allowed string values."""

from __future__ import annotations

from typing import Iterable

from ..context import ParseContext, Payload
from ..core import Schema
from ..errors import DefinitionError
from ..issues import closest_match
from ..models import IssueCode, SchemaDefinition, SchemaType


def _check_values(values: tuple) -> None:
    if not values:
        raise DefinitionError("enum needs at least one value")
    for v in values:
        if not isinstance(v, str):
            raise DefinitionError(f"enum values must be strings, got {v!r}")
    seen: set[str] = set()
    for v in values:
        if v in seen:
            raise DefinitionError(f"duplicate enum value '{v}'")
        seen.add(v)


class EnumSchema(Schema[str]):
    """Accepts exactly the declared strings; ``options`` keeps declaration order."""

    schema_type = SchemaType.ENUM

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        values = tuple(definition.params.get("values", ()))
        _check_values(values)
        self._options = values
        self._members = frozenset(values)

    @property
    def options(self) -> tuple[str, ...]:
        return self._options

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        value = payload.value
        if isinstance(value, str) and value in self._members:
            return payload
        details = {"options": self._options}
        suggestion = closest_match(value, self._options, ctx.suggestion_cutoff)
        if suggestion is not None:
            details["suggestion"] = suggestion
        self._issue(payload, IssueCode.INVALID_ENUM_VALUE, **details)
        return payload

    def extract(self, *values: str) -> EnumSchema:
        """New enum with only ``values`` (kept in the order given)."""
        unknown = [v for v in values if v not in self._members]
        if unknown:
            raise DefinitionError(f"cannot extract values not in enum: {unknown}")
        return enum(values)

    def exclude(self, *values: str) -> EnumSchema:
        """New enum without ``values`` (remaining ones keep their order)."""
        dropped = set(values)
        return enum(v for v in self._options if v not in dropped)


def enum(values: Iterable[str], message: str | None = None) -> EnumSchema:
    return EnumSchema(
        SchemaDefinition(type=SchemaType.ENUM, params={"values": tuple(values)}, message=message)
    )

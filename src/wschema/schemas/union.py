"""Union schemas.

``union`` tries its options in order and keeps the first success. When all
fail, the caller gets one ``invalid_union`` issue whose ``union_issues``
holds each option's own issues (in option order).

``discriminated_union`` reads a tag field first and validates with the one
object option declaring that literal, so errors come from a single branch.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from ..context import ParseContext, Payload
from ..core import Schema, require_schema
from ..errors import DefinitionError
from ..models import IssueCode, SchemaDefinition, SchemaType, type_name
from .enum import EnumSchema
from .object import ObjectSchema
from .primitives import LiteralSchema


class UnionSchema(Schema[Any]):
    schema_type = SchemaType.UNION

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        options = tuple(
            require_schema(option, f"union option {i}")
            for i, option in enumerate(definition.params.get("options", ()))
        )
        if not options:
            raise DefinitionError("union needs at least one option")
        self._options = options

    @property
    def options(self) -> tuple[Schema[Any], ...]:
        return self._options

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        branch_issues = []
        for option in self._options:
            child = option.run(payload.child(payload.value), ctx)
            if child.ok:
                payload.value = child.value
                return payload
            branch_issues.append(tuple(child.issues))
        self._issue(payload, IssueCode.INVALID_UNION, union_issues=tuple(branch_issues))
        return payload


def _tag_values(option: ObjectSchema, discriminator: str) -> tuple[Any, ...]:
    field = option.shape.get(discriminator)
    if isinstance(field, LiteralSchema):
        return (field.value,)
    if isinstance(field, EnumSchema):
        return field.options
    raise DefinitionError(
        f"discriminated union option has no literal '{discriminator}' field"
    )


class DiscriminatedUnionSchema(Schema[dict[str, Any]]):
    schema_type = SchemaType.DISCRIMINATED_UNION

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        discriminator = definition.params.get("discriminator")
        if not isinstance(discriminator, str):
            raise DefinitionError(f"discriminator must be a string, got {discriminator!r}")
        self._discriminator = discriminator

        # keyed by (type, value) so 1 and True stay distinct tags
        by_tag: dict[tuple[type, Any], ObjectSchema] = {}
        tags: list[Any] = []
        for option in definition.params.get("options", ()):
            if not isinstance(option, ObjectSchema):
                raise DefinitionError(f"discriminated union options must be objects, got {option!r}")
            for tag in _tag_values(option, discriminator):
                key = (type(tag), tag)
                if key in by_tag:
                    raise DefinitionError(f"duplicate discriminator value {tag!r}")
                by_tag[key] = option
                tags.append(tag)
        if not by_tag:
            raise DefinitionError("discriminated union needs at least one option")
        self._by_tag = by_tag
        self._tags = tuple(tags)

    @property
    def discriminator(self) -> str:
        return self._discriminator

    @property
    def options(self) -> tuple[ObjectSchema, ...]:
        seen: list[ObjectSchema] = []
        for option in self._by_tag.values():
            if not any(option is s for s in seen):
                seen.append(option)
        return tuple(seen)

    def _option_for(self, tag: Any) -> ObjectSchema | None:
        try:
            return self._by_tag.get((type(tag), tag))
        except TypeError:
            return None

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        data = payload.value
        if not isinstance(data, Mapping):
            self._issue(
                payload, IssueCode.INVALID_TYPE,
                expected="object", received=type_name(data),
            )
            return payload

        tag = data.get(self._discriminator)
        option = self._option_for(tag)
        if option is None:
            self._issue(
                payload, IssueCode.INVALID_UNION_DISCRIMINATOR,
                path=(self._discriminator,),
                input=tag,
                discriminator=self._discriminator,
                options=self._tags,
            )
            return payload
        return option.run(payload, ctx)


def union(options: Iterable[Schema[Any]], message: str | None = None) -> UnionSchema:
    return UnionSchema(
        SchemaDefinition(type=SchemaType.UNION, params={"options": tuple(options)}, message=message)
    )


def discriminated_union(
    discriminator: str, options: Iterable[ObjectSchema], message: str | None = None
) -> DiscriminatedUnionSchema:
    return DiscriminatedUnionSchema(
        SchemaDefinition(
            type=SchemaType.DISCRIMINATED_UNION,
            params={"discriminator": discriminator, "options": tuple(options)},
            message=message,
        )
    )

"""Schemas that wrap another schema.

Python has one "no value" (``None``), so ``optional`` and ``nullable``
differ only inside objects: an optional field may be absent from the input
mapping, a nullable one must be present (its value may be None).
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, Callable, Generic, Sequence, TypeVar

from ..context import ParseContext, Payload
from ..core import Schema, ensure_sync, require_schema
from ..errors import DefinitionError
from ..issues import PathSegment
from ..models import IssueCode, SchemaDefinition, SchemaType

T = TypeVar("T")
U = TypeVar("U")


def _resolve(value: Any) -> Any:
    """Default/catch values: callables are invoked per use (fresh lists, dicts)."""
    return value() if callable(value) else value


class _WrapperSchema(Schema[T], Generic[T]):
    """Base for variants holding one ``inner`` schema."""

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._inner: Schema[Any] = require_schema(
            definition.params.get("inner"), f"{self.schema_type.value} inner"
        )

    @property
    def inner(self) -> Schema[Any]:
        return self._inner

    @property
    def accepts_missing(self) -> bool:  # type: ignore[override]
        return self._inner.accepts_missing


class OptionalSchema(_WrapperSchema[T]):
    schema_type = SchemaType.OPTIONAL

    @property
    def accepts_missing(self) -> bool:  # type: ignore[override]
        return True

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if payload.value is None:
            return payload
        return self._inner.run(payload, ctx)

    def unwrap(self) -> Schema[T]:
        return self._inner


class NullableSchema(_WrapperSchema[T]):
    schema_type = SchemaType.NULLABLE

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if payload.value is None:
            return payload
        return self._inner.run(payload, ctx)

    def unwrap(self) -> Schema[T]:
        return self._inner


class DefaultSchema(_WrapperSchema[T]):
    """Substitutes the default for None (or a missing object key), then validates it."""

    schema_type = SchemaType.DEFAULT

    @property
    def accepts_missing(self) -> bool:  # type: ignore[override]
        return True

    @property
    def default_value(self) -> Any:
        return _resolve(self._definition.params.get("value"))

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if payload.value is None:
            payload.value = self.default_value
        return self._inner.run(payload, ctx)

    def remove_default(self) -> Schema[T]:
        return self._inner


class CatchSchema(_WrapperSchema[T]):
    """Replaces any failure of the inner schema with a fallback value."""

    schema_type = SchemaType.CATCH

    @property
    def accepts_missing(self) -> bool:  # type: ignore[override]
        return True

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        child = self._inner.run(payload.child(payload.value), ctx)
        if child.ok:
            payload.value = child.value
        else:
            payload.value = _resolve(self._definition.params.get("value"))
        return payload

    def remove_catch(self) -> Schema[T]:
        return self._inner


class RefineSchema(_WrapperSchema[T]):
    """Adds a ``custom`` issue when ``predicate`` rejects an accepted value.

    ``path`` places the issue below the current position, e.g. a password
    confirmation check on an object reporting at ``("confirm",)``.
    """

    schema_type = SchemaType.REFINE

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        predicate = definition.params.get("predicate")
        if not callable(predicate):
            raise DefinitionError(f"refine needs a callable predicate, got {predicate!r}")
        self._predicate: Callable[[Any], Any] = predicate
        self._path: tuple[PathSegment, ...] = tuple(definition.params.get("path", ()))

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        payload = self._inner.run(payload, ctx)
        if payload.issues:
            return payload
        if not ensure_sync(self._predicate(payload.value)):
            self._issue(payload, IssueCode.CUSTOM, path=self._path)
        return payload


class TransformSchema(_WrapperSchema[T]):
    schema_type = SchemaType.TRANSFORM

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        fn = definition.params.get("fn")
        if not callable(fn):
            raise DefinitionError(f"transform needs a callable, got {fn!r}")
        self._fn: Callable[[Any], Any] = fn

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        payload = self._inner.run(payload, ctx)
        if payload.ok:
            payload.value = ensure_sync(self._fn(payload.value))
        return payload


class PipeSchema(Schema[T], Generic[T]):
    """Validates with ``source`` and feeds its output into ``target``."""

    schema_type = SchemaType.PIPE

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._source: Schema[Any] = require_schema(definition.params.get("source"), "pipe source")
        self._target: Schema[T] = require_schema(definition.params.get("target"), "pipe target")

    @property
    def source(self) -> Schema[Any]:
        return self._source

    @property
    def target(self) -> Schema[T]:
        return self._target

    @property
    def accepts_missing(self) -> bool:  # type: ignore[override]
        return self._source.accepts_missing

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        payload = self._source.run(payload, ctx)
        if payload.issues:
            return payload
        return self._target.run(payload, ctx)


class LazySchema(Schema[T], Generic[T]):
    """Defers building the real schema until first use (recursive shapes)."""

    schema_type = SchemaType.LAZY

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        factory = definition.params.get("factory")
        if not callable(factory):
            raise DefinitionError(f"lazy needs a factory callable, got {factory!r}")
        self._factory: Callable[[], Schema[T]] = factory

    @cached_property
    def schema(self) -> Schema[T]:
        return require_schema(self._factory(), "lazy factory result")

    @property
    def accepts_missing(self) -> bool:  # type: ignore[override]
        return self.schema.accepts_missing

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        return self.schema.run(payload, ctx)


SCHEMA_CLASSES: tuple[type[Schema], ...] = (
    OptionalSchema,
    NullableSchema,
    DefaultSchema,
    CatchSchema,
    RefineSchema,
    TransformSchema,
    PipeSchema,
    LazySchema,
)


def _wrap(schema_type: SchemaType, cls: type, inner: Schema[Any], **params: Any) -> Any:
    return cls(SchemaDefinition(type=schema_type, params={"inner": inner, **params}))


def optional(inner: Schema[T]) -> OptionalSchema[T]:
    return _wrap(SchemaType.OPTIONAL, OptionalSchema, inner)


def nullable(inner: Schema[T]) -> NullableSchema[T]:
    return _wrap(SchemaType.NULLABLE, NullableSchema, inner)


def default(inner: Schema[T], value: Any) -> DefaultSchema[T]:
    return _wrap(SchemaType.DEFAULT, DefaultSchema, inner, value=value)


def catch(inner: Schema[T], value: Any) -> CatchSchema[T]:
    return _wrap(SchemaType.CATCH, CatchSchema, inner, value=value)


def refine(
    inner: Schema[T],
    predicate: Callable[[T], Any],
    message: str | None = None,
    path: Sequence[PathSegment] = (),
) -> RefineSchema[T]:
    return RefineSchema(
        SchemaDefinition(
            type=SchemaType.REFINE,
            params={"inner": inner, "predicate": predicate, "path": tuple(path)},
            message=message,
        )
    )


def transform(inner: Schema[Any], fn: Callable[[Any], U]) -> TransformSchema[U]:
    return _wrap(SchemaType.TRANSFORM, TransformSchema, inner, fn=fn)


def pipe(source: Schema[Any], target: Schema[U]) -> PipeSchema[U]:
    return PipeSchema(
        SchemaDefinition(type=SchemaType.PIPE, params={"source": source, "target": target})
    )


def lazy(factory: Callable[[], Schema[T]]) -> LazySchema[T]:
    return LazySchema(SchemaDefinition(type=SchemaType.LAZY, params={"factory": factory}))

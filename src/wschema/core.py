"""Schema base class -- the contract every variant implements.

A variant supplies ``_validate(payload, ctx)`` and its own public
properties. Everything callers use (``parse``, ``safe_parse``, check
execution, fluent composition) lives here once.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Generic,
    Literal,
    Self,
    Sequence,
    TypeVar,
)

from loguru import logger

from .context import DEFAULT_CONTEXT, ParseContext, Payload
from .errors import AsyncParseError, DefinitionError, SchemaError
from .issues import Issue, PathSegment
from .models import Check, IssueCode, SchemaDefinition, SchemaType

if TYPE_CHECKING:
    from .schemas.array import ArraySchema
    from .schemas.union import UnionSchema
    from .schemas.wrappers import (
        CatchSchema,
        DefaultSchema,
        NullableSchema,
        OptionalSchema,
        PipeSchema,
        RefineSchema,
        TransformSchema,
    )

log = logger.bind(component="core")

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class SafeParseSuccess(Generic[T]):
    data: T
    success: Literal[True] = True


@dataclass(frozen=True)
class SafeParseFailure:
    error: SchemaError
    success: Literal[False] = False


SafeParseResult = SafeParseSuccess[T] | SafeParseFailure


def ensure_sync(result: Any) -> Any:
    """Reject awaitables coming back from user callbacks."""
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise AsyncParseError()
    return result


class Schema(ABC, Generic[T]):
    """Immutable validation node built from a ``SchemaDefinition``.

    Composition never mutates: every builder method returns a new schema
    that references (but does not change) this one, so instances are safe
    to share between concurrent parse calls.
    """

    schema_type: ClassVar[SchemaType]
    # True when an object field using this schema may be absent
    accepts_missing: ClassVar[bool] = False

    def __init__(self, definition: SchemaDefinition) -> None:
        if definition.type != self.schema_type:
            raise DefinitionError(
                f"{type(self).__name__} cannot be built from a "
                f"'{definition.type}' definition"
            )
        self._definition = definition

    def __repr__(self) -> str:
        return f"<{type(self).__name__} type={self.schema_type.value}>"

    @property
    def definition(self) -> SchemaDefinition:
        return self._definition

    @property
    def description(self) -> str | None:
        return self._definition.description

    # -- Validation --

    @abstractmethod
    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        """Inspect ``payload.value``; append issues or replace the value."""

    def _issue(self, payload: Payload, code: IssueCode, **details: Any) -> Issue:
        return payload.add_issue(
            code,
            schema=self.schema_type.value,
            message=self._definition.message,
            **details,
        )

    def _check_issue(
        self, payload: Payload, code: IssueCode, message: str | None, **details: Any
    ) -> Issue:
        return payload.add_issue(
            code, schema=self.schema_type.value, message=message, **details
        )

    def run(self, payload: Payload, ctx: ParseContext) -> Payload:
        """Validate, then apply checks if the value itself was accepted."""
        payload = self._validate(payload, ctx)
        if payload.issues:
            return payload
        for check in self._definition.checks:
            before = len(payload.issues)
            check.fn(payload, ctx)
            if ctx.abort_early and len(payload.issues) > before:
                break
        return payload

    def _run_collect(self, value: Any, ctx: ParseContext) -> Payload:
        """Run on a fresh payload; a raising callback becomes one ``custom`` issue.

        ``AsyncParseError`` is a usage error and still propagates.
        """
        try:
            return self.run(Payload(value), ctx)
        except AsyncParseError:
            raise
        except SchemaError as exc:
            # a callback parsed with another schema and let the error escape
            return Payload(value, issues=list(exc.issues))
        except Exception as exc:
            log.warning(f"{self!r}: callback raised {exc!r}; reporting it as an issue")
            payload = Payload(value)
            payload.add_issue(
                IssueCode.CUSTOM,
                schema=self.schema_type.value,
                message=str(exc) or type(exc).__name__,
                exception=type(exc).__name__,
            )
            return payload

    def parse(self, value: Any, context: ParseContext | None = None) -> T:
        """Return the validated value or raise ``SchemaError`` with every issue."""
        ctx = context or DEFAULT_CONTEXT
        payload = self._run_collect(value, ctx)
        if payload.issues:
            log.debug(f"{self!r} rejected input with {len(payload.issues)} issue(s)")
            raise SchemaError(payload.issues, ctx.error_map, ctx.report_input)
        return payload.value

    def safe_parse(
        self, value: Any, context: ParseContext | None = None
    ) -> SafeParseResult[T]:
        """Like ``parse`` but returns a tagged result instead of raising."""
        ctx = context or DEFAULT_CONTEXT
        payload = self._run_collect(value, ctx)
        if payload.issues:
            return SafeParseFailure(
                SchemaError(payload.issues, ctx.error_map, ctx.report_input)
            )
        return SafeParseSuccess(payload.value)

    def is_valid(self, value: Any, context: ParseContext | None = None) -> bool:
        return self.safe_parse(value, context).success

    # -- Composition --

    def _with_definition(self, **changes: Any) -> Self:
        return type(self)(replace(self._definition, **changes))

    def _with_check(
        self, name: str, fn: Callable[[Payload, ParseContext], None], **params: Any
    ) -> Self:
        check = Check(name=name, fn=fn, params=params)
        return self._with_definition(checks=self._definition.checks + (check,))

    def describe(self, description: str) -> Self:
        return self._with_definition(description=description)

    def optional(self) -> OptionalSchema[T]:
        from .schemas.wrappers import optional

        return optional(self)

    def nullable(self) -> NullableSchema[T]:
        from .schemas.wrappers import nullable

        return nullable(self)

    def default(self, value: Any) -> DefaultSchema[T]:
        from .schemas.wrappers import default

        return default(self, value)

    def catch(self, value: Any) -> CatchSchema[T]:
        from .schemas.wrappers import catch

        return catch(self, value)

    def refine(
        self,
        predicate: Callable[[T], bool],
        message: str | None = None,
        path: Sequence[PathSegment] = (),
    ) -> RefineSchema[T]:
        from .schemas.wrappers import refine

        return refine(self, predicate, message=message, path=path)

    def transform(self, fn: Callable[[T], U]) -> TransformSchema[U]:
        from .schemas.wrappers import transform

        return transform(self, fn)

    def pipe(self, target: Schema[U]) -> PipeSchema[U]:
        from .schemas.wrappers import pipe

        return pipe(self, target)

    def or_(self, *others: Schema[Any]) -> UnionSchema[Any]:
        from .schemas.union import union

        return union([self, *others])

    def array(self) -> ArraySchema[T]:
        from .schemas.array import array

        return array(self)


def build_schema(definition: SchemaDefinition) -> Schema[Any]:
    """Construct the variant a definition's type tag names."""
    from .schemas import get_schema_class

    return get_schema_class(definition.type)(definition)


def require_schema(value: Any, what: str) -> Schema[Any]:
    """``value`` if it is a schema, else DefinitionError naming ``what``."""
    if not isinstance(value, Schema):
        raise DefinitionError(f"{what} must be a schema, got {value!r}")
    return value


def require_count(value: Any, what: str) -> int:
    """Non-negative int (lengths, item counts), else DefinitionError."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DefinitionError(f"{what} must be a non-negative integer, got {value!r}")
    return value


def require_number(value: Any, what: str) -> float:
    """Real number other than NaN (bounds, steps), else DefinitionError."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
        raise DefinitionError(f"{what} must be a number, got {value!r}")
    return value


def require_text(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise DefinitionError(f"{what} must be a string, got {value!r}")
    return value

"""Function schema and ``implement``.

A function schema declares positional input schemas and an optional output
schema. ``parse`` only checks that the value is callable; the contract is
enforced by the wrapper ``implement`` returns:

1. the argument count is checked first, and a mismatch raises
   ``invalid_function_arity`` without calling the implementation;
2. every argument is validated and all bad positions are reported together
   (one ``invalid_function_argument`` issue per position);
3. the implementation runs exactly once with the validated arguments;
4. without an output schema the result is returned as is;
5. a plain result is validated after the call (``invalid_function_return``);
6. an awaitable result is wrapped in a coroutine that awaits it and then
   validates the resolved value. If the awaitable raises, the exception
   propagates untouched and the output schema is never consulted.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, Awaitable, Callable, Iterable, NoReturn, Sequence

from loguru import logger

from ..context import DEFAULT_CONTEXT, ParseContext, Payload
from ..core import Schema, require_schema
from ..errors import DefinitionError, SchemaError
from ..models import IssueCode, SchemaDefinition, SchemaType, type_name

log = logger.bind(component="function")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _declared_signature(fn: Callable[..., Any], arity: int) -> inspect.Signature:
    """Signature with exactly ``arity`` required parameters.

    Parameter names (and annotations) come from ``fn`` when it has at least
    that many positional parameters; otherwise they are ``arg0``, ``arg1``...
    """
    try:
        params = [
            p for p in inspect.signature(fn).parameters.values() if p.kind in _POSITIONAL
        ]
    except (TypeError, ValueError):
        params = []

    if len(params) >= arity:
        declared = [
            inspect.Parameter(
                p.name, inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=p.annotation
            )
            for p in params[:arity]
        ]
    else:
        declared = [
            inspect.Parameter(f"arg{i}", inspect.Parameter.POSITIONAL_OR_KEYWORD)
            for i in range(arity)
        ]
    return inspect.Signature(declared)


class FunctionSchema(Schema[Callable[..., Any]]):
    schema_type = SchemaType.FUNCTION

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._input: tuple[Schema[Any], ...] = tuple(
            require_schema(schema, f"function input {i}")
            for i, schema in enumerate(definition.params.get("input", ()))
        )
        output = definition.params.get("output")
        self._output: Schema[Any] | None = (
            None if output is None else require_schema(output, "function output")
        )

    @property
    def input(self) -> tuple[Schema[Any], ...]:
        return self._input

    @property
    def output(self) -> Schema[Any] | None:
        return self._output

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if not callable(payload.value):
            self._issue(
                payload, IssueCode.INVALID_TYPE,
                expected="function", received=type_name(payload.value),
            )
        return payload

    def args(self, *schemas: Schema[Any]) -> FunctionSchema:
        return self._with_definition(params={"input": schemas, "output": self._output})

    def returns(self, schema: Schema[Any]) -> FunctionSchema:
        return self._with_definition(params={"input": self._input, "output": schema})

    # -- implement --

    def _raise(self, payload: Payload, ctx: ParseContext) -> NoReturn:
        raise SchemaError(payload.issues, ctx.error_map, ctx.report_input)

    def _bind(
        self,
        signature: inspect.Signature,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        ctx: ParseContext,
    ) -> tuple[Any, ...]:
        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError:
            received = len(args) + len(kwargs)
            log.debug(f"arity mismatch: expected {len(self._input)}, received {received}")
            payload = Payload((*args, *kwargs.values()))
            self._issue(
                payload, IssueCode.INVALID_FUNCTION_ARITY,
                expected=len(self._input), received=received,
            )
            self._raise(payload, ctx)
        return bound.args

    def _parse_arguments(self, values: Sequence[Any], ctx: ParseContext) -> list[Any]:
        payload = Payload(tuple(values))
        parsed = []
        for index, (schema, value) in enumerate(zip(self._input, values)):
            child = schema.run(payload.child(value), ctx)
            parsed.append(child.value)
            if child.issues:
                self._issue(
                    payload, IssueCode.INVALID_FUNCTION_ARGUMENT,
                    path=(index,), input=value,
                    index=index, issues=tuple(child.issues),
                )
                if ctx.abort_early:
                    break
        if payload.issues:
            log.debug(f"{len(payload.issues)} invalid argument(s)")
            self._raise(payload, ctx)
        return parsed

    def _parse_return(self, value: Any, ctx: ParseContext) -> Any:
        child = self._output.run(Payload(value), ctx)
        if child.issues:
            log.debug(f"invalid return value ({len(child.issues)} issue(s))")
            payload = Payload(value)
            self._issue(payload, IssueCode.INVALID_FUNCTION_RETURN, issues=tuple(child.issues))
            self._raise(payload, ctx)
        return child.value

    async def _await_return(self, pending: Awaitable[Any], ctx: ParseContext) -> Any:
        value = await pending
        return self._parse_return(value, ctx)

    def implement(
        self, fn: Callable[..., Any], *, context: ParseContext | None = None
    ) -> Callable[..., Any]:
        """Wrap ``fn`` so every call is checked against this contract.

        The wrapper's ``inspect.signature`` has exactly the declared number
        of parameters. ``context`` applies to every call of the wrapper.
        """
        if not callable(fn):
            raise DefinitionError(f"implement needs a callable, got {fn!r}")
        ctx = context or DEFAULT_CONTEXT
        signature = _declared_signature(fn, len(self._input))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            values = self._bind(signature, args, kwargs, ctx)
            parsed = self._parse_arguments(values, ctx)
            result = fn(*parsed)
            if self._output is None:
                return result
            if inspect.isawaitable(result):
                return self._await_return(result, ctx)
            return self._parse_return(result, ctx)

        wrapper.__signature__ = signature  # type: ignore[attr-defined]
        return wrapper


def function(
    input: Iterable[Schema[Any]] = (),
    output: Schema[Any] | None = None,
    message: str | None = None,
) -> FunctionSchema:
    return FunctionSchema(
        SchemaDefinition(
            type=SchemaType.FUNCTION,
            params={"input": tuple(input), "output": output},
            message=message,
        )
    )

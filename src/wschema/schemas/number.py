"""Number schema and its checks."""

from __future__ import annotations

import math

from ..context import ParseContext, Payload
from ..core import Schema, require_number
from ..errors import DefinitionError
from ..models import IssueCode, SchemaDefinition, SchemaType, type_name


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _coerce_numeric(text: str) -> object:
    """int() then float() of a numeric string; the string itself if neither parses."""
    stripped = text.strip()
    for convert in (int, float):
        try:
            return convert(stripped)
        except ValueError:
            continue
    return text


class NumberSchema(Schema[float]):
    schema_type = SchemaType.NUMBER

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._coerce = bool(definition.params.get("coerce", False))

    @property
    def coerce(self) -> bool:
        return self._coerce

    @property
    def is_int(self) -> bool:
        return bool(self._definition.check_params("int"))

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if self._coerce and isinstance(payload.value, str):
            payload.value = _coerce_numeric(payload.value)
        if _is_number(payload.value):
            return payload
        received = "nan" if isinstance(payload.value, float) else type_name(payload.value)
        self._issue(payload, IssueCode.INVALID_TYPE, expected="number", received=received)
        return payload

    def _bound(
        self, name: str, limit: float, inclusive: bool, lower: bool, message: str | None
    ) -> NumberSchema:
        require_number(limit, f"{name} bound")

        def check(payload: Payload, ctx: ParseContext) -> None:
            value = payload.value
            if lower:
                failed = value < limit if inclusive else value <= limit
                if failed:
                    self._check_issue(
                        payload, IssueCode.TOO_SMALL, message,
                        type="number", minimum=limit, inclusive=inclusive,
                    )
            else:
                failed = value > limit if inclusive else value >= limit
                if failed:
                    self._check_issue(
                        payload, IssueCode.TOO_BIG, message,
                        type="number", maximum=limit, inclusive=inclusive,
                    )

        key = "minimum" if lower else "maximum"
        return self._with_check(name, check, **{key: limit, "inclusive": inclusive})

    def gt(self, value: float, message: str | None = None) -> NumberSchema:
        return self._bound("gt", value, inclusive=False, lower=True, message=message)

    def gte(self, value: float, message: str | None = None) -> NumberSchema:
        return self._bound("gte", value, inclusive=True, lower=True, message=message)

    min = gte

    def lt(self, value: float, message: str | None = None) -> NumberSchema:
        return self._bound("lt", value, inclusive=False, lower=False, message=message)

    def lte(self, value: float, message: str | None = None) -> NumberSchema:
        return self._bound("lte", value, inclusive=True, lower=False, message=message)

    max = lte

    def positive(self, message: str | None = None) -> NumberSchema:
        return self.gt(0, message)

    def nonnegative(self, message: str | None = None) -> NumberSchema:
        return self.gte(0, message)

    def negative(self, message: str | None = None) -> NumberSchema:
        return self.lt(0, message)

    def nonpositive(self, message: str | None = None) -> NumberSchema:
        return self.lte(0, message)

    def int(self, message: str | None = None) -> NumberSchema:
        """Accept only whole numbers; integral floats are narrowed to ``int``."""

        def check(payload: Payload, ctx: ParseContext) -> None:
            value = payload.value
            if isinstance(value, float):
                if value.is_integer():
                    payload.value = int(value)
                    return
                self._check_issue(
                    payload, IssueCode.INVALID_TYPE, message,
                    expected="integer", received="float",
                )

        return self._with_check("int", check)

    def multiple_of(self, step: float, message: str | None = None) -> NumberSchema:
        if require_number(step, "multiple_of step") == 0:
            raise DefinitionError("multiple_of step must not be zero")

        def check(payload: Payload, ctx: ParseContext) -> None:
            remainder = math.fmod(payload.value, step)
            if not (math.isclose(remainder, 0.0, abs_tol=1e-9)
                    or math.isclose(abs(remainder), abs(step), abs_tol=1e-9)):
                self._check_issue(
                    payload, IssueCode.NOT_MULTIPLE_OF, message, multiple_of=step
                )

        return self._with_check("multiple_of", check, multiple_of=step)

    def finite(self, message: str | None = None) -> NumberSchema:
        def check(payload: Payload, ctx: ParseContext) -> None:
            if math.isinf(payload.value):
                self._check_issue(payload, IssueCode.NOT_FINITE, message)

        return self._with_check("finite", check)


def number(coerce: bool = False, message: str | None = None) -> NumberSchema:
    """Schema accepting ``int``/``float`` (``coerce=True`` also parses numeric strings)."""
    return NumberSchema(
        SchemaDefinition(type=SchemaType.NUMBER, params={"coerce": coerce}, message=message)
    )


def integer(coerce: bool = False, message: str | None = None) -> NumberSchema:
    return number(coerce=coerce, message=message).int()

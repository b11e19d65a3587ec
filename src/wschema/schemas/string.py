"""String schema and its checks."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from ..context import ParseContext, Payload
from ..core import Schema, require_count, require_text
from ..models import IssueCode, SchemaDefinition, SchemaType, type_name

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _is_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class StringSchema(Schema[str]):
    schema_type = SchemaType.STRING

    def __init__(self, definition: SchemaDefinition) -> None:
        super().__init__(definition)
        self._coerce = bool(definition.params.get("coerce", False))

    @property
    def coerce(self) -> bool:
        return self._coerce

    @property
    def min_length(self) -> int | None:
        bounds = [p["minimum"] for p in self._definition.check_params("min_length")]
        return max(bounds) if bounds else None

    @property
    def max_length(self) -> int | None:
        bounds = [p["maximum"] for p in self._definition.check_params("max_length")]
        return min(bounds) if bounds else None

    def _validate(self, payload: Payload, ctx: ParseContext) -> Payload:
        if self._coerce and payload.value is not None and not isinstance(payload.value, str):
            payload.value = str(payload.value)
        if isinstance(payload.value, str):
            return payload
        self._issue(
            payload,
            IssueCode.INVALID_TYPE,
            expected="string",
            received=type_name(payload.value),
        )
        return payload

    # -- Length checks --

    def min(self, length: int, message: str | None = None) -> StringSchema:
        require_count(length, "min length")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if len(payload.value) < length:
                self._check_issue(
                    payload, IssueCode.TOO_SMALL, message,
                    type="string", minimum=length, inclusive=True,
                )

        return self._with_check("min_length", check, minimum=length)

    def max(self, length: int, message: str | None = None) -> StringSchema:
        require_count(length, "max length")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if len(payload.value) > length:
                self._check_issue(
                    payload, IssueCode.TOO_BIG, message,
                    type="string", maximum=length, inclusive=True,
                )

        return self._with_check("max_length", check, maximum=length)

    def length(self, length: int, message: str | None = None) -> StringSchema:
        require_count(length, "length")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if len(payload.value) != length:
                self._check_issue(
                    payload, IssueCode.INVALID_STRING, message,
                    validation="length", exact=length,
                )

        return self._with_check("length", check, exact=length)

    def nonempty(self, message: str | None = None) -> StringSchema:
        return self.min(1, message)

    # -- Content checks --

    def regex(self, pattern: str | re.Pattern[str], message: str | None = None) -> StringSchema:
        if isinstance(pattern, re.Pattern):
            compiled = pattern
        else:
            compiled = re.compile(require_text(pattern, "regex pattern"))

        def check(payload: Payload, ctx: ParseContext) -> None:
            if compiled.search(payload.value) is None:
                self._check_issue(
                    payload, IssueCode.INVALID_STRING, message,
                    validation="regex", pattern=compiled.pattern,
                )

        return self._with_check("regex", check, pattern=compiled.pattern)

    def starts_with(self, prefix: str, message: str | None = None) -> StringSchema:
        require_text(prefix, "starts_with prefix")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if not payload.value.startswith(prefix):
                self._check_issue(
                    payload, IssueCode.INVALID_STRING, message,
                    validation="starts_with", value=prefix,
                )

        return self._with_check("starts_with", check, value=prefix)

    def ends_with(self, suffix: str, message: str | None = None) -> StringSchema:
        require_text(suffix, "ends_with suffix")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if not payload.value.endswith(suffix):
                self._check_issue(
                    payload, IssueCode.INVALID_STRING, message,
                    validation="ends_with", value=suffix,
                )

        return self._with_check("ends_with", check, value=suffix)

    def includes(self, substring: str, message: str | None = None) -> StringSchema:
        require_text(substring, "includes substring")

        def check(payload: Payload, ctx: ParseContext) -> None:
            if substring not in payload.value:
                self._check_issue(
                    payload, IssueCode.INVALID_STRING, message,
                    validation="includes", value=substring,
                )

        return self._with_check("includes", check, value=substring)

    def email(self, message: str | None = None) -> StringSchema:
        def check(payload: Payload, ctx: ParseContext) -> None:
            if not _EMAIL_RE.match(payload.value):
                self._check_issue(payload, IssueCode.INVALID_STRING, message, validation="email")

        return self._with_check("email", check)

    def url(self, message: str | None = None) -> StringSchema:
        """Require an absolute http(s) URL."""

        def check(payload: Payload, ctx: ParseContext) -> None:
            if not _is_http_url(payload.value):
                self._check_issue(payload, IssueCode.INVALID_STRING, message, validation="url")

        return self._with_check("url", check)

    # -- Transforms (run in order with the checks) --

    def trim(self) -> StringSchema:
        def check(payload: Payload, ctx: ParseContext) -> None:
            payload.value = payload.value.strip()

        return self._with_check("trim", check)

    def lower(self) -> StringSchema:
        def check(payload: Payload, ctx: ParseContext) -> None:
            payload.value = payload.value.lower()

        return self._with_check("lower", check)

    def upper(self) -> StringSchema:
        def check(payload: Payload, ctx: ParseContext) -> None:
            payload.value = payload.value.upper()

        return self._with_check("upper", check)


def string(coerce: bool = False, message: str | None = None) -> StringSchema:
    """Schema accepting ``str`` values (``coerce=True`` applies ``str()`` first)."""
    return StringSchema(
        SchemaDefinition(type=SchemaType.STRING, params={"coerce": coerce}, message=message)
    )

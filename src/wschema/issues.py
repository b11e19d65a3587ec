"""Structured validation issues and their messages.

An ``Issue`` is plain data: validation appends issues to a payload and only
``SchemaError`` turns them into an exception. Messages are filled in late, at
the outermost parse call, so a caller-supplied error map can rewrite them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Sequence

from rapidfuzz import fuzz, process

from .models import IssueCode

PathSegment = str | int
ErrorMap = Callable[["Issue", str], "str | None"]

# details keys holding nested issues (function argument/return, union branches)
_NESTED_KEYS = ("issues", "union_issues")


@dataclass(frozen=True)
class Issue:
    """One validation failure.

    Variant data (``expected``, ``options``, ``minimum`` ...) lives in
    ``details`` and is also readable as an attribute::

        issue.options   # same as issue.details["options"]
    """

    code: IssueCode
    path: tuple[PathSegment, ...] = ()
    input: Any = None
    message: str | None = None
    schema: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.details, MappingProxyType):
            object.__setattr__(self, "details", MappingProxyType(dict(self.details)))
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))

    def __hash__(self) -> int:
        # input and details may hold unhashable values; equal issues share these
        return hash((self.code, self.path))

    def __getattr__(self, name: str) -> Any:
        if name == "details" or name.startswith("__"):
            raise AttributeError(name)
        try:
            return self.details[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} has no attribute or detail {name!r}"
            ) from None

    def prefixed(self, segment: PathSegment) -> Issue:
        """Copy of this issue re-based under ``segment``."""
        return replace(self, path=(segment, *self.path))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "code": str(self.code),
            "path": list(self.path),
            "input": self.input,
            "message": self.message,
        }
        for key, value in self.details.items():
            if key in _NESTED_KEYS:
                data[key] = _nested_to_data(value)
            else:
                data[key] = value
        return data


def _nested_to_data(value: Any) -> Any:
    if isinstance(value, Issue):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_nested_to_data(v) for v in value]
    return value


def prefix_issues(segment: PathSegment, issues: Iterable[Issue]) -> list[Issue]:
    return [issue.prefixed(segment) for issue in issues]


def closest_match(
    value: Any, candidates: Sequence[str], cutoff: float
) -> str | None:
    """Best fuzzy match for ``value`` among ``candidates``, or None."""
    if not isinstance(value, str) or not value or not candidates:
        return None
    match = process.extractOne(value, candidates, scorer=fuzz.ratio, score_cutoff=cutoff)
    if match is None:
        return None
    return match[0]


def _repr(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)


def _bound(issue: Issue, word_inclusive: str, word_exclusive: str) -> str:
    return word_inclusive if issue.details.get("inclusive", True) else word_exclusive


def default_message(issue: Issue) -> str:
    """Deterministic English message for an issue."""
    d = issue.details
    code = issue.code

    if code == IssueCode.INVALID_TYPE:
        message = f"Invalid input: expected {d.get('expected', 'value')}"
        if d.get("received"):
            message += f", received {d['received']}"
        return message

    if code == IssueCode.INVALID_LITERAL:
        return f"Invalid literal value, expected {_repr(d.get('expected'))}"

    if code == IssueCode.INVALID_ENUM_VALUE:
        options = " | ".join(_repr(o) for o in d.get("options", ()))
        message = f"Invalid enum value. Expected {options}, received {_repr(issue.input)}"
        if d.get("suggestion"):
            message += f". Did you mean {_repr(d['suggestion'])}?"
        return message

    if code == IssueCode.INVALID_UNION:
        return f"Invalid input: no union option matched ({len(d.get('union_issues', ()))} tried)"

    if code == IssueCode.INVALID_UNION_DISCRIMINATOR:
        options = " | ".join(_repr(o) for o in d.get("options", ()))
        return (
            f"Invalid discriminator value for {_repr(d.get('discriminator'))}. "
            f"Expected {options}"
        )

    if code == IssueCode.UNRECOGNIZED_KEYS:
        keys = ", ".join(_repr(k) for k in d.get("keys", ()))
        message = f"Unrecognized key(s) in object: {keys}"
        if d.get("suggestion"):
            message += f". Did you mean {_repr(d['suggestion'])}?"
        return message

    if code == IssueCode.INVALID_STRING:
        validation = d.get("validation")
        if validation == "email":
            return "Invalid email"
        if validation == "url":
            return "Invalid url"
        if validation == "regex":
            return "Invalid string: does not match pattern"
        if validation == "starts_with":
            return f"Invalid string: must start with {_repr(d.get('value'))}"
        if validation == "ends_with":
            return f"Invalid string: must end with {_repr(d.get('value'))}"
        if validation == "includes":
            return f"Invalid string: must include {_repr(d.get('value'))}"
        if validation == "length":
            return f"String must contain exactly {d.get('exact')} character(s)"
        return "Invalid string"

    if code == IssueCode.TOO_SMALL:
        kind = d.get("type")
        minimum = d.get("minimum")
        if kind == "string":
            return f"String must contain {_bound(issue, 'at least', 'more than')} {minimum} character(s)"
        if kind == "array":
            return f"Array must contain {_bound(issue, 'at least', 'more than')} {minimum} element(s)"
        if kind == "date":
            return f"Date must be {_bound(issue, 'greater than or equal to', 'greater than')} {minimum}"
        return f"Number must be {_bound(issue, 'greater than or equal to', 'greater than')} {minimum}"

    if code == IssueCode.TOO_BIG:
        kind = d.get("type")
        maximum = d.get("maximum")
        if kind == "string":
            return f"String must contain {_bound(issue, 'at most', 'less than')} {maximum} character(s)"
        if kind == "array":
            return f"Array must contain {_bound(issue, 'at most', 'less than')} {maximum} element(s)"
        if kind == "date":
            return f"Date must be {_bound(issue, 'less than or equal to', 'less than')} {maximum}"
        return f"Number must be {_bound(issue, 'less than or equal to', 'less than')} {maximum}"

    if code == IssueCode.NOT_MULTIPLE_OF:
        return f"Number must be a multiple of {d.get('multiple_of')}"

    if code == IssueCode.NOT_FINITE:
        return "Number must be finite"

    if code == IssueCode.INVALID_DATE:
        return "Invalid date"

    if code == IssueCode.INVALID_FUNCTION_ARITY:
        return (
            f"Invalid function arguments: expected {d.get('expected')} "
            f"argument(s), received {d.get('received')}"
        )

    if code == IssueCode.INVALID_FUNCTION_ARGUMENT:
        inner = "; ".join(i.message or default_message(i) for i in d.get("issues", ()))
        return f"Invalid function argument at position {d.get('index')}: {inner}"

    if code == IssueCode.INVALID_FUNCTION_RETURN:
        inner = "; ".join(i.message or default_message(i) for i in d.get("issues", ()))
        return f"Invalid function return value: {inner}"

    return "Invalid input"


def format_issue(
    issue: Issue, error_map: ErrorMap | None = None, report_input: bool = True
) -> Issue:
    """Fill in ``message`` (schema message > error map > default).

    Nested issues are formatted with the same map first so the parent's
    default message can quote them.
    """
    details = issue.details
    nested_changes = {}
    for key in _NESTED_KEYS:
        if key in details:
            nested_changes[key] = _format_nested(details[key], error_map, report_input)
    if nested_changes:
        issue = replace(issue, details={**details, **nested_changes})

    if issue.message is None:
        default = default_message(issue)
        custom = error_map(issue, default) if error_map is not None else None
        issue = replace(issue, message=custom or default)

    if not report_input:
        issue = replace(issue, input=None)
    return issue


def _format_nested(value: Any, error_map: ErrorMap | None, report_input: bool) -> Any:
    if isinstance(value, Issue):
        return format_issue(value, error_map, report_input)
    if isinstance(value, (list, tuple)):
        return tuple(_format_nested(v, error_map, report_input) for v in value)
    return value

"""Per-call validation state: the payload threaded through a traversal and
the caller-supplied context that travels with it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .issues import ErrorMap, Issue, PathSegment
from .models import DEFAULT_SUGGESTION_CUTOFF, IssueCode


@dataclass(frozen=True)
class ParseContext:
    """Validation-time options, passed by reference down every call."""

    error_map: ErrorMap | None = None
    abort_early: bool = False
    report_input: bool = True
    suggestion_cutoff: float = DEFAULT_SUGGESTION_CUTOFF


DEFAULT_CONTEXT = ParseContext()

# marks "report the payload's own value" in add_issue
_CURRENT = object()


@dataclass
class Payload:
    """Mutable carrier of the value under validation.

    A payload belongs to exactly one parse call. Children get a fresh
    payload with an empty path; the parent re-bases their issues through
    ``merge`` when they return.
    """

    value: Any
    path: tuple[PathSegment, ...] = ()
    issues: list[Issue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def child(self, value: Any) -> Payload:
        return Payload(value)

    def add_issue(
        self,
        code: IssueCode,
        schema: str | None = None,
        message: str | None = None,
        path: tuple[PathSegment, ...] = (),
        input: Any = _CURRENT,
        **details: Any,
    ) -> Issue:
        """Append an issue about the current value (or ``input`` when given)."""
        issue = Issue(
            code=code,
            path=self.path + tuple(path),
            input=self.value if input is _CURRENT else input,
            message=message,
            schema=schema,
            details=details,
        )
        self.issues.append(issue)
        return issue

    def merge(self, segment: PathSegment, child: Payload) -> bool:
        """Re-base ``child``'s issues under ``segment``; True if it had none."""
        for issue in child.issues:
            self.issues.append(issue.prefixed(segment))
        return child.ok

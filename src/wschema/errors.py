"""Exception hierarchy for the schema engine."""

from __future__ import annotations

import json
from typing import Any, Iterable

from .issues import ErrorMap, Issue, format_issue


class WSchemaError(Exception):
    """Base exception for all wschema errors."""


class ConfigError(WSchemaError):
    """Invalid or missing configuration."""


class DefinitionError(WSchemaError):
    """A schema definition is malformed (raised while composing, never while parsing)."""

    def __init__(self, message: str, location: str = "$") -> None:
        super().__init__(f"{location}: {message}")
        self.location = location
        self.reason = message


class AsyncParseError(WSchemaError):
    """A callback returned an awaitable during synchronous validation."""

    def __init__(self) -> None:
        super().__init__(
            "Encountered an awaitable during synchronous validation; "
            "refinements, transforms and custom predicates must be synchronous."
        )


class SchemaError(WSchemaError, ValueError):
    """Aggregate validation failure: every issue found by one parse call, in order."""

    def __init__(
        self,
        issues: Iterable[Issue],
        error_map: ErrorMap | None = None,
        report_input: bool = True,
    ) -> None:
        self.issues: tuple[Issue, ...] = tuple(
            format_issue(issue, error_map, report_input) for issue in issues
        )
        super().__init__(self.format())

    def __len__(self) -> int:
        return len(self.issues)

    def to_list(self) -> list[dict[str, Any]]:
        """Issues as plain dicts (JSON-friendly apart from ``input``)."""
        return [issue.to_dict() for issue in self.issues]

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_list(), indent=indent, default=repr)

    def format(self) -> str:
        """One ``path: message`` line per issue."""
        lines = []
        for issue in self.issues:
            where = ".".join(str(p) for p in issue.path) or "<root>"
            lines.append(f"{where}: {issue.message}")
        return "\n".join(lines)

    def flatten(self) -> dict[str, Any]:
        """Group messages by top-level field.

        Issues at the root land in ``form_errors``; everything else is keyed
        by its first path segment in ``field_errors``.
        """
        form_errors: list[str] = []
        field_errors: dict[str | int, list[str]] = {}
        for issue in self.issues:
            if issue.path:
                field_errors.setdefault(issue.path[0], []).append(issue.message or "")
            else:
                form_errors.append(issue.message or "")
        return {"form_errors": form_errors, "field_errors": field_errors}

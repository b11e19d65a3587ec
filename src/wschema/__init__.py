"""wschema -- runtime schema validation with structured, path-qualified errors.

Core modules:
    models      -- Type tags, issue codes, unknown-keys policy and the frozen
                   SchemaDefinition every schema node is built from
    issues      -- Issue records, default messages, error-map formatting and
                   fuzzy "did you mean" suggestions (rapidfuzz)
    errors      -- Exception hierarchy. SchemaError aggregates every issue of
                   one parse call.
    context     -- Per-call Payload and caller-supplied ParseContext
    core        -- Schema base class: parse / safe_parse / fluent composition
    builders    -- One namespace of builder functions (exported as ``s``)
    config      -- SchemaSettings via pydantic-settings (WSCHEMA_* env vars)
                   and loguru setup
    definitions -- Schema trees from plain dict/JSON definitions
    interop     -- JSON Schema and pydantic export
    metadata    -- Ready-made EPUB / M4B tag schemas for the conversion glue
    cli         -- ``wschema-check`` Click entry point

Subpackages:
    schemas     -- The closed set of variants (string, number, enum, array,
                   object, union, wrappers, function ...) and their registry

Logging is disabled for the ``wschema`` namespace until a host opts in
(``SchemaSettings().setup_logging()`` or ``logger.enable("wschema")``).
"""

from loguru import logger

from . import builders as s
from .context import DEFAULT_CONTEXT, ParseContext, Payload
from .core import SafeParseFailure, SafeParseResult, SafeParseSuccess, Schema, build_schema
from .errors import AsyncParseError, ConfigError, DefinitionError, SchemaError, WSchemaError
from .issues import Issue, default_message
from .models import IssueCode, SchemaDefinition, SchemaType, UnknownKeys

logger.disable("wschema")

__version__ = "0.1.0"

__all__ = [
    "AsyncParseError",
    "ConfigError",
    "DEFAULT_CONTEXT",
    "DefinitionError",
    "Issue",
    "IssueCode",
    "ParseContext",
    "Payload",
    "SafeParseFailure",
    "SafeParseResult",
    "SafeParseSuccess",
    "Schema",
    "SchemaDefinition",
    "SchemaError",
    "SchemaType",
    "UnknownKeys",
    "WSchemaError",
    "build_schema",
    "default_message",
    "s",
]

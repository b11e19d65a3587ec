"""Builder functions for every schema variant, in one namespace.

Usually imported as ``from wschema import s``::

    book = s.object({"title": s.string().min(1), "tags": s.string().array()})
"""

from __future__ import annotations

from .schemas.array import array, record
from .schemas.enum import enum
from .schemas.function import function
from .schemas.number import integer, number
from .schemas.object import object
from .schemas.primitives import (
    boolean,
    custom,
    date,
    instance_of,
    literal,
    none,
    unknown,
)
from .schemas.string import string
from .schemas.union import discriminated_union, union
from .schemas.wrappers import (
    catch,
    default,
    lazy,
    nullable,
    optional,
    pipe,
    refine,
    transform,
)

any = unknown

__all__ = [
    "any",
    "array",
    "boolean",
    "catch",
    "custom",
    "date",
    "default",
    "discriminated_union",
    "enum",
    "function",
    "instance_of",
    "integer",
    "lazy",
    "literal",
    "none",
    "nullable",
    "number",
    "object",
    "optional",
    "pipe",
    "record",
    "refine",
    "string",
    "transform",
    "union",
    "unknown",
]

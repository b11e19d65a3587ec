"""Ready-made schemas for the EPUB -> M4B conversion glue.

The converter parses an EPUB, writes its metadata (and chapter list) as
JSON, and later tags the M4B. These schemas check both hand-offs:

    EPUB_METADATA -- what the EPUB parser produces
    TOC_ITEM      -- one (possibly nested) table-of-contents entry
    CHAPTER       -- one extracted chapter
    M4B_OVERRIDES -- user-supplied tag overrides
    M4B_TAGS      -- the final tag set written to the M4B

``merge_m4b_tags`` builds the final tags the way the converter does:
overrides first, then EPUB data, then fallbacks (file name, "AI Narrator",
"Audiobook").
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from loguru import logger

from . import builders as s
from .context import ParseContext

log = logger.bind(component="metadata")

DEFAULT_ARTIST = "AI Narrator"
DEFAULT_GENRE = "Audiobook"

_TEXT = s.string().trim().nonempty()

EPUB_METADATA = s.object({
    "title": _TEXT,
    "author": s.array(_TEXT).optional(),
    "language": s.string(),
    "identifier": s.string(),
    "publisher": s.string().optional(),
    "date": s.string().optional(),
    "description": s.string().optional(),
    "cover": s.string().optional(),
}).describe("Metadata read from an EPUB package document")

TOC_ITEM = s.lazy(lambda: s.object({
    "id": s.string(),
    "label": s.string(),
    "href": s.string(),
    "children": s.array(TOC_ITEM).optional(),
}))

CHAPTER = s.object({
    "chapter": _TEXT,
    "content": s.array(s.string()).default(list),
}).describe("One chapter extracted from the EPUB spine")

M4B_OVERRIDES = s.object({
    "title": _TEXT.optional(),
    "artist": _TEXT.optional(),
    "album": _TEXT.optional(),
    "year": s.string().regex(r"^\d{4}$").optional(),
    "genre": _TEXT.optional(),
}, unknown_keys="strict")

M4B_TAGS = s.object({
    "title": _TEXT,
    "album": _TEXT,
    "artist": _TEXT.default(DEFAULT_ARTIST),
    "genre": _TEXT.default(DEFAULT_GENRE),
    "year": s.string().regex(r"^\d{4}$").optional(),
    "date": s.string().optional(),
    "publisher": s.string().optional(),
    "chapters": s.array(CHAPTER).optional(),
}).describe("Tags written to the finished M4B")


def validate_m4b_tags(data: Any, context: ParseContext | None = None) -> dict[str, Any]:
    """Validated tag dict; raises SchemaError listing every bad field."""
    return M4B_TAGS.parse(data, context)


def merge_m4b_tags(
    epub_path: str | Path,
    epub: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
    context: ParseContext | None = None,
) -> dict[str, Any]:
    """Final M4B tags for ``epub_path``.

    Precedence per tag: ``overrides`` > EPUB metadata > fallback. Title and
    album fall back to the EPUB file name without extension, the artist to
    the first author (then "AI Narrator").
    """
    basename = Path(epub_path).stem
    book = EPUB_METADATA.parse(epub, context) if epub is not None else {}
    user = M4B_OVERRIDES.parse(dict(overrides or {}), context)

    authors = book.get("author") or []
    tags = {
        "title": book.get("title") or basename,
        "album": book.get("title") or basename,
        "artist": authors[0] if authors else DEFAULT_ARTIST,
        "genre": DEFAULT_GENRE,
        "date": book.get("date"),
        "publisher": book.get("publisher"),
        **user,
    }
    log.debug(f"merged tags for {basename}: {sorted(k for k, v in tags.items() if v)}")
    return validate_m4b_tags({k: v for k, v in tags.items() if v is not None}, context)

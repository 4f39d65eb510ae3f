"""Fallback derivation of title, description and url for search records."""

from __future__ import annotations

import re

from crawlbot.models import SearchResultRecord

_HEADING_PREFIX_RE = re.compile(r"^#+\s*")


def _markdown_lines(markdown: str | None) -> list[str]:
    if not markdown:
        return []
    return [line.strip() for line in markdown.split("\n") if line.strip()]


def title_from_markdown(markdown: str | None) -> str | None:
    """First non-empty line with leading ``#`` heading markers removed."""
    lines = _markdown_lines(markdown)
    if not lines:
        return None
    line = lines[0]
    if line.startswith("#"):
        line = _HEADING_PREFIX_RE.sub("", line, count=1).strip()
    return line or None


def description_from_markdown(markdown: str | None) -> str | None:
    """Second non-empty line; the first one is reserved for the title."""
    lines = _markdown_lines(markdown)
    return lines[1] if len(lines) > 1 else None


def _looks_like_url(value: str) -> bool:
    lower = value.lower()
    return lower.startswith("http://") or lower.startswith("https://")


def _meta_text(record: SearchResultRecord, key: str) -> str | None:
    value = record.metadata.get(key)
    return value if isinstance(value, str) and value else None


def derive_fields(record: SearchResultRecord) -> SearchResultRecord:
    """Fill missing title, description and url on ``record`` in place.

    Each field keeps its explicit value when present, then falls back to the
    metadata equivalent, then to content-derived candidates. Running this on
    an already derived record changes nothing.
    """
    markdown = record.content.markdown

    if not record.title:
        record.title = _meta_text(record, "title") or title_from_markdown(markdown)

    if not record.description:
        record.description = _meta_text(record, "description") or description_from_markdown(markdown)

    if not record.url:
        record.url = _meta_text(record, "sourceURL") or next(
            (link for link in record.links if link and _looks_like_url(link)),
            None,
        )

    return record

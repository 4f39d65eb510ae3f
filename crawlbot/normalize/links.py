"""Normalization of site-map link entries into plain URL strings."""

from __future__ import annotations

from typing import Any

from crawlbot.normalize.fields import scalar_text, stringify


def _object_link(entry: dict[str, Any]) -> str:
    for key in ("url", "href"):
        text = scalar_text(entry.get(key))
        if text is not None:
            return text
    return stringify(entry)


def normalize_links(value: Any) -> list[str]:
    """Flatten a map response ``links`` value into URL strings.

    Accepts a single string, a single object (``url`` then ``href``), or an
    array mixing both. Nulls are skipped, order and duplicates are kept, and
    objects without a link field are kept as their compact JSON text.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        return [_object_link(value)]
    if not isinstance(value, list):
        return []

    links: list[str] = []
    for entry in value:
        if entry is None:
            continue
        if isinstance(entry, str):
            links.append(entry)
        elif isinstance(entry, dict):
            links.append(_object_link(entry))
        else:
            links.append(stringify(entry))
    return links

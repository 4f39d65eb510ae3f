"""Accessors over decoded JSON trees (dicts, lists, scalars)."""

from __future__ import annotations

import json
import re
from typing import Any

_NON_DIGITS_RE = re.compile(r"[^0-9-]")


def scalar_text(value: Any) -> str | None:
    """Text form of a JSON scalar; ``None`` for null, objects and arrays."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return json.dumps(value)
    return None


def stringify(value: Any) -> str:
    """Deterministic compact JSON text for an arbitrary tree value."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def first_string(obj: dict[str, Any], *keys: str) -> str | None:
    """First non-empty scalar among ``keys``, as text."""
    for key in keys:
        text = scalar_text(obj.get(key))
        if text:
            return text
    return None


def first_object(obj: dict[str, Any], *keys: str) -> dict[str, Any] | None:
    for key in keys:
        value = obj.get(key)
        if isinstance(value, dict):
            return value
    return None


def first_array(obj: dict[str, Any], *keys: str) -> list[Any] | None:
    for key in keys:
        value = obj.get(key)
        if isinstance(value, list):
            return value
    return None


def first_int(obj: dict[str, Any], *keys: str) -> int | None:
    """First scalar among ``keys`` readable as an integer.

    Strings such as ``"HTTP 404"`` keep only their digits.
    """
    for key in keys:
        value = obj.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            digits = _NON_DIGITS_RE.sub("", value).strip()
            try:
                return int(digits)
            except ValueError:
                continue
    return None

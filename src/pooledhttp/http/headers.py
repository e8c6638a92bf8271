# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Transport defaults, request
headers and response headers arrive as plain dicts, ``httpx.Headers`` or lists of pairs,
so every lookup here compares names case-insensitively.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def iter_header_items(headers: Any) -> list[tuple[str, str]]:
    """
    Flatten a header container into ``(name, value)`` pairs.

    Accepts plain mappings, ``httpx.Headers`` (multi-valued, via ``multi_items``) and
    iterables of pairs. Entries with a blank name are dropped.
    """
    if not headers:
        return []
    multi_items = getattr(headers, "multi_items", None)
    if callable(multi_items):
        items: Iterable[Any] = multi_items()
    elif isinstance(headers, Mapping):
        items = headers.items()
    else:
        items = headers

    out: list[tuple[str, str]] = []
    for key, value in items:
        if key is None:
            continue
        name = str(key).strip()
        if not name:
            continue
        out.append((name, "" if value is None else str(value)))
    return out


def normalize_headers(headers: Any) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header container. Repeated names are comma-joined."""
    out: dict[str, str] = {}
    for name, value in iter_header_items(headers):
        key = name.lower()
        out[key] = f"{out[key]}, {value}" if key in out else value
    return out


def has_header(headers: Any, name: str) -> bool:
    """Return True when ``name`` is present, compared case-insensitively."""
    if not name:
        return False
    lower = name.strip().lower()
    return any(key.lower() == lower for key, _ in iter_header_items(headers))


def header_value(headers: Any, name: str, default: str = "") -> str:
    """Return the first value for ``name`` using case-insensitive key matching."""
    if not name:
        return default
    lower = name.strip().lower()
    for key, value in iter_header_items(headers):
        if key.lower() == lower:
            return value.strip()
    return default


__all__ = ["has_header", "header_value", "iter_header_items", "normalize_headers"]

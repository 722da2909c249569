"""CSV column normalization — handles BOM, trailing spaces, encoding quirks."""

from __future__ import annotations

import re
from collections.abc import Callable


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Strips leading/trailing whitespace
    - Replaces runs of spaces / non-breaking spaces / hyphens with one underscore
    - Lowercases
    - Strips non-alphanumeric characters (except underscore)
    """
    name = name.replace("\ufeff", "").strip()
    name = re.sub(r"[\s\u00a0\-]+", "_", name)
    name = name.lower()
    name = re.sub(r"[^\w]", "", name, flags=re.UNICODE)
    return name


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_set(raw: str | None, transform: Callable[[str], str] = str.strip) -> set[str]:
    """Parse list cells like 'personal; auto, business' into a set.

    Commas and semicolons separate items; whitespace inside an item is kept
    so multi-word regions ("Negeri Sembilan") survive.
    """
    if not raw:
        return set()
    parts = re.split(r"[,;|]+", raw.strip())
    return {transform(p.strip()) for p in parts if p.strip()}


def parse_number(raw: str | None) -> float | None:
    """Parse '50,000' / 'RM 50000' / '50000.00' into a float."""
    if raw is None:
        return None
    digits = re.sub(r"[^\d.\-]", "", raw)
    if not digits:
        return None
    try:
        return float(digits)
    except ValueError:
        return None

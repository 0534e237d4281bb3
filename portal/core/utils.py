"""
SKY Solutions portal: shared utilities.

Pure functions used across the portal. No imports from other portal modules.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_float(value: Any) -> Optional[float]:
    """Parse the leading number out of a form value.

    Leading numeric text is accepted (``"12.5abc"`` → 12.5); anything without
    a numeric prefix returns ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    text = str(value).strip()
    end = 0
    seen_dot = seen_digit = False
    for i, ch in enumerate(text):
        if ch.isdigit():
            seen_digit = True
            end = i + 1
        elif ch == "." and not seen_dot:
            seen_dot = True
        elif ch in "+-" and i == 0:
            continue
        else:
            break
    if not seen_digit:
        return None
    return float(text[:end])


def parse_int(value: Any) -> Optional[int]:
    """Integer counterpart of :func:`parse_float` (truncates toward zero)."""
    parsed = parse_float(value)
    return None if parsed is None else int(parsed)


def is_filled(value: Any) -> bool:
    """True when a form value counts as present (truthy, not blank text)."""
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def drop_empty(params: dict) -> dict:
    """Return ``params`` without ``None`` / empty-string values."""
    return {k: v for k, v in params.items() if v is not None and v != ""}


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_money(amount: float, symbol: str = "$") -> str:
    """Money with thousands separators and two decimals, e.g. ``$1,234.50``."""
    return f"{symbol}{amount:,.2f}"


def format_megabytes(size_bytes: int) -> str:
    """``size / 1024 / 1024`` to two decimals, e.g. ``3.00MB``."""
    return f"{size_bytes / 1024 / 1024:.2f}MB"


def format_file_size(size_bytes: int) -> str:
    """Human file size in Bytes/KB/MB for library listings."""
    if size_bytes <= 0:
        return "0 Bytes"
    units = ("Bytes", "KB", "MB")
    exp = min(int(math.floor(math.log(size_bytes, 1024))), len(units) - 1)
    value = round(size_bytes / math.pow(1024, exp), 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[exp]}"


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def sum_field(rows: Iterable[dict], field: str) -> float:
    """Sum a numeric field over backend rows, treating missing values as 0."""
    total = 0.0
    for row in rows:
        value = parse_float(row.get(field))
        if value is not None:
            total += value
    return total


def count_by(rows: Iterable[dict], field: str, value: Any) -> int:
    return sum(1 for row in rows if row.get(field) == value)


def unwrap_list(data: Any, key: str) -> list:
    """Backend list endpoints answer either ``[...]`` or ``{key: [...]}``."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        items = data.get(key)
        if isinstance(items, list):
            return items
    return []

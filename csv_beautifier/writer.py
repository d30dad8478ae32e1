from __future__ import annotations

from typing import Iterable, Sequence

from .rules import NORMALIZED_DELIMITER, QUOTE, ROW_SEPARATOR

_NEEDS_QUOTES = (NORMALIZED_DELIMITER, QUOTE, "\n", "\r")


def escape_field(value: str) -> str:
    if any(ch in value for ch in _NEEDS_QUOTES):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def rows_to_csv(rows: Iterable[Sequence[str]]) -> str:
    """Serialize rows with comma delimiters and LF separators (no trailing LF)."""
    return ROW_SEPARATOR.join(
        NORMALIZED_DELIMITER.join(escape_field(cell) for cell in row) for row in rows
    )

"""
Before/after comparison for highlighting.

Rows present in only one grid are flagged in every column, so removed or
appended rows light up entirely rather than only where text differs.
"""

from __future__ import annotations

from typing import List, Sequence, Set, Tuple

from .rules import PREVIEW_PLACEHOLDER

Cell = Tuple[int, int]


def build_change_set(
    source: Sequence[Sequence[str]], cleaned: Sequence[Sequence[str]]
) -> Set[Cell]:
    changes: Set[Cell] = set()
    max_rows = max(len(source), len(cleaned))
    max_cols = max((len(r) for r in (*source, *cleaned)), default=0)

    for row in range(max_rows):
        missing = row >= len(source) or row >= len(cleaned)
        left = source[row] if row < len(source) else ()
        right = cleaned[row] if row < len(cleaned) else ()
        for col in range(max_cols):
            before = left[col] if col < len(left) else ""
            after = right[col] if col < len(right) else ""
            if missing or before != after:
                changes.add((row, col))

    return changes


def preview_grid(rows: Sequence[Sequence[str]], limit: int = 20) -> List[List[str]]:
    """
    First ``limit`` rows of a grid padded to its full width.

    Blank header cells get ``col_<n>`` placeholders so every column has a
    visible title.
    """
    if not rows:
        return []
    width = max(len(r) for r in rows)
    header = [
        rows[0][i] if i < len(rows[0]) and rows[0][i] != "" else PREVIEW_PLACEHOLDER.format(index=i + 1)
        for i in range(width)
    ]
    body = [list(r) + [""] * (width - len(r)) for r in rows[1:limit]]
    return [header, *body]

"""
Delimiter detection and row splitting.

The tokenizer is a single left-to-right scan; it never rejects input.
Unbalanced quotes simply swallow the rest of the text into one field.
"""

from __future__ import annotations

import logging
import re
from typing import List, Tuple

from .rules import (
    AUTO_DELIMITER,
    DELIMITER_CANDIDATES,
    DETECT_SAMPLE_CHARS,
    DETECT_SAMPLE_LINES,
    NORMALIZED_DELIMITER,
    QUOTE,
)

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def count_unquoted(line: str, delimiter: str) -> int:
    # Quote state flips on every quote character; escaping is ignored here.
    in_quotes = False
    count = 0
    for ch in line:
        if ch == QUOTE:
            in_quotes = not in_quotes
            continue
        if not in_quotes and ch == delimiter:
            count += 1
    return count


def detect_delimiter(text: str) -> str:
    """
    Pick the candidate delimiter with the most unquoted hits in the sample.

    Rules:
    - Sample is the first 5000 characters, split into at most 8 lines.
    - Candidates are scored in a fixed order; ties keep the earlier one.
    - An empty sample falls back to comma.
    """
    sample = text[:DETECT_SAMPLE_CHARS]
    lines = _LINE_BREAK.split(sample)[:DETECT_SAMPLE_LINES]
    if not lines:
        return NORMALIZED_DELIMITER

    best = NORMALIZED_DELIMITER
    best_score = -1
    for candidate in DELIMITER_CANDIDATES:
        score = sum(count_unquoted(line, candidate) for line in lines)
        if score > best_score:
            best = candidate
            best_score = score

    return best


def split_rows(text: str, delimiter: str) -> List[List[str]]:
    """Tokenize ``text`` into raw rows, honoring double-quote escaping."""
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if ch == QUOTE:
            if in_quotes and nxt == QUOTE:
                field.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if not in_quotes and ch == delimiter:
            row.append("".join(field))
            field = []
            i += 1
            continue

        if not in_quotes and ch in "\r\n":
            row.append("".join(field))
            rows.append(row)
            row = []
            field = []
            # CRLF is a single terminator
            i += 2 if ch == "\r" and nxt == "\n" else 1
            continue

        field.append(ch)
        i += 1

    row.append("".join(field))
    if len(row) > 1 or row[0] != "":
        rows.append(row)

    return rows


def parse_csv(text: str, delimiter: str = AUTO_DELIMITER) -> Tuple[str, List[List[str]]]:
    """Resolve the delimiter (detecting it for ``auto``) and tokenize."""
    if delimiter == AUTO_DELIMITER:
        resolved = detect_delimiter(text)
        logger.debug("Detected delimiter %r", resolved)
    else:
        resolved = delimiter
    return resolved, split_rows(text, resolved)

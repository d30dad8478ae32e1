"""
Per-cell normalization chain.

Each stage is an ``(option, transform)`` pair; a stage is skipped when its
option is off. Stages run in order, each on the previous stage's output, and
bump their own counter on the shared report.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Callable, List, Optional, Tuple

from .models import CleanOptions, Report
from .rules import NULL_TOKENS

Transform = Callable[[str, Report], str]

_WHITESPACE = re.compile(r"\s+")
_NUMERIC = re.compile(r"[-+]?([0-9]{1,3}(,[0-9]{3})*|[0-9]+)(\.[0-9]+)?")
_NUMBER_NOISE = re.compile(r"[, _]")
_DIGIT = re.compile(r"[0-9]")

_ISO_DATE = re.compile(r"([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})")
_SLASH_DATE = re.compile(r"([0-9]{1,2})/([0-9]{1,2})/([0-9]{4}|[0-9]{2})")
_DASH_DATE = re.compile(r"([0-9]{1,2})-([0-9]{1,2})-([0-9]{4}|[0-9]{2})")


def trim(value: str, report: Report) -> str:
    return value.strip()


def collapse_whitespace(value: str, report: Report) -> str:
    collapsed = _WHITESPACE.sub(" ", value)
    if collapsed != value:
        report.space_collapsed += 1
    return collapsed


def normalize_null(value: str, report: Report) -> str:
    if value and value.strip().lower() in NULL_TOKENS:
        report.null_normalized += 1
        return ""
    return value


def strip_outer_quotes(value: str, report: Report) -> str:
    if len(value) < 2:
        return value
    first, last = value[0], value[-1]
    if first != last or first not in ("'", '"'):
        return value

    report.quotes_stripped += 1
    inner = value[1:-1]
    if first == '"':
        return inner.replace('""', '"')
    return inner


def looks_numeric(value: str) -> bool:
    """Strict shape check: thousands groups must be exactly three digits."""
    return _NUMERIC.fullmatch(value) is not None


def normalize_number(value: str, report: Report) -> str:
    if not looks_numeric(value):
        return value
    cleaned = _NUMBER_NOISE.sub("", value)
    if cleaned != value:
        report.number_normalized += 1
    return cleaned


def _year(raw: str) -> str:
    return f"20{raw}" if len(raw) == 2 else raw


def _calendar_iso(year: str, month: str, day: str) -> Optional[str]:
    try:
        return date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def _match_date(value: str) -> Optional[str]:
    m = _ISO_DATE.fullmatch(value)
    if m:
        return f"{m.group(1)}-{int(m.group(2)):02d}-{int(m.group(3)):02d}"

    for pattern in (_SLASH_DATE, _DASH_DATE):
        m = pattern.fullmatch(value)
        if m:
            month, day, year = m.groups()
            iso = _calendar_iso(_year(year), month, day)
            if iso is not None:
                return iso

    return None


def normalize_date(value: str, report: Report) -> str:
    """
    Rewrite recognised date spellings as ``YYYY-MM-DD``.

    Values without a digit, or containing ``$`` anywhere, are left alone.
    Month/day forms that do not name a real calendar day are kept verbatim.
    """
    if not _DIGIT.search(value) or "$" in value:
        return value

    iso = _match_date(value.strip())
    if iso is None or iso == value:
        return value

    report.date_normalized += 1
    return iso


def build_chain(options: CleanOptions) -> List[Transform]:
    stages: List[Tuple[bool, Transform]] = [
        (options.trim_cells, trim),
        (options.collapse_spaces, collapse_whitespace),
        (options.normalize_nulls, normalize_null),
        (options.strip_quotes, strip_outer_quotes),
        (options.normalize_numbers, normalize_number),
        (options.normalize_dates, normalize_date),
    ]
    return [fn for enabled, fn in stages if enabled]


def clean_cell(value: str, chain: List[Transform], report: Report) -> str:
    cell = value
    for transform in chain:
        cell = transform(cell, report)
    return cell

from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence

from .models import CleanOptions, Report
from .rules import HEADER_DIGIT_PREFIX, HEADER_FALLBACK

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_SEPARATORS = re.compile(r"[\s-]+")
_EDGE_UNDERSCORES = re.compile(r"^_+|_+\Z")
_LEADING_DIGIT = re.compile(r"^([0-9])")


def normalize_header_name(name: str) -> str:
    """Turn a raw header into a lowercase snake_case identifier."""
    value = name.strip().lower()
    value = _DISALLOWED.sub("", value)
    value = _SEPARATORS.sub("_", value)
    value = _EDGE_UNDERSCORES.sub("", value)
    return _LEADING_DIGIT.sub(HEADER_DIGIT_PREFIX + r"\1", value)


def normalize_header_list(
    headers: Sequence[str], options: CleanOptions, report: Report
) -> List[str]:
    """
    Finalize the header row.

    With ``header_unique`` repeats are suffixed ``_<n>`` and recorded in
    ``report.renamed``; without it repeats only produce a warning.
    """
    out: List[str] = []
    used: Dict[str, int] = {}
    taken = set()

    for raw in headers:
        base = normalize_header_name(raw) if options.header_normalize else raw.strip()
        name = base or HEADER_FALLBACK

        if name not in taken:
            used[name] = 1
        elif options.header_unique:
            # A suffixed name can itself collide with a later raw header.
            n = max(used.get(name, 0), 1)
            renamed = f"{name}_{n}"
            while renamed in taken:
                n += 1
                renamed = f"{name}_{n}"
            used[name] = n + 1
            used.setdefault(renamed, 1)
            report.renamed.append(f"{name} -> {renamed}")
            logger.debug("Renamed duplicate header %s -> %s", name, renamed)
            name = renamed
        else:
            report.warnings.append(f"Duplicate header detected: {name}")
            logger.warning("Duplicate header detected: %s", name)

        taken.add(name)
        out.append(name)

    if list(headers) != out:
        report.header_changes += 1

    return out

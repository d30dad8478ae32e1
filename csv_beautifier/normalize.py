"""
Core cleanup pipeline.

Responsibilities:
- encoding detection + decoding of uploaded bytes
- delimiter detection and tokenizing
- header normalization
- per-cell normalization, empty-row and duplicate-row removal
- report + change log assembly
"""

from __future__ import annotations

import base64
import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from charset_normalizer import from_bytes

from .cells import build_chain, clean_cell
from .diff import build_change_set, preview_grid
from .errors import InputDecodeError
from .headers import normalize_header_list
from .models import BeautifyResult, CleanOptions, Report
from .parsing import parse_csv
from .rules import OUTPUT_ENCODING
from .writer import rows_to_csv

logger = logging.getLogger(__name__)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def decode_csv_bytes(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is dropped rather than kept as a leading character.
    - If decode fails, fall back to UTF-8, then to replacement characters.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and decode_used.lower().replace("-", "_") in ("utf_8", "utf8"):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            try:
                text = raw.decode(decode_used, errors="replace")
            except LookupError as exc:
                raise InputDecodeError(f"Could not decode input as {decode_used}") from exc
        decode_fallback = True

    if decode_fallback:
        logger.warning("Decoding fell back to %s (detected %s)", decode_used, detected)

    return text, {
        "detected": detected,
        "decode_used": decode_used,
        "decode_fallback": decode_fallback,
    }


def _is_blank(row: Sequence[str]) -> bool:
    return all(not cell.strip() for cell in row)


def beautify_csv(text: str, options: Optional[CleanOptions] = None) -> BeautifyResult:
    """
    Run the full cleanup over ``text``.

    Blank input is not an error: it yields an empty result with an empty
    report. Ragged rows are padded to the widest row, never truncated.
    """
    options = options or CleanOptions()
    delimiter, parsed = parse_csv(text, options.delimiter)
    raw_rows = [row for row in parsed if not _is_blank(row)]

    report = Report(input_rows=len(raw_rows), detected_delimiter=delimiter)
    if not raw_rows:
        logger.info("No rows detected")
        return BeautifyResult(report=report)

    report.header_columns = len(raw_rows[0])
    body = raw_rows[1:]
    width = max([len(raw_rows[0]), *(len(row) for row in body)])
    # Columns beyond the raw header get fallback names so the output stays rectangular.
    header_source = raw_rows[0] + [""] * (width - len(raw_rows[0]))
    header = normalize_header_list(header_source, options, report)

    chain = build_chain(options)
    cleaned_rows: List[List[str]] = []
    seen = set()

    for row in body:
        if options.remove_empty_rows and _is_blank(row):
            report.removed_empty_rows += 1
            continue

        cleaned = []
        for idx in range(width):
            original = row[idx] if idx < len(row) else ""
            value = clean_cell(original, chain, report)
            if value != original:
                report.changed_cells += 1
            cleaned.append(value)

        if not any(cleaned):
            report.removed_empty_rows += 1
            continue

        key = tuple(cleaned)
        if options.dedupe_rows and key in seen:
            report.deduped_rows += 1
            continue

        seen.add(key)
        cleaned_rows.append(cleaned)

    report.output_rows = len(cleaned_rows)
    csv_text = rows_to_csv([header, *cleaned_rows])

    logger.info(
        "Cleaned %d source rows into %d rows (delimiter %r, %d empty, %d duplicate)",
        report.input_rows,
        report.output_rows,
        delimiter,
        report.removed_empty_rows,
        report.deduped_rows,
    )

    return BeautifyResult(
        header=header,
        rows=cleaned_rows,
        raw_rows=raw_rows,
        csv_text=csv_text,
        report=report,
    )


def build_change_log(
    report: Report, options: CleanOptions, generated_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """Report merged with the options used and a UTC generation timestamp."""
    generated_at = generated_at or datetime.now(timezone.utc)
    return {
        **report.model_dump(by_alias=True),
        "options": options.model_dump(by_alias=True),
        "generatedAt": generated_at.isoformat(),
    }


def report_summary(report: Report) -> Tuple[List[Tuple[str, Any]], List[str]]:
    """Labelled counters plus the combined warnings/renames detail list."""
    items = [
        ("Source rows", report.input_rows),
        ("Clean rows", report.output_rows),
        ("Detected delimiter", report.detected_delimiter),
        ("Header changes", report.header_changes),
        ("Empty rows removed", report.removed_empty_rows),
        ("Duplicate rows removed", report.deduped_rows),
        ("Normalized numbers", report.number_normalized),
        ("Normalized dates", report.date_normalized),
        ("Null values normalized", report.null_normalized),
        ("Whitespace collapses", report.space_collapsed),
        ("Quotes stripped", report.quotes_stripped),
        ("Cell edits", report.changed_cells),
    ]
    return items, [*report.warnings, *report.renamed]


def build_response(
    text: str,
    options: Optional[CleanOptions] = None,
    encoding: Optional[Dict[str, Any]] = None,
    preview_rows: int = 20,
) -> Dict[str, Any]:
    """Run the pipeline and wrap it in the API's response envelope."""
    options = options or CleanOptions()
    result = beautify_csv(text, options)

    payload = result.csv_text.encode(OUTPUT_ENCODING)
    changes = build_change_set(result.raw_rows, result.grid)
    items, details = report_summary(result.report)

    return {
        "normalized_csv": {
            "sha256": _sha256_hex(payload),
            "encoding": OUTPUT_ENCODING,
            "content_b64": base64.b64encode(payload).decode("ascii"),
            "text": result.csv_text,
        },
        "header": result.header,
        "rows": result.rows,
        "raw_rows": result.raw_rows,
        "change_set": [list(cell) for cell in sorted(changes)],
        "report": result.report.model_dump(by_alias=True),
        "change_log": build_change_log(result.report, options),
        "summary": {
            "items": [{"label": label, "value": value} for label, value in items],
            "details": details,
        },
        "preview": {
            "original": preview_grid(result.raw_rows, preview_rows),
            "cleaned": preview_grid(result.grid, preview_rows),
        },
        "encoding": encoding,
    }


def normalize_csv_bytes(
    raw: bytes, options: Optional[CleanOptions] = None, preview_rows: int = 20
) -> Dict[str, Any]:
    text, encoding = decode_csv_bytes(raw)
    return build_response(text, options, encoding, preview_rows)

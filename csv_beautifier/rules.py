"""
Deterministic normalization rules.

This file exists to make the fixed tokens and limits explicit and enforceable.
"""

NORMALIZED_DELIMITER = ","
ROW_SEPARATOR = "\n"
QUOTE = '"'

AUTO_DELIMITER = "auto"
# Iteration order matters: ties keep the earlier candidate.
DELIMITER_CANDIDATES = (",", ";", "\t", "|")

DETECT_SAMPLE_CHARS = 5000
DETECT_SAMPLE_LINES = 8

NULL_TOKENS = frozenset({
    "null",
    "none",
    "na",
    "n/a",
    "nil",
    "undefined",
    "not available",
    "-",
    "--",
})

HEADER_FALLBACK = "column"
HEADER_DIGIT_PREFIX = "c_"
PREVIEW_PLACEHOLDER = "col_{index}"

OUTPUT_ENCODING = "utf-8"

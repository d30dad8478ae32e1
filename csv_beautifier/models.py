from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


DelimiterChoice = Literal["auto", ",", ";", "\t", "|"]


class CleanOptions(BaseModel):
    """Toggles for one run. Unspecified fields default to on / auto."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    trim_cells: bool = True
    collapse_spaces: bool = True
    normalize_nulls: bool = True
    strip_quotes: bool = True
    header_normalize: bool = True
    header_unique: bool = True
    remove_empty_rows: bool = True
    dedupe_rows: bool = True
    normalize_numbers: bool = True
    normalize_dates: bool = True
    delimiter: DelimiterChoice = "auto"


class Report(BaseModel):
    """Per-run accumulator. Every stage increments it in place."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    input_rows: int = 0
    output_rows: int = 0
    detected_delimiter: str = ","
    removed_empty_rows: int = 0
    deduped_rows: int = 0
    changed_cells: int = 0
    header_changes: int = 0
    header_columns: int = 0
    number_normalized: int = 0
    date_normalized: int = 0
    null_normalized: int = 0
    space_collapsed: int = 0
    quotes_stripped: int = 0
    renamed: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class BeautifyResult(BaseModel):
    header: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)
    raw_rows: List[List[str]] = Field(default_factory=list)
    csv_text: str = ""
    report: Report = Field(default_factory=Report)

    @property
    def grid(self) -> List[List[str]]:
        """Header followed by the cleaned rows, as written to the output."""
        if not self.header:
            return []
        return [list(self.header), *self.rows]


class NormalizedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str
    text: str = ""


class TextRequest(BaseModel):
    text: str
    options: CleanOptions = Field(default_factory=CleanOptions)


class BeautifyResponse(BaseModel):
    normalized_csv: NormalizedCsv
    header: List[str]
    rows: List[List[str]]
    raw_rows: List[List[str]]
    change_set: List[List[int]] = Field(default_factory=list, examples=[[[1, 0]]])
    report: Dict[str, Any]
    change_log: Dict[str, Any]
    summary: Dict[str, Any] = Field(default_factory=dict)
    preview: Dict[str, List[List[str]]] = Field(default_factory=dict)
    encoding: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    ok: bool = True

import json
from datetime import datetime, timezone

from csv_beautifier import CleanOptions, beautify_csv, build_change_log
from csv_beautifier.normalize import report_summary


def test_trimmed_duplicate_rows_collapse():
    result = beautify_csv("Name,Age\nAlice, 30 \nAlice,30\n")
    assert result.header == ["name", "age"]
    assert result.rows == [["Alice", "30"]]
    assert result.report.deduped_rows == 1
    assert result.report.output_rows == 1
    assert result.report.input_rows == 3
    assert result.report.changed_cells == 1
    assert result.csv_text == "name,age\nAlice,30"

def test_semicolon_input_is_detected():
    result = beautify_csv("A;B\n1;2\n", CleanOptions(delimiter="auto"))
    assert result.report.detected_delimiter == ";"
    assert result.header == ["a", "b"]
    assert result.rows == [["1", "2"]]
    assert result.csv_text == "a,b\n1,2"

def test_null_only_row_is_removed():
    result = beautify_csv("Col\nN/A\n", CleanOptions(normalize_nulls=True))
    assert result.rows == []
    assert result.report.null_normalized == 1
    assert result.report.removed_empty_rows == 1
    assert result.report.output_rows == 0
    assert result.csv_text == "col"

def test_row_emptied_by_cleanup_is_dropped_even_without_remove_empty_rows():
    result = beautify_csv("Col\nN/A\nx\n", CleanOptions(remove_empty_rows=False))
    assert result.rows == [["x"]]
    assert result.report.removed_empty_rows == 1

def test_short_dates_are_expanded():
    result = beautify_csv("Date\n01/15/24\n", CleanOptions(normalize_dates=True))
    assert result.rows == [["2024-01-15"]]
    assert result.report.date_normalized == 1

def test_duplicate_headers_renamed():
    result = beautify_csv("X,X\n1,2\n", CleanOptions(header_unique=True))
    assert result.header == ["x", "x_1"]
    assert result.report.renamed == ["x -> x_1"]

def test_dedupe_keeps_first_occurrence():
    result = beautify_csv("k,v\na,1\nb,2\na,1\n")
    assert result.rows == [["a", "1"], ["b", "2"]]
    assert result.report.deduped_rows == 1

def test_dedupe_off_keeps_duplicates():
    result = beautify_csv("k\na\na\n", CleanOptions(dedupe_rows=False))
    assert result.rows == [["a"], ["a"]]
    assert result.report.deduped_rows == 0

def test_dedupe_key_does_not_collide_on_embedded_separators():
    text = 'a,b\n"x,y",z\nx,"y,z"\n'
    result = beautify_csv(text)
    assert result.rows == [["x,y", "z"], ["x", "y,z"]]
    assert result.report.deduped_rows == 0

def test_ragged_rows_are_padded_not_truncated():
    result = beautify_csv("a,b,c\n1\n1,2,3,4\n")
    assert result.header == ["a", "b", "c", "column"]
    assert result.rows == [["1", "", "", ""], ["1", "2", "3", "4"]]
    assert all(len(row) == 4 for row in result.rows)

def test_blank_input_yields_empty_result():
    for text in ("", "\n\n", " , \n\t\n"):
        result = beautify_csv(text)
        assert result.rows == []
        assert result.header == []
        assert result.csv_text == ""
        assert result.report.input_rows == 0
        assert result.report.output_rows == 0

def test_blank_raw_rows_are_not_counted_as_input():
    result = beautify_csv("a,b\n\n , \n1,2\n")
    assert result.report.input_rows == 2
    assert result.report.removed_empty_rows == 0
    assert result.raw_rows == [["a", "b"], ["1", "2"]]

def test_explicit_delimiter_is_respected():
    result = beautify_csv("a|b\n1|2\n", CleanOptions(delimiter=","))
    assert result.header == ["ab"]
    assert result.rows == [["1|2"]]

def test_tab_input_with_quoted_newline():
    result = beautify_csv('id\tnote\n1\t"line one\nline two"\n')
    assert result.report.detected_delimiter == "\t"
    assert result.rows == [["1", "line one line two"]]
    assert result.report.space_collapsed == 1

def test_output_is_idempotent():
    text = (
        "First Name,First Name,Amount,When,Note\n"
        '  bob   smith ,x,  "1,234" ,01/15/24,"Smith, Bob"\n'
        "N/A,y,12,2024-1-5,'quoted'\n"
        "N/A,y,12,2024-01-05,quoted\n"
    )
    first = beautify_csv(text)
    assert first.header == ["first_name", "first_name_1", "amount", "when", "note"]
    assert first.rows == [
        ["bob smith", "x", "1234", "2024-01-15", "Smith, Bob"],
        ["", "y", "12", "2024-01-05", "quoted"],
    ]
    assert first.report.deduped_rows == 1

    second = beautify_csv(first.csv_text)
    assert second.csv_text == first.csv_text
    report = second.report
    assert report.changed_cells == 0
    assert report.null_normalized == 0
    assert report.space_collapsed == 0
    assert report.quotes_stripped == 0
    assert report.number_normalized == 0
    assert report.date_normalized == 0
    assert report.header_changes == 0

def test_output_rows_matches_row_count():
    result = beautify_csv("a\n1\n\n2\n1\nnull\n")
    assert result.report.output_rows == len(result.rows) == 2

def test_grid_includes_header():
    result = beautify_csv("a\n1\n")
    assert result.grid == [["a"], ["1"]]

def test_change_log_is_json_serializable():
    options = CleanOptions(dedupe_rows=False)
    result = beautify_csv("a\n1\n", options)
    stamp = datetime(2024, 1, 15, tzinfo=timezone.utc)

    log = build_change_log(result.report, options, generated_at=stamp)
    assert log["generatedAt"] == "2024-01-15T00:00:00+00:00"
    assert log["options"]["dedupeRows"] is False
    assert log["options"]["delimiter"] == "auto"
    assert log["outputRows"] == 1
    json.dumps(log)

def test_report_summary():
    result = beautify_csv("X,X\n1,2\n", CleanOptions(header_unique=True))
    items, details = report_summary(result.report)
    assert items[0] == ("Source rows", 2)
    assert ("Detected delimiter", ",") in items
    assert details == ["x -> x_1"]

def test_header_columns_records_raw_header_width():
    result = beautify_csv("a,b\n1,2,3\n")
    assert result.header == ["a", "b", "column"]
    assert result.report.header_columns == 2

"""
Tabular report serializers: minimal CSV and SpreadsheetML 2003 (.xls).

Both take a sequence of homogeneous mappings and an optional explicit column
order. Columns default to the key order of the first row; a key missing on a
later row renders as an empty cell. Values that are not strings are written
as compact JSON text, so ``1`` stays ``1``, ``True`` becomes ``true`` and
nested structures keep their JSON form.
"""
from __future__ import annotations

import json
import math
from collections.abc import Mapping, Sequence
from typing import Any, Union
from xml.sax.saxutils import escape

from a1saude.core.errors import InputShapeError

JsonValue = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]
TabularRow = Mapping[str, JsonValue]

CSV_SPECIALS = ('"', ",", "\n")
XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

SPREADSHEET_HEAD = (
    '<?xml version="1.0"?>\n'
    '<?mso-application progid="Excel.Sheet"?>\n'
    '<Workbook xmlns="urn:schemas-microsoft-com:office:spreadsheet" '
    'xmlns:o="urn:schemas-microsoft-com:office:office" '
    'xmlns:x="urn:schemas-microsoft-com:office:excel" '
    'xmlns:ss="urn:schemas-microsoft-com:office:spreadsheet" '
    'xmlns:html="http://www.w3.org/TR/REC-html40">'
)


def _check_rows(rows: Any, operation: str) -> Sequence[TabularRow]:
    if isinstance(rows, (str, bytes, bytearray)) or not isinstance(rows, Sequence):
        raise InputShapeError(operation, rows)
    for row in rows:
        if not isinstance(row, Mapping):
            raise InputShapeError(operation, row, expected="mapping per row")
    return rows


def _select_columns(rows: Sequence[TabularRow], columns: Sequence[str] | None) -> list[str]:
    if columns:
        return [str(c) for c in columns]
    return [str(k) for k in rows[0].keys()] if rows else []


def _json_numbers(value: Any) -> Any:
    """Floats as JSON.stringify writes them: NaN/Infinity -> null, 2.0 -> 2 below 1e21."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, Mapping):
        return {k: _json_numbers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_numbers(v) for v in value]
    return value


def format_cell(value: Any) -> str:
    """None -> '', str verbatim, anything else -> compact JSON text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(
        _json_numbers(value), ensure_ascii=False, separators=(",", ":"), allow_nan=False, default=str
    )


def _csv_cell(value: Any) -> str:
    text = format_cell(value)
    if any(ch in text for ch in CSV_SPECIALS):
        return '"' + text.replace('"', '""') + '"'
    return text


def _xml(text: str) -> str:
    return escape(text, XML_ENTITIES)


def to_delimited_text(rows: Sequence[TabularRow], columns: Sequence[str] | None = None) -> str:
    """
    Render rows as CSV text.

    Empty ``rows`` give an empty string (no header). Rows are joined with
    ``\\n`` and there is no trailing newline. Only cells containing a double
    quote, comma or newline are quoted.
    """
    rows = _check_rows(rows, "to_delimited_text")
    if not rows:
        return ""
    cols = _select_columns(rows, columns)
    lines = [",".join(cols)]
    lines.extend(",".join(_csv_cell(row.get(c)) for c in cols) for row in rows)
    return "\n".join(lines)


def to_spreadsheet_markup(
    rows: Sequence[TabularRow],
    columns: Sequence[str] | None = None,
    sheet_name: str = "Relatorio",
) -> str:
    """
    Render rows as a SpreadsheetML 2003 workbook with a single worksheet.

    Unlike the CSV form, empty ``rows`` still produce a complete document
    (columns declared, no rows). Every cell is typed ``String``.
    """
    rows = _check_rows(rows, "to_spreadsheet_markup")
    if rows:
        cols = _select_columns(rows, columns)
        header = "<Row>" + "".join(_string_cell(c) for c in cols) + "</Row>"
        body = "".join(
            "<Row>" + "".join(_string_cell(format_cell(row.get(c))) for c in cols) + "</Row>"
            for row in rows
        )
        rows_xml = header + body
    else:
        cols = [str(c) for c in columns or []]
        rows_xml = ""

    column_decls = '<Column ss:AutoFitWidth="1"/>' * len(cols)
    return (
        SPREADSHEET_HEAD
        + f'<Worksheet ss:Name="{_xml(str(sheet_name))}">'
        + f"<Table>{column_decls}{rows_xml}</Table>"
        + "</Worksheet>"
        + "</Workbook>"
    )


def _string_cell(text: str) -> str:
    return f'<Cell><Data ss:Type="String">{_xml(text)}</Data></Cell>'

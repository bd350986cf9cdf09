import xml.etree.ElementTree as ET

import pytest

from a1saude.core.errors import InputShapeError
from a1saude.exporters.tabular import format_cell, to_delimited_text, to_spreadsheet_markup

SS = "{urn:schemas-microsoft-com:office:spreadsheet}"


def _rows(doc: str):
    root = ET.fromstring(doc)
    return [
        [data.text or "" for data in row.iter(f"{SS}Data")]
        for row in root.iter(f"{SS}Row")
    ]


def test_csv_empty_rows_is_empty_string():
    assert to_delimited_text([]) == ""
    assert to_delimited_text([], ["a", "b"]) == ""


def test_csv_quotes_comma_and_keeps_numbers_literal():
    assert to_delimited_text([{"a": 1, "b": "x,y"}]) == 'a,b\n1,"x,y"'


def test_csv_doubles_inner_quotes():
    assert to_delimited_text([{"a": 'He said "hi"'}]) == 'a\n"He said ""hi"""'


def test_csv_quotes_newlines():
    assert to_delimited_text([{"obs": "linha 1\nlinha 2"}]) == 'obs\n"linha 1\nlinha 2"'


def test_csv_explicit_column_order_wins():
    rows = [{"a": 1, "b": 2}, {"b": 4, "a": 3}]
    assert to_delimited_text(rows, ["b", "a"]) == "b,a\n2,1\n4,3"


def test_csv_columns_follow_first_row_and_missing_keys_are_empty():
    rows = [{"nome": "Ana", "idade": 30}, {"idade": 41}, {"nome": None, "idade": 7, "extra": "x"}]
    assert to_delimited_text(rows) == "nome,idade\nAna,30\n,41\n,7"


def test_csv_renders_non_strings_as_json():
    rows = [{"ok": True, "tags": ["a", "b"], "meta": {"k": 1}, "peso": 72.5, "altura": 1.0}]
    out = to_delimited_text(rows)
    assert out == 'ok,tags,meta,peso,altura\ntrue,"[""a"",""b""]","{""k"":1}",72.5,1'


def test_csv_is_deterministic():
    rows = [{"a": "x", "b": [1, 2]}]
    assert to_delimited_text(rows) == to_delimited_text(rows)


@pytest.mark.parametrize("bad", [None, "a,b", {"a": 1}, 42, [1, 2]])
def test_exporters_reject_non_sequences(bad):
    with pytest.raises(InputShapeError):
        to_delimited_text(bad)
    with pytest.raises(TypeError):
        to_spreadsheet_markup(bad)


def test_format_cell():
    assert format_cell(None) == ""
    assert format_cell("texto") == "texto"
    assert format_cell(False) == "false"
    assert format_cell(3) == "3"
    assert format_cell([1, None]) == "[1,null]"
    assert format_cell({"a": "ç"}) == '{"a":"ç"}'


def test_format_cell_floats_follow_json_text():
    assert format_cell(1.0) == "1"
    assert format_cell(1e20) == "100000000000000000000"
    assert format_cell(1e300) == "1e+300"
    assert format_cell(-2.5) == "-2.5"
    assert format_cell({"a": 1.0, "b": [2.0, 0.5]}) == '{"a":1,"b":[2,0.5]}'


def test_format_cell_non_finite_floats_are_null():
    assert format_cell(float("nan")) == "null"
    assert format_cell(float("inf")) == "null"
    assert format_cell({"pa": float("-inf")}) == '{"pa":null}'
    assert to_delimited_text([{"v": float("nan"), "w": [float("inf")]}]) == "v,w\nnull,[null]"


def test_xls_empty_rows_is_complete_document():
    doc = to_spreadsheet_markup([])

    assert doc.startswith('<?xml version="1.0"?>\n<?mso-application progid="Excel.Sheet"?>\n')
    assert "<Worksheet" in doc and "<Table>" in doc
    assert _rows(doc) == []
    assert ET.fromstring(doc).find(f"{SS}Worksheet").get(f"{SS}Name") == "Relatorio"


def test_xls_empty_rows_declares_explicit_columns():
    doc = to_spreadsheet_markup([], ["a", "b"])

    assert doc.count('<Column ss:AutoFitWidth="1"/>') == 2
    assert _rows(doc) == []


def test_xls_header_and_rows():
    doc = to_spreadsheet_markup([{"nome": "Ana", "idade": 30}, {"idade": 41}], sheet_name="Pacientes")

    assert _rows(doc) == [["nome", "idade"], ["Ana", "30"], ["", "41"]]
    assert doc.count('<Column ss:AutoFitWidth="1"/>') == 2
    assert doc.count('ss:Type="String"') == 6
    assert '<Worksheet ss:Name="Pacientes">' in doc


def test_xls_escapes_xml_specials():
    doc = to_spreadsheet_markup([{"n": "A & B", "q": "<\"it's\">"}], sheet_name="R&D <1>")

    assert "A &amp; B" in doc
    assert "&lt;&quot;it&apos;s&quot;&gt;" in doc
    assert 'ss:Name="R&amp;D &lt;1&gt;"' in doc
    assert _rows(doc)[1] == ["A & B", "<\"it's\">"]


def test_xls_zero_columns_renders_empty_rows():
    doc = to_spreadsheet_markup([{}, {}])

    assert "<Column" not in doc
    assert _rows(doc) == [[], [], []]


def test_xls_is_deterministic():
    rows = [{"a": 1}]
    assert to_spreadsheet_markup(rows) == to_spreadsheet_markup(rows)

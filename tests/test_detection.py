"""
Unit tests for file format detection.
"""
import pytest

from core.detection import detect_format, normalize_content_type
from core.schema import FileFormat

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.mark.parametrize("content_type,expected", [
    (XLSX_TYPE, FileFormat.SPREADSHEET_BINARY),
    ("application/vnd.ms-excel", FileFormat.SPREADSHEET_BINARY),
    ("text/csv", FileFormat.DELIMITED_TEXT),
    ("application/csv", FileFormat.DELIMITED_TEXT),
    ("text/plain", FileFormat.DELIMITED_TEXT),
])
def test_content_type_is_preferred(content_type, expected):
    """Declared content type decides even when the extension disagrees."""
    assert detect_format("upload.bin", content_type) == expected


def test_content_type_parameters_and_case_ignored():
    assert detect_format("x", "Text/CSV; charset=utf-8") == FileFormat.DELIMITED_TEXT


@pytest.mark.parametrize("file_name,expected", [
    ("extrato.xlsx", FileFormat.SPREADSHEET_BINARY),
    ("EXTRATO.XLS", FileFormat.SPREADSHEET_BINARY),
    ("extrato.csv", FileFormat.DELIMITED_TEXT),
    ("  extrato.csv  ", FileFormat.DELIMITED_TEXT),
])
def test_extension_fallback(file_name, expected):
    """Unknown or generic content types fall back to the extension."""
    assert detect_format(file_name, "application/octet-stream") == expected
    assert detect_format(file_name, None) == expected


@pytest.mark.parametrize("file_name,content_type", [
    ("report.pdf", "application/pdf"),
    ("no_extension", None),
    (None, None),
    ("", ""),
])
def test_unknown_format_never_raises(file_name, content_type):
    assert detect_format(file_name, content_type) == FileFormat.UNKNOWN


def test_normalize_content_type():
    assert normalize_content_type(" TEXT/CSV ;charset=latin-1") == "text/csv"
    assert normalize_content_type(None) == ""

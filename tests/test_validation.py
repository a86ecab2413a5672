"""
Unit tests for required field validation.
"""
from core.schema import ErrorKind, RawRow
from core.validation import REQUIRED_FIELDS, validate_row, validate_rows


def test_complete_row_is_valid():
    row = RawRow(row_number=1, values=["2024-01-01", "100.50", "Compra", "Alimentacao", "DESPESA"])

    validated = validate_row(row)

    assert validated.is_valid
    assert validated.diagnostics == []
    assert validated.row_number == 1


def test_blank_amount_flagged():
    row = RawRow(row_number=2, values=["2024-01-02", "", "Sem valor", "Categoria", "RECEITA"])

    validated = validate_row(row)

    assert not validated.is_valid
    assert [d.field for d in validated.diagnostics] == ["amount"]


def test_whitespace_counts_as_blank():
    row = RawRow(row_number=3, values=["2024-01-02", "10", "   ", "Categoria", "RECEITA"])

    validated = validate_row(row)

    assert [d.field for d in validated.diagnostics] == ["description"]


def test_short_row_reports_every_missing_field():
    row = RawRow(row_number=4, values=["2024-01-02", "10", "Cafe"])

    validated = validate_row(row)

    assert not validated.is_valid
    assert [d.field for d in validated.diagnostics] == ["category", "direction"]


def test_empty_row_reports_all_fields():
    validated = validate_row(RawRow(row_number=5, values=[]))
    assert [d.field for d in validated.diagnostics] == list(REQUIRED_FIELDS)


def test_extra_columns_ignored():
    row = RawRow(row_number=6, values=["2024-01-02", "10", "Cafe", "Lazer", "DESPESA", "", "nota"])
    assert validate_row(row).is_valid


def test_validate_rows_collects_errors_in_order():
    rows = [
        RawRow(row_number=1, values=["2024-01-01", "1", "A", "B", "RECEITA"]),
        RawRow(row_number=2, values=["", "2", "A", "", "RECEITA"]),
        RawRow(row_number=3, values=["2024-01-03", "", "A", "B", "DESPESA"]),
    ]

    validated, errors = validate_rows(rows)

    assert [v.is_valid for v in validated] == [True, False, False]
    assert [(e.row_number, e.field) for e in errors] == [(2, "date"), (2, "category"), (3, "amount")]
    assert all(e.kind == ErrorKind.REQUIRED_FIELD for e in errors)
    assert all(e.message for e in errors)

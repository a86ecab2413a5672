"""
Unit tests for typed value coercion.
"""
import datetime as dt
from decimal import Decimal

import pytest

from core.exceptions import CoercionError
from core.normalize import coerce_row, parse_amount, parse_date, parse_direction
from core.schema import Direction, RawRow
from core.validation import validate_row


@pytest.mark.parametrize("text,expected", [
    ("15/01/2024", dt.date(2024, 1, 15)),
    ("2024-01-15", dt.date(2024, 1, 15)),
    ("15-01-2024", dt.date(2024, 1, 15)),
    ("01/31/2024", dt.date(2024, 1, 31)),
    (" 2024-01-15 ", dt.date(2024, 1, 15)),
])
def test_parse_date_formats(text, expected):
    assert parse_date(text) == expected


def test_day_first_wins_when_ambiguous():
    """02/03/2024 matches day/month/year before month/day/year."""
    assert parse_date("02/03/2024") == dt.date(2024, 3, 2)


@pytest.mark.parametrize("text", ["2024/13/45", "yesterday", "", "31/31/2024"])
def test_parse_date_rejects_unknown_formats(text):
    with pytest.raises(CoercionError) as exc_info:
        parse_date(text)
    assert exc_info.value.field == "date"


@pytest.mark.parametrize("text,expected", [
    ("100.50", Decimal("100.50")),
    ("100,50", Decimal("100.50")),
    ("R$ 1234,56", Decimal("1234.56")),
    ("  12 ", Decimal("12")),
    ("$7.5 USD", Decimal("7.5")),
])
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_negative_amount_becomes_positive():
    assert parse_amount("-50.00") == Decimal("50.00")


@pytest.mark.parametrize("text", ["abc", "", "0", "0,00", "1.234,56", "--5", "."])
def test_parse_amount_rejects_invalid(text):
    with pytest.raises(CoercionError) as exc_info:
        parse_amount(text)
    assert exc_info.value.field == "amount"


@pytest.mark.parametrize("text,expected", [
    ("inflow", Direction.INFLOW),
    ("OUTFLOW", Direction.OUTFLOW),
    ("Receita", Direction.INFLOW),
    ("DESPESA", Direction.OUTFLOW),
    (" income ", Direction.INFLOW),
    ("expense", Direction.OUTFLOW),
])
def test_parse_direction(text, expected):
    assert parse_direction(text) == expected


def test_parse_direction_rejects_unknown():
    with pytest.raises(CoercionError) as exc_info:
        parse_direction("TRANSFERENCIA")
    assert exc_info.value.field == "direction"
    assert "inflow" in exc_info.value.details["accepted"]


def test_coerce_row_success():
    row = validate_row(RawRow(
        row_number=1,
        values=["2024-01-01", "100.50", " Compra supermercado ", "Alimentacao", "DESPESA"],
    ))

    fields, diagnostics = coerce_row(row)

    assert diagnostics == []
    assert fields.date == dt.date(2024, 1, 1)
    assert fields.amount == Decimal("100.50")
    assert fields.description == "Compra supermercado"
    assert fields.category == "Alimentacao"
    assert fields.direction == Direction.OUTFLOW


def test_coerce_row_reports_every_bad_field():
    row = validate_row(RawRow(row_number=7, values=["ontem", "abc", "Cafe", "Lazer", "talvez"]))

    fields, diagnostics = coerce_row(row)

    assert fields is None
    assert [d.field for d in diagnostics] == ["date", "amount", "direction"]
    assert diagnostics[0].value == "ontem"

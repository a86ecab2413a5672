"""
Typed value coercion for imported rows.
Parses dates, decimal amounts and transaction direction from cell text.
"""
import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from typing import Dict, List, NamedTuple, Optional, Tuple

from core.exceptions import CoercionError
from core.logger import setup_logger
from core.schema import Direction, ErrorKind, FieldDiagnostic, ValidatedRow

logger = setup_logger(__name__)

# Tried in order; first match wins
DATE_FORMATS: Tuple[str, ...] = (
    "%d/%m/%Y",
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%m/%d/%Y",
)

DIRECTION_ALIASES: Dict[str, Direction] = {
    "inflow": Direction.INFLOW,
    "receita": Direction.INFLOW,
    "income": Direction.INFLOW,
    "outflow": Direction.OUTFLOW,
    "despesa": Direction.OUTFLOW,
    "expense": Direction.OUTFLOW,
}

# Error kind reported for each coerced field
FIELD_ERROR_KINDS: Dict[str, ErrorKind] = {
    "date": ErrorKind.INVALID_DATE,
    "amount": ErrorKind.INVALID_AMOUNT,
    "direction": ErrorKind.INVALID_DIRECTION,
}

_AMOUNT_JUNK = re.compile(r"[^\d.,-]")


class CoercedFields(NamedTuple):
    """Typed values of one row, ready for extraction."""
    date: dt.date
    amount: Decimal
    description: str
    category: str
    direction: Direction


def parse_date(value: Optional[str]) -> dt.date:
    """
    Parse a date trying each known format in order.

    Args:
        value: Cell text

    Returns:
        Parsed date

    Raises:
        CoercionError: If no format matches
    """
    text = (value or "").strip()
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise CoercionError(f"Invalid date format: '{text}'", field="date", value=text)


def parse_amount(value: Optional[str]) -> Decimal:
    """
    Clean and parse a monetary amount.
    Keeps digits, comma, period and minus; comma is read as the decimal separator.

    Args:
        value: Cell text, e.g. "R$ 100,50"

    Returns:
        Strictly positive Decimal

    Raises:
        CoercionError: If nothing numeric remains or the amount is zero
    """
    text = (value or "").strip()
    cleaned = _AMOUNT_JUNK.sub("", text).replace(",", ".")

    if not cleaned:
        raise CoercionError(f"Invalid amount: '{text}' has no numeric content", field="amount", value=text)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise CoercionError(f"Invalid amount format: '{text}'", field="amount", value=text)

    if not amount.is_finite():
        raise CoercionError(f"Invalid amount format: '{text}'", field="amount", value=text)

    if amount < 0:
        logger.warning(f"Negative amount detected: {amount}, using absolute value")
        amount = abs(amount)

    if amount == 0:
        raise CoercionError("Amount must be greater than zero", field="amount", value=text)

    return amount


def parse_direction(value: Optional[str]) -> Direction:
    """
    Map direction text to a Direction, case-insensitively.

    Raises:
        CoercionError: If the text is not a known direction
    """
    text = (value or "").strip()
    direction = DIRECTION_ALIASES.get(text.lower())
    if direction is None:
        raise CoercionError(
            f"Unrecognized direction: '{text}'",
            field="direction",
            value=text,
            details={"accepted": sorted(DIRECTION_ALIASES)}
        )
    return direction


def coerce_row(row: ValidatedRow) -> Tuple[Optional[CoercedFields], List[FieldDiagnostic]]:
    """
    Convert the positional cells of a complete row to typed values.
    All three typed fields are attempted so every problem is reported.

    Args:
        row: Row that passed the blank-field check

    Returns:
        Tuple of (coerced fields or None, coercion diagnostics)
    """
    raw = row.row
    diagnostics: List[FieldDiagnostic] = []
    parsed = {}

    for field, position, parser in (
        ("date", 0, parse_date),
        ("amount", 1, parse_amount),
        ("direction", 4, parse_direction),
    ):
        try:
            parsed[field] = parser(raw.cell(position))
        except CoercionError as e:
            logger.debug(f"Row {raw.row_number}: {e.message}")
            diagnostics.append(FieldDiagnostic(field=e.field, message=e.message, value=e.value))

    if diagnostics:
        return None, diagnostics

    return CoercedFields(
        date=parsed["date"],
        amount=parsed["amount"],
        description=raw.cell(2),
        category=raw.cell(3),
        direction=parsed["direction"],
    ), diagnostics

"""
Blank-field validation for imported rows.
The first five cells of a row are positional: date, amount, description, category, direction.
"""
from typing import List, Tuple

from core.logger import setup_logger
from core.schema import ErrorKind, FieldDiagnostic, RawRow, RowError, ValidatedRow

logger = setup_logger(__name__)

REQUIRED_FIELDS: Tuple[str, ...] = ("date", "amount", "description", "category", "direction")


def validate_row(row: RawRow) -> ValidatedRow:
    """
    Flag every blank required field of a row.
    Cells missing from a short row count as blank.

    Args:
        row: Raw row from the parser

    Returns:
        ValidatedRow with one diagnostic per blank field
    """
    diagnostics = [
        FieldDiagnostic(field=field, message=f"Required field '{field}' is blank")
        for position, field in enumerate(REQUIRED_FIELDS)
        if not row.cell(position)
    ]
    return ValidatedRow(row=row, is_valid=not diagnostics, diagnostics=diagnostics)


def validate_rows(rows: List[RawRow]) -> Tuple[List[ValidatedRow], List[RowError]]:
    """
    Validate all rows of a sheet.

    Args:
        rows: Raw rows in file order

    Returns:
        Tuple of (validated rows in the same order, required-field errors)
    """
    validated = [validate_row(row) for row in rows]

    errors = [
        RowError(
            row_number=item.row_number,
            field=diagnostic.field,
            value=diagnostic.value,
            message=diagnostic.message,
            kind=ErrorKind.REQUIRED_FIELD,
        )
        for item in validated
        for diagnostic in item.diagnostics
    ]

    invalid = sum(1 for item in validated if not item.is_valid)
    logger.info(f"Validation: {len(validated) - invalid} complete rows, {invalid} with blank fields")

    return validated, errors

"""
Candidate transaction extraction.
Maps validated, coerced rows into CandidateTransaction objects in file order.
"""
from typing import List, Tuple

from core.logger import setup_logger
from core.normalize import FIELD_ERROR_KINDS, coerce_row
from core.schema import CandidateTransaction, RowError, ValidatedRow

logger = setup_logger(__name__)


def extract_transactions(
    validated_rows: List[ValidatedRow],
    report_coercion_errors: bool = True
) -> Tuple[List[CandidateTransaction], List[RowError]]:
    """
    Build candidates from every row that passed both the blank-field check and coercion.
    Invalid rows are skipped without a second diagnostic.

    Args:
        validated_rows: Output of row validation, in file order
        report_coercion_errors: Record coercion failures as row errors

    Returns:
        Tuple of (candidates in file order, coercion errors)
    """
    candidates: List[CandidateTransaction] = []
    errors: List[RowError] = []
    skipped = 0

    for validated in validated_rows:
        if not validated.is_valid:
            continue

        fields, diagnostics = coerce_row(validated)
        if fields is None:
            skipped += 1
            if report_coercion_errors:
                errors.extend(
                    RowError(
                        row_number=validated.row_number,
                        field=diagnostic.field,
                        value=diagnostic.value,
                        message=diagnostic.message,
                        kind=FIELD_ERROR_KINDS[diagnostic.field],
                    )
                    for diagnostic in diagnostics
                )
            continue

        candidates.append(CandidateTransaction(
            row_number=validated.row_number,
            date=fields.date,
            amount=fields.amount,
            description=fields.description,
            category=fields.category,
            direction=fields.direction,
        ))

    logger.info(f"Extracted {len(candidates)} candidates ({skipped} rows failed coercion)")

    return candidates, errors

"""
Pydantic models for the import pipeline.
Covers raw rows, validated rows, candidates, duplicate matches and the final outcome.
"""
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def normalize_transaction_id(v):
    """Normalize transaction id to string (stores may hand out integer keys)."""
    if v is None:
        return v
    return str(v)


class FileFormat(str, Enum):
    """Classification of an uploaded file."""
    SPREADSHEET_BINARY = "spreadsheet_binary"
    DELIMITED_TEXT = "delimited_text"
    UNKNOWN = "unknown"


class Direction(str, Enum):
    """Money flow direction of a transaction."""
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class ErrorKind(str, Enum):
    """Kinds of row-scoped and parse-level problems."""
    MISSING_HEADER = "missing_header"
    REQUIRED_FIELD = "required_field"
    INVALID_DATE = "invalid_date"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_DIRECTION = "invalid_direction"


class ImportStage(str, Enum):
    """Stages of a single import run, in order."""
    FILE_RECEIVED = "file_received"
    FORMAT_CLASSIFIED = "format_classified"
    PARSED = "parsed"
    ROWS_VALIDATED_AND_COERCED = "rows_validated_and_coerced"
    CANDIDATES_EXTRACTED = "candidates_extracted"
    DUPLICATES_DETECTED = "duplicates_detected"
    OUTCOME_ASSEMBLED = "outcome_assembled"


class RawRow(BaseModel):
    """One data row as text cells. Row numbers start at 1 after the header."""
    row_number: int = Field(..., ge=1)
    values: List[str] = Field(default_factory=list)

    def cell(self, index: int) -> str:
        """Return the trimmed cell at index, or an empty string when the row is too short."""
        if index < len(self.values):
            return self.values[index].strip()
        return ""


class RowError(BaseModel):
    """A problem attributable to one row (row 0 means the header)."""
    row_number: int = Field(..., ge=0)
    field: str = ""
    value: str = ""
    message: str
    kind: ErrorKind


class ParsedSheet(BaseModel):
    """Headers and rows read from one file, plus parse-level errors."""
    file_name: str = ""
    source_format: FileFormat
    headers: List[str] = Field(default_factory=list)
    rows: List[RawRow] = Field(default_factory=list)
    errors: List[RowError] = Field(default_factory=list)


class FieldDiagnostic(BaseModel):
    """Per-field validation message."""
    field: str
    message: str
    value: str = ""


class ValidatedRow(BaseModel):
    """A raw row with its blank-field verdict."""
    row: RawRow
    is_valid: bool
    diagnostics: List[FieldDiagnostic] = Field(default_factory=list)

    @property
    def row_number(self) -> int:
        return self.row.row_number


class CandidateTransaction(BaseModel):
    """A transaction extracted from an import file, not yet committed."""
    model_config = ConfigDict(frozen=True)

    row_number: int = Field(..., ge=1)
    date: dt.date
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    direction: Direction

    @field_validator("description", "category")
    @classmethod
    def validate_not_blank(cls, v):
        """Reject whitespace-only text."""
        v = v.strip()
        if not v:
            raise ValueError("Value must not be blank")
        return v


class ExistingTransactionRef(BaseModel):
    """Minimal projection of an already committed transaction."""
    model_config = ConfigDict(frozen=True)

    id: Annotated[str, BeforeValidator(normalize_transaction_id)]
    date: dt.date
    amount: Decimal
    description: str = ""
    category: str = ""


class SimilarityResult(BaseModel):
    """A candidate flagged as a potential duplicate of an existing transaction."""
    candidate: CandidateTransaction
    existing: ExistingTransactionRef
    score: float = Field(..., ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)

    @property
    def reason_text(self) -> str:
        """Reasons joined for display, e.g. 'same date, same amount'."""
        return ", ".join(self.reasons)


class ImportOutcome(BaseModel):
    """
    Structured result of one import run.
    Handed to the confirmation step; nothing in it has been committed.
    """
    file_name: str = ""
    source_format: FileFormat
    total_rows: int = 0
    candidates_extracted: int = 0
    duplicates_flagged: int = 0
    error_count: int = 0
    candidates: List[CandidateTransaction] = Field(default_factory=list)
    duplicates: List[SimilarityResult] = Field(default_factory=list)
    errors: List[RowError] = Field(default_factory=list)
    summary: str = ""
    stage: ImportStage = ImportStage.OUTCOME_ASSEMBLED

    @property
    def success(self) -> bool:
        """True when at least one candidate can be imported."""
        return self.candidates_extracted > 0

    @property
    def flagged_row_numbers(self) -> List[int]:
        """Source row numbers of candidates with at least one duplicate match, in order."""
        seen: List[int] = []
        for result in self.duplicates:
            if result.candidate.row_number not in seen:
                seen.append(result.candidate.row_number)
        return seen

    def errors_for_row(self, row_number: int) -> List[RowError]:
        """All errors recorded against one source row."""
        return [error for error in self.errors if error.row_number == row_number]


def build_summary(total_rows: int, imported: int, duplicates: int, errors: int) -> str:
    """
    Build the human readable outcome summary.

    Args:
        total_rows: Data rows seen in the file
        imported: Candidates extracted
        duplicates: Duplicate matches flagged
        errors: Errors recorded

    Returns:
        Summary text, e.g. "3 of 4 rows imported, 1 duplicates, 1 errors"
    """
    return f"{imported} of {total_rows} rows imported, {duplicates} duplicates, {errors} errors"

"""
Import pipeline orchestration.
Drives one file through detection, parsing, validation, extraction and
duplicate detection, and assembles the ImportOutcome.
"""
import datetime as dt
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.config import Settings, get_settings
from core.detection import detect_format
from core.exceptions import EmptyFileError, FileTooLargeError, UnsupportedFormatError
from core.extraction import extract_transactions
from core.logger import setup_logger
from core.matching import DuplicateDetector, SimilarityScorer
from core.parsing import get_parser
from core.schema import (
    CandidateTransaction,
    ExistingTransactionRef,
    FileFormat,
    ImportOutcome,
    ImportStage,
    build_summary,
)
from core.validation import validate_rows

logger = setup_logger(__name__)

# Called with (start, end) of the candidates' date window
ExistingLoader = Callable[[dt.date, dt.date], Iterable[ExistingTransactionRef]]


def candidate_date_window(
    candidates: Sequence[CandidateTransaction],
    padding_days: int = 0
) -> Optional[Tuple[dt.date, dt.date]]:
    """
    Date range covered by the candidates, widened by padding on both sides.

    Returns:
        (start, end) tuple, or None when there are no candidates
    """
    if not candidates:
        return None
    padding = dt.timedelta(days=padding_days)
    dates = [candidate.date for candidate in candidates]
    return min(dates) - padding, max(dates) + padding


class ImportOrchestrator:
    """
    Runs the import state machine for one file per call.

    Holds configuration only; every run builds its own intermediate data.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        detector: Optional[DuplicateDetector] = None
    ):
        """
        Initialize orchestrator.

        Args:
            settings: Application settings (global settings when omitted)
            detector: Duplicate detector (built from settings when omitted)
        """
        self.settings = settings or get_settings()
        self.detector = detector or DuplicateDetector(
            scorer=SimilarityScorer(self.settings.similarity_weights()),
            threshold=self.settings.duplicate_threshold,
            description_reason_threshold=self.settings.description_reason_threshold,
        )

    def _advance(self, file_name: str, stage: ImportStage) -> ImportStage:
        logger.debug(f"[{file_name}] stage -> {stage.value}")
        return stage

    def check_upload(self, content: bytes, file_name: str) -> None:
        """
        Reject uploads that cannot be imported at all.

        Raises:
            EmptyFileError: If content is empty
            FileTooLargeError: If content exceeds the size limit
        """
        if not content:
            raise EmptyFileError(
                "File not provided or empty",
                details={"file_name": file_name}
            )

        if len(content) > self.settings.max_file_size_bytes:
            raise FileTooLargeError(
                f"File too large. Maximum size: {self.settings.max_file_size_bytes} bytes",
                details={
                    "file_name": file_name,
                    "size": len(content),
                    "max_size": self.settings.max_file_size_bytes,
                }
            )

    def run(
        self,
        content: bytes,
        file_name: str,
        content_type: Optional[str] = None,
        existing: Optional[Sequence[ExistingTransactionRef]] = None,
        existing_loader: Optional[ExistingLoader] = None
    ) -> ImportOutcome:
        """
        Process one uploaded file into an ImportOutcome.

        Args:
            content: Raw file bytes
            file_name: Declared file name
            content_type: Declared content type
            existing: Existing transactions to compare against
            existing_loader: Alternative to `existing`; called once with the
                candidates' date window

        Returns:
            ImportOutcome (nothing is committed)

        Raises:
            FileProcessingError: For pre-parse failures (empty, oversized,
                unknown format, unreadable spreadsheet)
        """
        self._advance(file_name, ImportStage.FILE_RECEIVED)
        self.check_upload(content, file_name)

        source_format = detect_format(file_name, content_type)
        if source_format == FileFormat.UNKNOWN:
            raise UnsupportedFormatError(
                "Unsupported file format. Use Excel (.xlsx, .xls) or CSV",
                details={"file_name": file_name, "content_type": content_type}
            )
        self._advance(file_name, ImportStage.FORMAT_CLASSIFIED)

        sheet = get_parser(source_format).parse(content, file_name)
        self._advance(file_name, ImportStage.PARSED)

        validated_rows, required_errors = validate_rows(sheet.rows)
        self._advance(file_name, ImportStage.ROWS_VALIDATED_AND_COERCED)

        candidates, coercion_errors = extract_transactions(
            validated_rows,
            report_coercion_errors=self.settings.report_coercion_errors,
        )
        self._advance(file_name, ImportStage.CANDIDATES_EXTRACTED)

        references = self.resolve_existing(candidates, existing, existing_loader)
        duplicates = self.detector.detect(candidates, references)
        self._advance(file_name, ImportStage.DUPLICATES_DETECTED)

        errors = sheet.errors + sorted(
            required_errors + coercion_errors,
            key=lambda error: error.row_number
        )

        outcome = ImportOutcome(
            file_name=sheet.file_name,
            source_format=source_format,
            total_rows=len(sheet.rows),
            candidates_extracted=len(candidates),
            duplicates_flagged=len(duplicates),
            error_count=len(errors),
            candidates=candidates,
            duplicates=duplicates,
            errors=errors,
            summary=build_summary(len(sheet.rows), len(candidates), len(duplicates), len(errors)),
            stage=self._advance(file_name, ImportStage.OUTCOME_ASSEMBLED),
        )

        logger.info(f"Import of '{file_name}' finished: {outcome.summary}")
        return outcome

    def resolve_existing(
        self,
        candidates: List[CandidateTransaction],
        existing: Optional[Sequence[ExistingTransactionRef]],
        existing_loader: Optional[ExistingLoader]
    ) -> List[ExistingTransactionRef]:
        """
        Pick the existing transactions to compare against.
        The loader is only consulted when there is something to compare.
        """
        if existing is not None:
            return list(existing)
        if existing_loader is None:
            return []

        window = candidate_date_window(candidates, self.settings.existing_window_padding_days)
        if window is None:
            return []

        start, end = window
        logger.debug(f"Loading existing transactions between {start} and {end}")
        return list(existing_loader(start, end))

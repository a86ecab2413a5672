"""
Import preview service.
Connects the import orchestrator to a source of already committed transactions.
"""
import datetime as dt
from typing import Iterable, List, Optional, Protocol

from core.config import get_settings
from core.logger import setup_logger
from core.schema import ExistingTransactionRef, ImportOutcome
from services.import_orchestrator import ImportOrchestrator

logger = setup_logger(__name__)


class ExistingTransactionSource(Protocol):
    """Query port returning a user's committed transactions within a date window."""

    def find_by_period(
        self,
        user_id: str,
        start: dt.date,
        end: dt.date
    ) -> Iterable[ExistingTransactionRef]:
        ...


class InMemoryTransactionSource:
    """List-backed transaction source, keyed by user id."""

    def __init__(self, transactions: Optional[dict] = None):
        """
        Initialize source.

        Args:
            transactions: Mapping of user id -> list of ExistingTransactionRef
        """
        self._transactions = {
            user_id: list(refs) for user_id, refs in (transactions or {}).items()
        }

    def find_by_period(
        self,
        user_id: str,
        start: dt.date,
        end: dt.date
    ) -> List[ExistingTransactionRef]:
        return [
            ref for ref in self._transactions.get(user_id, [])
            if start <= ref.date <= end
        ]


class ImportService:
    """Builds import previews for a user; never persists anything."""

    def __init__(
        self,
        source: ExistingTransactionSource,
        orchestrator: Optional[ImportOrchestrator] = None
    ):
        """
        Initialize import service.

        Args:
            source: Where existing transactions come from
            orchestrator: Pipeline runner (built from global settings when omitted)
        """
        self.source = source
        self.orchestrator = orchestrator or ImportOrchestrator(get_settings())

    def preview(
        self,
        user_id: str,
        content: bytes,
        file_name: str,
        content_type: Optional[str] = None
    ) -> ImportOutcome:
        """
        Run the import pipeline for one user's upload.

        Args:
            user_id: Owner of the existing transactions
            content: Raw file bytes
            file_name: Declared file name
            content_type: Declared content type

        Returns:
            ImportOutcome for the confirmation step

        Raises:
            FileProcessingError: For pre-parse failures
        """
        logger.info(f"Import preview for user {user_id}: {file_name}")

        def load_existing(start: dt.date, end: dt.date) -> Iterable[ExistingTransactionRef]:
            return self.source.find_by_period(user_id, start, end)

        return self.orchestrator.run(
            content,
            file_name,
            content_type=content_type,
            existing_loader=load_existing,
        )

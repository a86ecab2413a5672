"""
Shared fixtures for the import engine tests.
"""
import datetime as dt
import io
from decimal import Decimal

import pytest
from openpyxl import Workbook

from core.config import reset_settings
from core.schema import CandidateTransaction, Direction, ExistingTransactionRef

ENV_VARS = (
    "APP_NAME", "HOST", "PORT", "LOG_LEVEL", "MAX_FILE_SIZE_BYTES",
    "DUPLICATE_THRESHOLD", "DESCRIPTION_REASON_THRESHOLD",
    "SIMILARITY_WEIGHT_DATE", "SIMILARITY_WEIGHT_AMOUNT",
    "SIMILARITY_WEIGHT_DESCRIPTION", "SIMILARITY_WEIGHT_CATEGORY",
    "EXISTING_WINDOW_PADDING_DAYS", "REPORT_COERCION_ERRORS",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from the process environment and the settings singleton."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_xlsx():
    """Build an in-memory workbook from a list of row lists."""
    def build(rows) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        for row in rows:
            sheet.append(row)
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()
    return build


@pytest.fixture
def candidate():
    return CandidateTransaction(
        row_number=1,
        date=dt.date(2024, 1, 1),
        amount=Decimal("100.00"),
        description="Compra supermercado",
        category="Alimentacao",
        direction=Direction.OUTFLOW,
    )


@pytest.fixture
def existing_ref():
    return ExistingTransactionRef(
        id="txn-1",
        date=dt.date(2024, 1, 1),
        amount=Decimal("100.00"),
        description="Compra supermercado",
        category="Alimentacao",
    )

"""
FastAPI routes for spreadsheet import previews.
Thin upload adapter: the import pipeline decides, the caller commits.
"""
from typing import List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError

from core.config import get_settings
from core.exceptions import FileProcessingError, FileTooLargeError, UnsupportedFormatError
from core.logger import setup_logger
from core.schema import ExistingTransactionRef
from services.import_orchestrator import ImportOrchestrator

logger = setup_logger(__name__)
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Spreadsheet Import Service",
    description="Preview spreadsheet imports with validation and duplicate detection",
    version="1.0.0"
)

orchestrator = ImportOrchestrator(settings)

_existing_adapter = TypeAdapter(List[ExistingTransactionRef])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "spreadsheet_import",
        "version": "1.0.0"
    }


def parse_existing(raw: Optional[str]) -> List[ExistingTransactionRef]:
    """
    Parse the optional JSON list of existing transactions.

    Args:
        raw: JSON text from the form field

    Returns:
        List of ExistingTransactionRef

    Raises:
        HTTPException: If the JSON is malformed
    """
    if not raw or not raw.strip():
        return []
    try:
        return _existing_adapter.validate_json(raw)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid existing transactions", "errors": e.errors(include_url=False)}
        )


def status_for(error: FileProcessingError) -> int:
    """HTTP status code for a pre-parse failure."""
    if isinstance(error, FileTooLargeError):
        return 413
    if isinstance(error, UnsupportedFormatError):
        return 415
    # Empty and unreadable files
    return 400


@app.post("/api/imports/preview")
async def preview_import(
    file: UploadFile = File(...),
    existing: Optional[str] = Form(None)
):
    """
    Parse an uploaded spreadsheet and report candidates, errors and duplicates.

    Args:
        file: Excel or CSV upload
        existing: Optional JSON list of already committed transactions

    Returns:
        ImportOutcome as JSON
    """
    logger.info(f"Received import file: {file.filename} ({file.content_type})")

    references = parse_existing(existing)
    content = await file.read()

    try:
        outcome = orchestrator.run(
            content,
            file.filename or "",
            content_type=file.content_type,
            existing=references,
        )
    except FileProcessingError as e:
        logger.warning(f"Import rejected for {file.filename}: {e.message}")
        raise HTTPException(
            status_code=status_for(e),
            detail={"message": e.message, "details": e.details}
        )
    except Exception as e:
        logger.error(f"Import failed for {file.filename}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to process file: {str(e)}"
        )

    return outcome.model_dump(mode="json")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)

"""
File format detection for uploaded spreadsheets.
Declared content type wins; the file extension is the fallback.
"""
from pathlib import PurePath
from typing import Optional, Set

from core.logger import setup_logger
from core.schema import FileFormat

logger = setup_logger(__name__)

SPREADSHEET_CONTENT_TYPES: Set[str] = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
}

DELIMITED_CONTENT_TYPES: Set[str] = {
    "text/csv",
    "application/csv",
    "text/plain",
}

SPREADSHEET_EXTENSIONS: Set[str] = {".xlsx", ".xls"}
DELIMITED_EXTENSIONS: Set[str] = {".csv"}


def normalize_content_type(content_type: Optional[str]) -> str:
    """
    Reduce a content type header to its lowercase media type.

    Args:
        content_type: Declared content type, e.g. "text/csv; charset=utf-8"

    Returns:
        Media type without parameters, or an empty string
    """
    if not content_type or not isinstance(content_type, str):
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def detect_format(file_name: Optional[str], content_type: Optional[str]) -> FileFormat:
    """
    Classify an uploaded file. Never raises.

    Args:
        file_name: Declared file name
        content_type: Declared content type

    Returns:
        FileFormat classification (UNKNOWN when nothing matches)
    """
    media_type = normalize_content_type(content_type)

    if media_type in SPREADSHEET_CONTENT_TYPES:
        return FileFormat.SPREADSHEET_BINARY
    if media_type in DELIMITED_CONTENT_TYPES:
        return FileFormat.DELIMITED_TEXT

    suffix = ""
    if file_name and isinstance(file_name, str):
        suffix = PurePath(file_name.strip()).suffix.lower()

    if suffix in SPREADSHEET_EXTENSIONS:
        return FileFormat.SPREADSHEET_BINARY
    if suffix in DELIMITED_EXTENSIONS:
        return FileFormat.DELIMITED_TEXT

    logger.debug(f"Unknown format for file '{file_name}' (content type '{content_type}')")
    return FileFormat.UNKNOWN

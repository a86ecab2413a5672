"""
Tabular file parsing for spreadsheet imports.
One parser per format behind a common contract: bytes -> ParsedSheet.
"""
import datetime as dt
import io
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Set

import pandas as pd

from core.exceptions import EmptyFileError, ParsingError, UnsupportedFormatError
from core.logger import setup_logger
from core.schema import ErrorKind, FileFormat, ParsedSheet, RawRow, RowError

logger = setup_logger(__name__)

# Required columns and the header spellings accepted for each of them
REQUIRED_HEADERS: Dict[str, Set[str]] = {
    "date": {"date", "data"},
    "amount": {"amount", "valor"},
    "description": {"description", "descricao", "descrição"},
    "category": {"category", "categoria"},
    "direction": {"direction", "tipo", "type"},
}


def normalize_header(value: Any) -> str:
    """Trim and lowercase a header cell."""
    return cell_to_text(value).strip().lower()


def cell_to_text(value: Any) -> str:
    """
    Render a cell value as text.
    Date and datetime cells become ISO dates so they are never mistaken for numbers.

    Args:
        value: Raw cell value as returned by the reader

    Returns:
        Text representation ("" for blank cells)
    """
    if value is None:
        return ""
    if isinstance(value, (dt.datetime, dt.date)):
        if pd.isna(value):
            return ""
        if isinstance(value, dt.datetime):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value)


def check_required_headers(headers: List[str]) -> List[RowError]:
    """
    Record one parse-level error per missing required header.

    Args:
        headers: Normalized header names

    Returns:
        List of missing-header errors (empty when all are present)
    """
    present = set(headers)
    errors = []
    for field, aliases in REQUIRED_HEADERS.items():
        if not present & aliases:
            errors.append(RowError(
                row_number=0,
                field=field,
                message=f"Required header not found: {field}",
                kind=ErrorKind.MISSING_HEADER,
            ))

    if errors:
        logger.warning(f"Missing required headers: {[e.field for e in errors]}")
        logger.debug(f"Available headers: {headers}")

    return errors


class TabularParser(ABC):
    """Contract shared by all format-specific parsers."""

    source_format: FileFormat = FileFormat.UNKNOWN

    @abstractmethod
    def parse(self, content: bytes, file_name: str = "") -> ParsedSheet:
        """
        Parse file bytes into headers and rows.

        Args:
            content: Raw file bytes
            file_name: Declared file name

        Returns:
            ParsedSheet with headers, rows and parse-level errors

        Raises:
            EmptyFileError: If the file has no content
            ParsingError: If the file cannot be read
        """

    def build_sheet(self, file_name: str, grid: List[List[str]]) -> ParsedSheet:
        """
        Turn a text grid into a ParsedSheet. First line is the header.
        Empty lines are skipped but still count towards row numbering.
        A line of blank cells is kept so its missing fields are reported.
        """
        headers = [value.strip().lower() for value in grid[0]]
        while headers and not headers[-1]:
            headers.pop()

        rows = []
        for position, values in enumerate(grid[1:], start=1):
            if not values:
                continue
            rows.append(RawRow(row_number=position, values=values))

        errors = check_required_headers(headers)

        logger.info(
            f"Parsed {len(rows)} rows from '{file_name}' "
            f"({self.source_format.value}, {len(headers)} headers)"
        )

        return ParsedSheet(
            file_name=file_name,
            source_format=self.source_format,
            headers=headers,
            rows=rows,
            errors=errors,
        )


class SpreadsheetParser(TabularParser):
    """Reads the first worksheet of an xlsx/xls workbook."""

    source_format = FileFormat.SPREADSHEET_BINARY

    def parse(self, content: bytes, file_name: str = "") -> ParsedSheet:
        if not content:
            raise EmptyFileError(
                "File is empty",
                details={"file_name": file_name}
            )

        logger.info(f"Parsing spreadsheet {file_name}")

        try:
            df = pd.read_excel(
                io.BytesIO(content),
                sheet_name=0,
                header=None,
                dtype=object,
                # Picked from the workbook signature (openpyxl or xlrd), not the file name
                engine=None,
            )
        except Exception as e:
            logger.error(f"Failed to read spreadsheet {file_name}: {str(e)}")
            raise ParsingError(
                "Invalid spreadsheet file",
                details={"file_name": file_name, "error": str(e)}
            )

        if len(df) == 0:
            raise EmptyFileError(
                "Spreadsheet contains no rows",
                details={"file_name": file_name}
            )

        grid = []
        for record in df.itertuples(index=False, name=None):
            values = [cell_to_text(value) for value in record]
            while values and not values[-1].strip():
                values.pop()
            grid.append(values)

        return self.build_sheet(file_name, grid)


class DelimitedTextParser(TabularParser):
    """
    Comma separated text, split naively per line.
    Quoted fields containing commas are not supported.
    """

    source_format = FileFormat.DELIMITED_TEXT
    delimiter = ","

    def decode(self, content: bytes, file_name: str = "") -> str:
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.warning(f"File {file_name} is not valid UTF-8, falling back to latin-1")
            return content.decode("latin-1")

    def parse(self, content: bytes, file_name: str = "") -> ParsedSheet:
        text = self.decode(content, file_name) if content else ""
        if not text.strip():
            raise EmptyFileError(
                "File is empty",
                details={"file_name": file_name}
            )

        logger.info(f"Parsing delimited text {file_name}")

        grid = [
            [value.strip() for value in line.split(self.delimiter)] if line.strip() else []
            for line in text.splitlines()
        ]
        return self.build_sheet(file_name, grid)


PARSERS: Dict[FileFormat, TabularParser] = {
    FileFormat.SPREADSHEET_BINARY: SpreadsheetParser(),
    FileFormat.DELIMITED_TEXT: DelimitedTextParser(),
}


def get_parser(source_format: FileFormat) -> TabularParser:
    """
    Select the parser for a detected format.

    Args:
        source_format: Result of format detection

    Returns:
        Parser instance for that format

    Raises:
        UnsupportedFormatError: If no parser handles the format
    """
    parser = PARSERS.get(source_format)
    if parser is None:
        raise UnsupportedFormatError(
            "Unsupported file format. Use Excel (.xlsx, .xls) or CSV",
            details={"format": source_format.value}
        )
    return parser

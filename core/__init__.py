"""
Core processing modules for spreadsheet imports.

This package contains:
- config: Application configuration and settings
- detection: File format detection
- exceptions: Custom exception classes
- extraction: Candidate transaction extraction
- logger: Logging configuration
- matching: Similarity scoring and duplicate detection
- normalize: Typed value coercion (dates, amounts, direction)
- parsing: Spreadsheet and delimited text parsing
- schema: Pydantic models for pipeline data
- validation: Required field validation
"""

"""
Service layer for business logic.

This package contains the import orchestrator, which drives an uploaded
file through the pipeline, and the import service that feeds it
existing transactions for duplicate detection.
"""

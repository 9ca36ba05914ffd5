"""File-based persistence for schemas and submissions (no database)."""

from form_builder.storage.defaults import DEFAULT_SCHEMA
from form_builder.storage.protocol import SchemaStore, SubmissionStore
from form_builder.storage.schema_store import FileSchemaStore
from form_builder.storage.submission_store import FileSubmissionStore

__all__ = [
    "DEFAULT_SCHEMA",
    "FileSchemaStore",
    "FileSubmissionStore",
    "SchemaStore",
    "SubmissionStore",
]

"""Storage protocols for schemas and submissions.

The backend services depend on these, not on the file layout, so a database
implementation can replace FileSchemaStore/FileSubmissionStore later.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from form_builder.schemas.form_schema import FormSchema, StoredSchema, Submission


@runtime_checkable
class SchemaStore(Protocol):
    """Persisted schemas with at most one active."""

    def list_schemas(self) -> List[StoredSchema]:
        """All schemas, newest first."""
        ...

    def get_schema(self, schema_id: int) -> Optional[StoredSchema]:
        ...

    def get_active(self) -> Optional[StoredSchema]:
        """The active schema, or None if none is active."""
        ...

    def create(self, schema: FormSchema, activate: bool = True) -> StoredSchema:
        """Store a schema; with ``activate`` it becomes the only active one."""
        ...

    def activate(self, schema_id: int) -> Optional[StoredSchema]:
        """Make an existing schema the only active one. None if unknown."""
        ...


@runtime_checkable
class SubmissionStore(Protocol):
    """Append-only submission records."""

    def create(self, form_title: str, data: Dict[str, Any]) -> Submission:
        ...

    def list_submissions(self) -> List[Submission]:
        """All submissions, newest first."""
        ...

    def get(self, submission_id: int) -> Optional[Submission]:
        ...

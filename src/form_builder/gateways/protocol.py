"""Gateway protocols: the contracts the form engine needs from persistence.

Implementations live next to this module (HTTP via httpx, in-process over the
file store). Everything the engine calls is a coroutine so the caller can
show a loading state while a request is in flight.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Protocol, runtime_checkable

from form_builder.schemas.form_schema import FormSchema, StoredSchema, Submission


@dataclass(frozen=True)
class PublishedSchema:
    """Acknowledgement returned after a schema is published and activated."""

    id: int
    title: str


@dataclass(frozen=True)
class CreatedSubmission:
    """Acknowledgement returned after a submission is stored."""

    id: int
    created_at: datetime


@runtime_checkable
class SchemaGateway(Protocol):
    """Fetch and publish form schemas."""

    async def get_active_schema(self) -> StoredSchema:
        """Return the active schema.

        Raises:
            SchemaFetchError: On failure; ``not_found`` is set when no schema
                is active.
        """
        ...

    async def publish_schema(self, schema: FormSchema) -> PublishedSchema:
        """Store a schema and make it the single active one.

        Raises:
            SchemaPublishError: If the schema is rejected.
        """
        ...

    async def publish_schema_file(self, content: bytes, content_type: str, filename: str = "schema.json") -> PublishedSchema:
        """Publish a raw JSON upload.

        Raises:
            SchemaPublishError: Wrong content type, oversize payload,
                malformed JSON or invalid shape.
        """
        ...


@runtime_checkable
class SubmissionGateway(Protocol):
    """Create and read submissions."""

    async def create_submission(self, form_title: str, data: Mapping[str, Any]) -> CreatedSubmission:
        """Persist submitted data.

        Raises:
            SubmissionError: On network or server failure.
        """
        ...

    async def list_submissions(self) -> List[Submission]:
        """All submissions, newest first."""
        ...

    async def get_submission(self, submission_id: int) -> Submission:
        """One submission.

        Raises:
            SubmissionError: ``not_found`` is set when the id is unknown.
        """
        ...


def submission_payload(form_title: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """Wire body for CreateSubmission."""
    return {"formTitle": form_title, "data": dict(data)}

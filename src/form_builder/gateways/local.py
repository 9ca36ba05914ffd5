"""In-process gateways over the file stores.

Used by the CLI and tests to drive a FormSession without a running server.
Store calls are blocking file I/O, so they run in a worker thread.
"""

import asyncio
import logging
from typing import Any, List, Mapping

from form_builder.config import DEFAULT_MAX_UPLOAD_BYTES
from form_builder.errors import SchemaFetchError, SchemaPublishError, SubmissionError
from form_builder.gateways.protocol import CreatedSubmission, PublishedSchema
from form_builder.schemas.form_schema import FormSchema, StoredSchema, Submission
from form_builder.schemas.upload import parse_schema_upload
from form_builder.storage.protocol import SchemaStore, SubmissionStore

logger = logging.getLogger(__name__)


class LocalSchemaGateway:
    """SchemaGateway reading and writing a SchemaStore directly."""

    def __init__(self, store: SchemaStore, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES):
        self.store = store
        self.max_upload_bytes = max_upload_bytes

    async def get_active_schema(self) -> StoredSchema:
        try:
            schema = await asyncio.to_thread(self.store.get_active)
        except (OSError, ValueError) as e:
            raise SchemaFetchError("Error fetching active schema", original_error=e)
        if schema is None:
            raise SchemaFetchError("No active form schema found", not_found=True)
        return schema

    async def publish_schema(self, schema: FormSchema) -> PublishedSchema:
        try:
            stored = await asyncio.to_thread(self.store.create, schema, True)
        except OSError as e:
            raise SchemaPublishError("Error creating schema", original_error=e)
        return PublishedSchema(id=stored.id, title=stored.title)

    async def publish_schema_file(
        self, content: bytes, content_type: str, filename: str = "schema.json"
    ) -> PublishedSchema:
        schema = parse_schema_upload(content, content_type, self.max_upload_bytes)
        logger.debug(f"Publishing schema file '{filename}'")
        return await self.publish_schema(schema)


class LocalSubmissionGateway:
    """SubmissionGateway writing to a SubmissionStore directly."""

    def __init__(self, store: SubmissionStore):
        self.store = store

    async def create_submission(self, form_title: str, data: Mapping[str, Any]) -> CreatedSubmission:
        try:
            submission = await asyncio.to_thread(self.store.create, form_title, dict(data))
        except (OSError, TypeError, ValueError) as e:
            raise SubmissionError("Error creating submission", original_error=e)
        return CreatedSubmission(id=submission.id, created_at=submission.created_at)

    async def list_submissions(self) -> List[Submission]:
        try:
            return await asyncio.to_thread(self.store.list_submissions)
        except (OSError, ValueError) as e:
            raise SubmissionError("Error fetching submissions", original_error=e)

    async def get_submission(self, submission_id: int) -> Submission:
        submission = await asyncio.to_thread(self.store.get, submission_id)
        if submission is None:
            raise SubmissionError("Submission not found", not_found=True)
        return submission

"""Client-side glue between the gateways, the fetcher and a FormSession.

FormController owns the page-level state a client renders:

- the active schema (or a page error when it cannot be fetched)
- the submissions list, refreshed after every successful submission
- the schema uploader's inline error/success messages
- the FormSession for the current schema
"""

import logging
from datetime import date
from typing import Callable, List, Mapping, Optional, Sequence

from form_builder.config import DEFAULT_MAX_UPLOAD_BYTES
from form_builder.errors import FormBuilderError, SchemaPublishError
from form_builder.gateways.protocol import PublishedSchema, SchemaGateway, SubmissionGateway
from form_builder.schemas.form_schema import StoredSchema, Submission, parse_form_schema_json
from form_builder.schemas.upload import check_upload_metadata
from form_builder.session.fetch import SupersedingFetcher
from form_builder.session.state import FormSession
from form_builder.validation.checks import Check

logger = logging.getLogger(__name__)

SCHEMA_KEY = "schema"
SUBMISSIONS_KEY = "submissions"

SCHEMA_UPLOADED_MESSAGE = "Schema uploaded successfully"
SCHEMA_FILE_UPLOADED_MESSAGE = "Schema file uploaded successfully"
SELECT_FILE_MESSAGE = "Please select a file"


class FormController:
    """Page-level state for one client."""

    def __init__(
        self,
        schemas: SchemaGateway,
        submissions: SubmissionGateway,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        today: Callable[[], date] = date.today,
        extra_checks: Optional[Mapping[str, Sequence[Check]]] = None,
    ):
        self._schemas = schemas
        self._submissions = submissions
        self.max_upload_bytes = max_upload_bytes
        self.fetcher = SupersedingFetcher()
        self.session = FormSession(
            submissions,
            on_submitted=self.refresh_submissions,
            today=today,
            extra_checks=extra_checks,
        )

        self.page_error: Optional[str] = None
        self.upload_error: Optional[str] = None
        self.upload_message: Optional[str] = None

    @property
    def schema(self) -> Optional[StoredSchema]:
        return self.fetcher.state(SCHEMA_KEY).data

    @property
    def submissions(self) -> List[Submission]:
        return self.fetcher.state(SUBMISSIONS_KEY).data or []

    @property
    def schema_loading(self) -> bool:
        return self.fetcher.state(SCHEMA_KEY).loading

    @property
    def submissions_loading(self) -> bool:
        return self.fetcher.state(SUBMISSIONS_KEY).loading

    async def refresh_schema(self) -> bool:
        """Fetch the active schema and load it into the session.

        Returns:
            True if a schema was loaded; False on error or if superseded.
        """
        state = await self.fetcher.fetch(SCHEMA_KEY, self._schemas.get_active_schema)
        if state is None:
            return False
        if state.error is not None:
            self.page_error = _message(state.error, "Error loading form schema")
            return False

        self.page_error = None
        self.session.load_schema(state.data)
        logger.info(f"Loaded schema '{state.data.title}' with {len(state.data.fields)} field(s)")
        return True

    async def refresh_submissions(self) -> List[Submission]:
        state = await self.fetcher.fetch(SUBMISSIONS_KEY, self._submissions.list_submissions)
        if state is None or state.error is not None:
            return self.submissions
        return state.data

    async def load(self) -> None:
        """Initial page load: schema and submissions."""
        await self.refresh_schema()
        await self.refresh_submissions()

    async def publish_schema_text(self, text: str) -> Optional[PublishedSchema]:
        """Publish a schema pasted as JSON text, then reload the active schema."""
        self.upload_error = None
        self.upload_message = None
        try:
            schema = parse_form_schema_json(text)
            published = await self._schemas.publish_schema(schema)
        except SchemaPublishError as e:
            self.upload_error = e.message
            return None

        self.upload_message = SCHEMA_UPLOADED_MESSAGE
        await self.refresh_schema()
        return published

    async def publish_schema_file(
        self, content: Optional[bytes], content_type: Optional[str], filename: str = "schema.json"
    ) -> Optional[PublishedSchema]:
        """Publish an uploaded schema file, then reload the active schema."""
        self.upload_error = None
        self.upload_message = None
        if content is None:
            self.upload_error = SELECT_FILE_MESSAGE
            return None
        try:
            check_upload_metadata(content_type, len(content), self.max_upload_bytes)
            published = await self._schemas.publish_schema_file(content, content_type, filename)
        except SchemaPublishError as e:
            self.upload_error = e.message
            return None

        self.upload_message = SCHEMA_FILE_UPLOADED_MESSAGE
        await self.refresh_schema()
        return published

    def dismiss_upload_messages(self) -> None:
        self.upload_error = None
        self.upload_message = None


def _message(error: Exception, fallback: str) -> str:
    if isinstance(error, FormBuilderError):
        return error.message
    logger.error(f"Unexpected error: {error}", exc_info=error)
    return fallback

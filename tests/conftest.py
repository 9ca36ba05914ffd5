"""
Pytest fixtures and configuration for form_builder tests.
Provides sample schemas and in-memory gateway fakes.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping

import pytest

from form_builder.errors import SchemaFetchError, SubmissionError
from form_builder.gateways.protocol import CreatedSubmission, PublishedSchema
from form_builder.schemas.form_schema import (
    FormSchema,
    StoredSchema,
    Submission,
    parse_form_schema,
    parse_form_schema_json,
)
from form_builder.storage.defaults import DEFAULT_SCHEMA

FIXED_TODAY = date(2026, 1, 15)


class FakeSubmissionGateway:
    """In-memory SubmissionGateway that records calls."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.created: List[Dict[str, Any]] = []
        self.list_calls = 0

    async def create_submission(self, form_title: str, data: Mapping[str, Any]) -> CreatedSubmission:
        if self.fail:
            raise SubmissionError("Error creating submission")
        self.created.append({"formTitle": form_title, "data": dict(data)})
        return CreatedSubmission(id=len(self.created), created_at=datetime.now(timezone.utc))

    async def list_submissions(self) -> List[Submission]:
        self.list_calls += 1
        return [
            Submission(id=i + 1, form_title=item["formTitle"], data=item["data"], created_at=datetime.now(timezone.utc))
            for i, item in reversed(list(enumerate(self.created)))
        ]

    async def get_submission(self, submission_id: int) -> Submission:
        if not 0 < submission_id <= len(self.created):
            raise SubmissionError("Submission not found", not_found=True)
        item = self.created[submission_id - 1]
        return Submission(id=submission_id, form_title=item["formTitle"], data=item["data"], created_at=datetime.now(timezone.utc))


class FakeSchemaGateway:
    """In-memory SchemaGateway holding a list of published schemas."""

    def __init__(self, schemas: List[FormSchema] = ()):
        self.schemas: List[FormSchema] = list(schemas)
        self.file_uploads: List[bytes] = []

    async def get_active_schema(self) -> StoredSchema:
        if not self.schemas:
            raise SchemaFetchError("No active form schema found", not_found=True)
        schema = self.schemas[-1]
        return StoredSchema(
            id=len(self.schemas),
            title=schema.title,
            fields=schema.fields,
            active=True,
            created_at=datetime.now(timezone.utc),
        )

    async def publish_schema(self, schema: FormSchema) -> PublishedSchema:
        self.schemas.append(schema)
        return PublishedSchema(id=len(self.schemas), title=schema.title)

    async def publish_schema_file(self, content: bytes, content_type: str, filename: str = "schema.json") -> PublishedSchema:
        self.file_uploads.append(content)
        return await self.publish_schema(parse_form_schema_json(content))


@pytest.fixture
def today():
    """Fixed clock for date bounds."""
    return lambda: FIXED_TODAY


@pytest.fixture
def registration_schema() -> FormSchema:
    """The default "User Registration" schema."""
    return parse_form_schema(DEFAULT_SCHEMA)


@pytest.fixture
def contact_schema() -> FormSchema:
    """A small schema with an email field and a confirm-password pair."""
    return parse_form_schema(
        {
            "title": "Contact",
            "fields": [
                {"name": "email", "label": "Email", "type": "email", "required": True},
                {"name": "password", "label": "Password", "type": "password", "required": True, "minLength": 6},
                {"name": "confirm", "label": "Confirm", "type": "password", "confirmPassword": "password"},
            ],
        }
    )


@pytest.fixture
def submission_gateway():
    return FakeSubmissionGateway()


@pytest.fixture
def failing_submission_gateway():
    return FakeSubmissionGateway(fail=True)


@pytest.fixture
def schema_gateway(registration_schema):
    return FakeSchemaGateway([registration_schema])


@pytest.fixture
def make_schema_gateway():
    """Factory for FakeSchemaGateway with the given published schemas."""
    return FakeSchemaGateway

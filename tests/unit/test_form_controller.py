"""Unit tests for FormController."""

import json

import pytest

from form_builder.schemas import parse_form_schema
from form_builder.session.controller import (
    SCHEMA_FILE_UPLOADED_MESSAGE,
    SCHEMA_UPLOADED_MESSAGE,
    SELECT_FILE_MESSAGE,
    FormController,
)
from form_builder.session.state import SubmitOutcome

NEW_SCHEMA = {"title": "Feedback", "fields": [{"name": "comment", "label": "Comment", "required": True}]}


class TestLoad:
    """Tests for the initial page load."""

    @pytest.mark.asyncio
    async def test_load_fetches_schema_and_submissions(self, schema_gateway, submission_gateway, today):
        controller = FormController(schema_gateway, submission_gateway, today=today)
        await controller.load()

        assert controller.page_error is None
        assert controller.schema.title == "User Registration"
        assert controller.session.schema.title == "User Registration"
        assert controller.submissions == []
        assert submission_gateway.list_calls == 1

    @pytest.mark.asyncio
    async def test_missing_schema_sets_page_error(self, make_schema_gateway, submission_gateway):
        controller = FormController(make_schema_gateway(), submission_gateway)

        assert await controller.refresh_schema() is False
        assert controller.page_error == "No active form schema found"
        assert controller.session.schema is None

    @pytest.mark.asyncio
    async def test_unexpected_error_uses_fallback_message(self, submission_gateway):
        class BrokenGateway:
            async def get_active_schema(self):
                raise RuntimeError("boom")

        controller = FormController(BrokenGateway(), submission_gateway)
        await controller.refresh_schema()
        assert controller.page_error == "Error loading form schema"

    @pytest.mark.asyncio
    async def test_page_error_clears_on_success(self, make_schema_gateway, submission_gateway, registration_schema):
        gateway = make_schema_gateway()
        controller = FormController(gateway, submission_gateway)
        await controller.refresh_schema()
        assert controller.page_error

        await gateway.publish_schema(registration_schema)
        assert await controller.refresh_schema() is True
        assert controller.page_error is None


class TestSubmissionsRefresh:
    """Tests for the submissions list."""

    @pytest.mark.asyncio
    async def test_successful_submit_refreshes_list(self, make_schema_gateway, submission_gateway):
        controller = FormController(make_schema_gateway([parse_form_schema(NEW_SCHEMA)]), submission_gateway)
        await controller.load()

        controller.session.change("comment", "Great")
        assert await controller.session.submit() == SubmitOutcome.SUBMITTED

        assert submission_gateway.list_calls == 2
        assert [s.data for s in controller.submissions] == [{"comment": "Great"}]

    @pytest.mark.asyncio
    async def test_list_error_keeps_previous_list(self, schema_gateway):
        class FlakyGateway:
            fail = False

            async def list_submissions(self):
                if self.fail:
                    raise ConnectionError("offline")
                return ["s1"]

        submissions = FlakyGateway()
        controller = FormController(schema_gateway, submissions)
        assert await controller.refresh_submissions() == ["s1"]

        submissions.fail = True
        assert await controller.refresh_submissions() == ["s1"]


class TestPublishSchema:
    """Tests for publishing from the client."""

    @pytest.mark.asyncio
    async def test_publish_text_reloads_active_schema(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        await controller.load()
        controller.session.change("username", "bob")

        published = await controller.publish_schema_text(json.dumps(NEW_SCHEMA))

        assert published.title == "Feedback"
        assert controller.upload_message == SCHEMA_UPLOADED_MESSAGE
        assert controller.upload_error is None
        assert controller.session.schema.title == "Feedback"
        assert dict(controller.session.values) == {"comment": ""}

    @pytest.mark.asyncio
    async def test_publish_invalid_json(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        assert await controller.publish_schema_text("{not json") is None
        assert controller.upload_error == "Invalid JSON format"
        assert len(schema_gateway.schemas) == 1

    @pytest.mark.asyncio
    async def test_publish_missing_fields(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        await controller.publish_schema_text(json.dumps({"title": "No fields"}))
        assert controller.upload_error == "Schema must include a title and fields array"

    @pytest.mark.asyncio
    async def test_publish_file(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        content = json.dumps(NEW_SCHEMA).encode()

        published = await controller.publish_schema_file(content, "application/json", "feedback.json")

        assert published.id == 2
        assert schema_gateway.file_uploads == [content]
        assert controller.upload_message == SCHEMA_FILE_UPLOADED_MESSAGE
        assert controller.schema.title == "Feedback"

    @pytest.mark.asyncio
    async def test_publish_file_requires_file(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        assert await controller.publish_schema_file(None, None) is None
        assert controller.upload_error == SELECT_FILE_MESSAGE

    @pytest.mark.asyncio
    async def test_publish_file_rejects_wrong_type_before_sending(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        await controller.publish_schema_file(b"title: x", "text/yaml", "schema.yaml")
        assert controller.upload_error == "Only JSON files are allowed"
        assert schema_gateway.file_uploads == []

    @pytest.mark.asyncio
    async def test_publish_file_rejects_large_file(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway, max_upload_bytes=10)
        await controller.publish_schema_file(b"x" * 11, "application/json")
        assert controller.upload_error.startswith("File too large")
        assert schema_gateway.file_uploads == []

    @pytest.mark.asyncio
    async def test_dismiss_upload_messages(self, schema_gateway, submission_gateway):
        controller = FormController(schema_gateway, submission_gateway)
        await controller.publish_schema_text("{")
        controller.dismiss_upload_messages()
        assert controller.upload_error is None
        assert controller.upload_message is None


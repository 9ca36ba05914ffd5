"""Unit tests for schema file uploads."""

import json
from io import BytesIO

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from form_builder.api.services import SchemaService, UploadService
from form_builder.errors import SchemaPublishError
from form_builder.schemas import (
    ONLY_JSON_MESSAGE,
    check_upload_metadata,
    normalize_content_type,
    parse_schema_upload,
)
from form_builder.storage import FileSchemaStore

VALID_SCHEMA = json.dumps({"title": "Survey", "fields": [{"name": "rating", "type": "number"}]}).encode()


def make_upload(content: bytes, content_type: str = "application/json", filename: str = "schema.json") -> UploadFile:
    return UploadFile(
        file=BytesIO(content),
        size=len(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def upload_service(tmp_path):
    return UploadService(SchemaService(FileSchemaStore(tmp_path)), max_upload_bytes=1024 * 1024)


class TestUploadChecks:
    """Tests for the shared metadata checks."""

    def test_normalize_content_type(self):
        assert normalize_content_type("Application/JSON; charset=utf-8") == "application/json"
        assert normalize_content_type(None) == ""

    @pytest.mark.parametrize("content_type", ["text/plain", "application/x-yaml", "", None])
    def test_rejects_non_json(self, content_type):
        with pytest.raises(SchemaPublishError) as exc_info:
            check_upload_metadata(content_type, 10)
        assert exc_info.value.message == ONLY_JSON_MESSAGE

    def test_rejects_empty(self):
        with pytest.raises(SchemaPublishError, match="File is empty"):
            check_upload_metadata("application/json", 0)

    def test_rejects_over_limit(self):
        with pytest.raises(SchemaPublishError) as exc_info:
            check_upload_metadata("application/json", 2048, max_bytes=1024)
        assert exc_info.value.message == "File too large: 2KB. Maximum: 1KB"

    def test_limit_is_inclusive(self):
        check_upload_metadata("application/json", 1024, max_bytes=1024)

    def test_parse_schema_upload(self):
        schema = parse_schema_upload(VALID_SCHEMA, "application/json")
        assert schema.title == "Survey"


class TestUploadService:
    """Tests for UploadService."""

    @pytest.mark.asyncio
    async def test_valid_upload_is_published_and_activated(self, upload_service):
        stored = await upload_service.publish_schema_file(make_upload(VALID_SCHEMA))

        assert stored.id == 1
        assert stored.active is True
        assert upload_service.schema_service.get_active().title == "Survey"

    @pytest.mark.asyncio
    async def test_no_file(self, upload_service):
        with pytest.raises(HTTPException) as exc_info:
            await upload_service.publish_schema_file(None)
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "No file uploaded"

    @pytest.mark.asyncio
    async def test_wrong_content_type(self, upload_service):
        with pytest.raises(HTTPException) as exc_info:
            await upload_service.publish_schema_file(make_upload(VALID_SCHEMA, "text/plain", "schema.txt"))
        assert exc_info.value.detail == ONLY_JSON_MESSAGE

    @pytest.mark.asyncio
    async def test_too_large(self, upload_service):
        big = b" " * (1024 * 1024 + 1)
        with pytest.raises(HTTPException) as exc_info:
            await upload_service.publish_schema_file(make_upload(big))
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail.startswith("File too large")

    @pytest.mark.asyncio
    async def test_malformed_json(self, upload_service):
        with pytest.raises(HTTPException) as exc_info:
            await upload_service.publish_schema_file(make_upload(b"{not json"))
        assert exc_info.value.detail == "Invalid JSON format"

    @pytest.mark.asyncio
    async def test_missing_fields(self, upload_service):
        content = json.dumps({"title": "Only title"}).encode()
        with pytest.raises(HTTPException) as exc_info:
            await upload_service.publish_schema_file(make_upload(content))
        assert exc_info.value.detail == "Schema must include a title and fields array"

    @pytest.mark.asyncio
    async def test_rejected_upload_keeps_active_schema(self, upload_service):
        await upload_service.publish_schema_file(make_upload(VALID_SCHEMA))
        with pytest.raises(HTTPException):
            await upload_service.publish_schema_file(make_upload(b"[]"))
        assert upload_service.schema_service.get_active().title == "Survey"

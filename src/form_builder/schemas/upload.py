"""Checks for schema files uploaded as raw bytes.

Shared by the upload endpoint, the in-process gateway and the client-side
controller so every path rejects the same inputs with the same messages.
"""

from typing import Optional

from form_builder.config import DEFAULT_MAX_UPLOAD_BYTES
from form_builder.errors import SchemaPublishError
from form_builder.schemas.form_schema import FormSchema, parse_form_schema_json

ALLOWED_CONTENT_TYPES = {"application/json"}
ONLY_JSON_MESSAGE = "Only JSON files are allowed"
EMPTY_FILE_MESSAGE = "File is empty"


def normalize_content_type(content_type: Optional[str]) -> str:
    """``"Application/JSON; charset=utf-8"`` -> ``"application/json"``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def size_error_message(size: int, max_bytes: int) -> str:
    return f"File too large: {size / 1024:.0f}KB. Maximum: {max_bytes / 1024:.0f}KB"


def check_upload_metadata(content_type: Optional[str], size: int, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> None:
    """Reject by content type and size before reading the payload.

    Raises:
        SchemaPublishError: Wrong content type, empty or oversize file.
    """
    if normalize_content_type(content_type) not in ALLOWED_CONTENT_TYPES:
        raise SchemaPublishError(ONLY_JSON_MESSAGE)
    if size == 0:
        raise SchemaPublishError(EMPTY_FILE_MESSAGE)
    if size > max_bytes:
        raise SchemaPublishError(size_error_message(size, max_bytes))


def parse_schema_upload(
    content: bytes, content_type: Optional[str], max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
) -> FormSchema:
    """Validate an uploaded schema file and parse it.

    Raises:
        SchemaPublishError: Wrong content type, empty or oversize file,
            malformed JSON or a schema without title/fields.
    """
    check_upload_metadata(content_type, len(content), max_bytes)
    return parse_form_schema_json(content)

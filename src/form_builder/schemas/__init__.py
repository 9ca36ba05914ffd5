"""Data models for form schemas and submissions."""

from form_builder.schemas.form_schema import (
    SHAPE_ERROR_MESSAGE,
    TODAY_SENTINEL,
    FieldSpec,
    FieldType,
    FormSchema,
    StoredSchema,
    Submission,
    parse_form_schema,
    parse_form_schema_json,
)
from form_builder.schemas.upload import (
    ALLOWED_CONTENT_TYPES,
    ONLY_JSON_MESSAGE,
    check_upload_metadata,
    normalize_content_type,
    parse_schema_upload,
)

__all__ = [
    "ALLOWED_CONTENT_TYPES",
    "ONLY_JSON_MESSAGE",
    "SHAPE_ERROR_MESSAGE",
    "TODAY_SENTINEL",
    "FieldSpec",
    "FieldType",
    "FormSchema",
    "StoredSchema",
    "Submission",
    "check_upload_metadata",
    "normalize_content_type",
    "parse_form_schema",
    "parse_form_schema_json",
    "parse_schema_upload",
]

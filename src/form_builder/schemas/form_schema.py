"""Pydantic schemas for form definitions and submissions.

Wire names are camelCase (``minLength``, ``confirmPassword``...) to match the
JSON an operator pastes or uploads; Python attributes are snake_case.
Models accept both spellings.
"""

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from form_builder.errors import SchemaPublishError

SHAPE_ERROR_MESSAGE = "Schema must include a title and fields array"
TODAY_SENTINEL = "today"


class FieldType(str, Enum):
    """Known field types. Unknown types fall back to TEXT for validation."""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    DATE = "date"
    NUMBER = "number"
    SELECT = "select"
    PHONE = "phone"
    URL = "url"

    @classmethod
    def resolve(cls, raw: Optional[str]) -> Optional["FieldType"]:
        """Map a declared type string to a FieldType, or None if unknown."""
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class FieldSpec(BaseModel):
    """Declaration of a single form field."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Unique key within the schema")
    label: str = Field(default="", description="Display text; defaults to name")
    type: str = Field(default=FieldType.TEXT.value, description="Declared field type (extensible)")
    required: bool = False

    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=0)
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    min_date: Optional[date] = Field(default=None, alias="minDate")
    max_date: Optional[date] = Field(default=None, alias="maxDate")
    max_date_hint: Optional[str] = Field(default=None, alias="maxDateHint")

    options: Optional[List[str]] = None
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")
    custom_validation_function_string: Optional[str] = Field(
        default=None, alias="customValidationFunctionString"
    )
    custom_validation_message: Optional[str] = Field(default=None, alias="customValidationMessage")

    placeholder: Optional[str] = None
    helper_text: Optional[str] = Field(default=None, alias="helperText")

    @model_validator(mode="after")
    def validate_field(self):
        if not self.label:
            self.label = self.name
        if self.field_type == FieldType.SELECT and not self.options:
            raise ValueError(f"Select field '{self.name}' must define at least one option")
        if self.max_date_hint is not None and self.max_date_hint != TODAY_SENTINEL:
            raise ValueError(f"maxDateHint of '{self.name}' must be '{TODAY_SENTINEL}'")
        return self

    @property
    def field_type(self) -> Optional[FieldType]:
        """Resolved type, None when the declared type is not a known one."""
        return FieldType.resolve(self.type)


class FormSchema(BaseModel):
    """A form: title plus ordered field list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(..., min_length=1)
    fields: List[FieldSpec]

    @model_validator(mode="after")
    def validate_fields(self):
        seen = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"Duplicate field name '{field.name}'")
            seen.add(field.name)
        for field in self.fields:
            if field.confirm_password and field.confirm_password not in seen:
                raise ValueError(
                    f"confirmPassword of '{field.name}' references unknown field '{field.confirm_password}'"
                )
        return self

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldSpec]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_definition(self) -> Dict[str, Any]:
        """Only title and fields, as an operator would publish them."""
        return {
            "title": self.title,
            "fields": [f.model_dump(mode="json", by_alias=True, exclude_none=True) for f in self.fields],
        }


class StoredSchema(FormSchema):
    """A schema as persisted by the backend."""

    id: int
    active: bool = False
    created_at: datetime


class Submission(BaseModel):
    """A persisted record of submitted form data. Immutable."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    form_title: str = Field(..., alias="formTitle")
    data: Dict[str, Any]
    created_at: datetime

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def parse_form_schema(payload: Any) -> FormSchema:
    """Validate a decoded JSON payload into a FormSchema.

    Raises:
        SchemaPublishError: If the payload lacks a title or a fields array, or
            a field declaration is invalid.
    """
    if not isinstance(payload, dict) or not payload.get("title") or not isinstance(payload.get("fields"), list):
        raise SchemaPublishError(SHAPE_ERROR_MESSAGE)

    try:
        return FormSchema.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "invalid value")
        detail = f"{location}: {message}" if location else message
        raise SchemaPublishError(f"Invalid schema: {detail}", original_error=e)


def parse_form_schema_json(text: Union[str, bytes]) -> FormSchema:
    """Decode JSON text and validate it into a FormSchema.

    Raises:
        SchemaPublishError: On malformed JSON or an invalid schema shape.
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SchemaPublishError("Invalid JSON format", original_error=e)
    return parse_form_schema(payload)

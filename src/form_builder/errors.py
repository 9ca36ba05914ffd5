"""Exception taxonomy for the form engine.

Every error carries a short ``error_type`` so callers (API handlers, the
Streamlit client, the CLI) can decide where to surface it:

- SchemaFetchError: page-level, blocks rendering
- SchemaPublishError: inline near the upload control, non-fatal
- FieldValidationError: one field, recoverable
- FormValidationError: aggregate of field errors, blocks submission
- SubmissionError: transient banner, form state is kept
- ExpressionError: custom predicate rejected, the check is skipped
- SchemaLoadError: schema file unreadable (CLI, store seeding)
"""

from typing import Dict, Optional


class FormBuilderError(Exception):
    """Base exception class for all form engine errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "form_builder_error",
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.original_error = original_error
        super().__init__(self.message)


class SchemaFetchError(FormBuilderError):
    """The active schema could not be fetched."""

    def __init__(self, message: str, not_found: bool = False, original_error: Optional[Exception] = None):
        self.not_found = not_found
        super().__init__(message, "schema_fetch_error", original_error)


class SchemaPublishError(FormBuilderError):
    """A schema was rejected before or during publishing."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, "schema_publish_error", original_error)


class SchemaLoadError(FormBuilderError):
    """A schema file cannot be loaded or is invalid."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, "schema_load_error", original_error)


class FieldValidationError(FormBuilderError):
    """A single field failed validation."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(message, "field_validation_error")

    def __str__(self) -> str:
        return f"Validation error for '{self.field_name}': {self.message}"


class FormValidationError(FormBuilderError):
    """One or more fields failed validation; blocks submission."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Form has invalid fields: {fields}", "form_validation_error")


class SubmissionError(FormBuilderError):
    """Creating or fetching a submission failed."""

    def __init__(self, message: str, not_found: bool = False, original_error: Optional[Exception] = None):
        self.not_found = not_found
        super().__init__(message, "submission_error", original_error)


class ExpressionError(FormBuilderError):
    """A custom validation expression is malformed or outside the grammar."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid validation expression {source!r}: {reason}", "expression_error")

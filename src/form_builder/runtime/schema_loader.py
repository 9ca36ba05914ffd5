"""
Utility module for loading form schema JSON files from disk.

Used by the ``schema check`` CLI command.
"""

from pathlib import Path
from typing import Union

from form_builder.errors import SchemaLoadError, SchemaPublishError
from form_builder.schemas.form_schema import FormSchema, parse_form_schema_json


def load_schema(file_path: Union[str, Path]) -> FormSchema:
    """
    Load and validate a form schema JSON file.

    Args:
        file_path: Path to the schema JSON file

    Returns:
        Parsed FormSchema

    Raises:
        SchemaLoadError: If the file cannot be read or is not a valid schema

    Expected structure:
        {
            "title": str,
            "fields": [{"name": str, "type": str, ...}, ...]
        }
    """
    try:
        text = Path(file_path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SchemaLoadError(f"Schema file not found: {file_path}")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file {file_path}: {e}", original_error=e)

    try:
        return parse_form_schema_json(text)
    except SchemaPublishError as e:
        raise SchemaLoadError(f"{e.message} ({file_path})", original_error=e)

"""Service getters for the form builder API.

Stores and services are process-wide singletons built from the settings on
first use. Tests call configure() with their own settings (e.g. a tmp_path
data_dir) to rebuild them.
"""

import logging
from typing import Optional

from form_builder.api.services import SchemaService, SubmissionService, UploadService
from form_builder.config import FormBuilderSettings
from form_builder.startup import ensure_initialized
from form_builder.storage import FileSchemaStore, FileSubmissionStore

logger = logging.getLogger(__name__)

_settings: Optional[FormBuilderSettings] = None
_schema_store: Optional[FileSchemaStore] = None
_submission_store: Optional[FileSubmissionStore] = None


def get_settings() -> FormBuilderSettings:
    global _settings
    if _settings is None:
        _settings = ensure_initialized()
    return _settings


def configure(settings: FormBuilderSettings) -> None:
    """Use explicit settings and drop any stores built from earlier ones."""
    global _settings
    reset_services()
    _settings = settings


def reset_services() -> None:
    global _settings, _schema_store, _submission_store
    _settings = None
    _schema_store = None
    _submission_store = None


# =============================================================================
# STORES
# =============================================================================


def get_schema_store() -> FileSchemaStore:
    """Schema store; seeded with the default schema on first use."""
    global _schema_store
    if _schema_store is None:
        _schema_store = FileSchemaStore(get_settings().data_dir)
        _schema_store.seed_default()
    return _schema_store


def get_submission_store() -> FileSubmissionStore:
    global _submission_store
    if _submission_store is None:
        _submission_store = FileSubmissionStore(get_settings().data_dir)
    return _submission_store


# =============================================================================
# SERVICES
# =============================================================================


def get_schema_service() -> SchemaService:
    return SchemaService(get_schema_store())


def get_submission_service() -> SubmissionService:
    return SubmissionService(get_submission_store())


def get_upload_service() -> UploadService:
    return UploadService(get_schema_service(), max_upload_bytes=get_settings().max_upload_bytes)

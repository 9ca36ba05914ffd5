"""Backend services. Each raises HTTPException for the router to return."""

from form_builder.api.services.schemas import SchemaService
from form_builder.api.services.submissions import SubmissionService
from form_builder.api.services.upload import UploadService

__all__ = ["SchemaService", "SubmissionService", "UploadService"]

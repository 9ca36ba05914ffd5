"""Gateway contracts and their HTTP and in-process implementations."""

from form_builder.gateways.http import HttpSchemaGateway, HttpSubmissionGateway
from form_builder.gateways.local import LocalSchemaGateway, LocalSubmissionGateway
from form_builder.gateways.protocol import (
    CreatedSubmission,
    PublishedSchema,
    SchemaGateway,
    SubmissionGateway,
    submission_payload,
)

__all__ = [
    "CreatedSubmission",
    "HttpSchemaGateway",
    "HttpSubmissionGateway",
    "LocalSchemaGateway",
    "LocalSubmissionGateway",
    "PublishedSchema",
    "SchemaGateway",
    "SubmissionGateway",
    "submission_payload",
]

"""Upload router - schema files sent as multipart form data."""

from typing import Optional

from fastapi import APIRouter, File, UploadFile

from form_builder.api.dependencies import get_upload_service

router = APIRouter(tags=["upload"])


@router.post("/api/upload/schema", status_code=201)
async def upload_schema(schemaFile: Optional[UploadFile] = File(None, description="Schema JSON file")):
    """
    Upload a schema file and make it the active schema.

    Accepts ``application/json`` only, up to the configured size limit
    (1 MiB by default).
    """
    schema = await get_upload_service().publish_schema_file(schemaFile)
    return {
        "id": schema.id,
        "title": schema.title,
        "message": "Schema uploaded and activated successfully",
    }

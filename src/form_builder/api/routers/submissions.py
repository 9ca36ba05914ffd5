"""Submissions router - create and read form submissions."""

from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from form_builder.api.dependencies import get_submission_service

router = APIRouter(tags=["submissions"])


class CreateSubmissionRequest(BaseModel):
    """Request body for creating a submission."""

    model_config = ConfigDict(populate_by_name=True)

    form_title: Optional[str] = Field(default=None, alias="formTitle")
    data: Optional[Dict[str, Any]] = None


@router.get("/api/submissions")
def list_submissions():
    """All submissions, newest first."""
    return [s.to_wire() for s in get_submission_service().list_submissions()]


@router.post("/api/submissions", status_code=201)
def create_submission(request: CreateSubmissionRequest):
    """Store submitted form data."""
    submission = get_submission_service().create(request.form_title, request.data)
    return {**submission.to_wire(), "message": "Submission created successfully"}


@router.get("/api/submissions/{submission_id}")
def get_submission(submission_id: int):
    """One submission (404 if missing)."""
    return get_submission_service().get(submission_id).to_wire()

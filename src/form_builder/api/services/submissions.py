"""Submission service: create and read submissions."""

import logging
from typing import Any, Dict, List

from fastapi import HTTPException

from form_builder.schemas.form_schema import Submission
from form_builder.storage.protocol import SubmissionStore

logger = logging.getLogger(__name__)


class SubmissionService:
    """Service for submission endpoints."""

    def __init__(self, store: SubmissionStore):
        self.store = store

    def create(self, form_title: Any, data: Any) -> Submission:
        if not form_title or not isinstance(form_title, str) or not isinstance(data, dict) or not data:
            raise HTTPException(status_code=400, detail="Form title and data are required")
        try:
            return self.store.create(form_title, data)
        except OSError as e:
            logger.error(f"Error creating submission: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error creating submission")

    def list_submissions(self) -> List[Submission]:
        try:
            return self.store.list_submissions()
        except (OSError, ValueError) as e:
            logger.error(f"Error fetching submissions: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error fetching submissions")

    def get(self, submission_id: int) -> Submission:
        submission = self.store.get(submission_id)
        if submission is None:
            raise HTTPException(status_code=404, detail="Submission not found")
        return submission

"""File-backed submission log.

Layout::

    {data_dir}/submissions/submissions.json
        {"next_id": 4, "submissions": [{id, formTitle, data, created_at}, ...]}
"""

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from form_builder.schemas.form_schema import Submission
from form_builder.storage.files import read_json, write_json_atomic

logger = logging.getLogger(__name__)


class FileSubmissionStore:
    """Submissions persisted in a single JSON file, ids sequential."""

    def __init__(self, data_dir: Path):
        self.submissions_path = Path(data_dir) / "submissions" / "submissions.json"
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        return read_json(self.submissions_path, {"next_id": 1, "submissions": []})

    def create(self, form_title: str, data: Dict[str, Any]) -> Submission:
        with self._lock:
            store = self._load()
            submission = Submission(
                id=store["next_id"],
                form_title=form_title,
                data=dict(data),
                created_at=datetime.now(timezone.utc),
            )
            store["submissions"].append(submission.to_wire())
            store["next_id"] = submission.id + 1
            write_json_atomic(self.submissions_path, store)

        logger.info(f"Stored submission {submission.id} for '{form_title}'")
        return submission

    def list_submissions(self) -> List[Submission]:
        records = sorted(self._load()["submissions"], key=lambda r: r["id"], reverse=True)
        return [Submission.model_validate(r) for r in records]

    def get(self, submission_id: int) -> Optional[Submission]:
        for record in self._load()["submissions"]:
            if record["id"] == submission_id:
                return Submission.model_validate(record)
        return None

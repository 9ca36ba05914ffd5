"""File-backed schema registry.

Layout::

    {data_dir}/schemas/registry.json
        {"next_id": 3, "active_id": 2, "schemas": [{id, title, fields, created_at}, ...]}

The active schema is a single ``active_id`` pointer, so publishing a schema and
switching the active one is one atomic file replace. There is never a moment
with zero or two active schemas.
"""

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from form_builder.schemas.form_schema import FormSchema, StoredSchema, parse_form_schema
from form_builder.storage.defaults import DEFAULT_SCHEMA
from form_builder.storage.files import read_json, write_json_atomic

logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "registry.json"


def _empty_registry() -> Dict[str, Any]:
    return {"next_id": 1, "active_id": None, "schemas": []}


class FileSchemaStore:
    """Schemas persisted as one JSON registry file."""

    def __init__(self, data_dir: Path):
        """
        Args:
            data_dir: Root data directory; the registry lives in ``schemas/``.
        """
        self.schemas_dir = Path(data_dir) / "schemas"
        self.registry_path = self.schemas_dir / REGISTRY_FILENAME
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        registry = read_json(self.registry_path, _empty_registry())
        registry.setdefault("next_id", 1)
        registry.setdefault("active_id", None)
        registry.setdefault("schemas", [])
        return registry

    @staticmethod
    def _to_model(record: Dict[str, Any], active_id: Optional[int]) -> StoredSchema:
        return StoredSchema.model_validate({**record, "active": record["id"] == active_id})

    def list_schemas(self) -> List[StoredSchema]:
        registry = self._load()
        records = sorted(registry["schemas"], key=lambda r: r["id"], reverse=True)
        return [self._to_model(r, registry["active_id"]) for r in records]

    def get_schema(self, schema_id: int) -> Optional[StoredSchema]:
        registry = self._load()
        for record in registry["schemas"]:
            if record["id"] == schema_id:
                return self._to_model(record, registry["active_id"])
        return None

    def get_active(self) -> Optional[StoredSchema]:
        registry = self._load()
        active_id = registry["active_id"]
        if active_id is None:
            return None
        for record in registry["schemas"]:
            if record["id"] == active_id:
                return self._to_model(record, active_id)
        logger.warning(f"Active schema id {active_id} missing from registry")
        return None

    def create(self, schema: FormSchema, activate: bool = True) -> StoredSchema:
        with self._lock:
            registry = self._load()
            schema_id = registry["next_id"]
            record = {
                "id": schema_id,
                **schema.to_definition(),
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            registry["schemas"].append(record)
            registry["next_id"] = schema_id + 1
            if activate:
                registry["active_id"] = schema_id
            write_json_atomic(self.registry_path, registry)

        logger.info(f"Stored schema {schema_id} '{schema.title}' (active={activate})")
        return self._to_model(record, registry["active_id"])

    def activate(self, schema_id: int) -> Optional[StoredSchema]:
        with self._lock:
            registry = self._load()
            record = next((r for r in registry["schemas"] if r["id"] == schema_id), None)
            if record is None:
                return None
            registry["active_id"] = schema_id
            write_json_atomic(self.registry_path, registry)

        logger.info(f"Activated schema {schema_id} '{record['title']}'")
        return self._to_model(record, schema_id)

    def seed_default(self) -> Optional[StoredSchema]:
        """Store the default schema if the registry is empty."""
        if self._load()["schemas"]:
            return None
        logger.info("Schema registry empty, seeding default schema")
        return self.create(parse_form_schema(DEFAULT_SCHEMA), activate=True)

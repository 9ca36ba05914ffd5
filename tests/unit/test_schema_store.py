"""Unit tests for the file-backed schema and submission stores."""

import json

import pytest

from form_builder.schemas import parse_form_schema
from form_builder.storage import DEFAULT_SCHEMA, FileSchemaStore, FileSubmissionStore, SchemaStore, SubmissionStore


@pytest.fixture
def schema_store(tmp_path):
    return FileSchemaStore(tmp_path)


@pytest.fixture
def submission_store(tmp_path):
    return FileSubmissionStore(tmp_path)


def make_schema(title):
    return parse_form_schema({"title": title, "fields": [{"name": "q", "label": "Question"}]})


class TestFileSchemaStore:
    """Tests for FileSchemaStore."""

    def test_implements_protocol(self, schema_store):
        assert isinstance(schema_store, SchemaStore)

    def test_empty_store(self, schema_store):
        assert schema_store.get_active() is None
        assert schema_store.list_schemas() == []
        assert schema_store.get_schema(1) is None

    def test_create_activates_by_default(self, schema_store):
        stored = schema_store.create(make_schema("One"))

        assert stored.id == 1
        assert stored.active is True
        assert schema_store.get_active().title == "One"

    def test_single_active_schema(self, schema_store):
        schema_store.create(make_schema("One"))
        schema_store.create(make_schema("Two"))

        schemas = schema_store.list_schemas()
        assert [s.title for s in schemas] == ["Two", "One"]
        assert [s.active for s in schemas] == [True, False]

    def test_create_without_activation(self, schema_store):
        schema_store.create(make_schema("One"))
        draft = schema_store.create(make_schema("Draft"), activate=False)

        assert draft.active is False
        assert schema_store.get_active().title == "One"

    def test_activate(self, schema_store):
        schema_store.create(make_schema("One"))
        schema_store.create(make_schema("Two"))

        activated = schema_store.activate(1)

        assert activated.active is True
        assert schema_store.get_active().id == 1
        assert sum(s.active for s in schema_store.list_schemas()) == 1

    def test_activate_unknown(self, schema_store):
        assert schema_store.activate(99) is None

    def test_seed_default_only_when_empty(self, schema_store):
        seeded = schema_store.seed_default()
        assert seeded.title == DEFAULT_SCHEMA["title"]
        assert schema_store.seed_default() is None
        assert len(schema_store.list_schemas()) == 1

    def test_registry_uses_wire_names(self, schema_store):
        schema_store.seed_default()
        registry = json.loads(schema_store.registry_path.read_text(encoding="utf-8"))

        assert registry["active_id"] == 1
        assert registry["next_id"] == 2
        assert registry["schemas"][0]["fields"][0]["minLength"] == 2
        assert not schema_store.registry_path.with_suffix(".tmp").exists()

    def test_state_survives_new_instance(self, schema_store, tmp_path):
        schema_store.create(make_schema("One"))
        assert FileSchemaStore(tmp_path).get_active().title == "One"


class TestFileSubmissionStore:
    """Tests for FileSubmissionStore."""

    def test_implements_protocol(self, submission_store):
        assert isinstance(submission_store, SubmissionStore)

    def test_create_assigns_sequential_ids(self, submission_store):
        first = submission_store.create("Form", {"a": 1})
        second = submission_store.create("Form", {"a": 2})

        assert (first.id, second.id) == (1, 2)
        assert first.created_at.tzinfo is not None

    def test_list_is_newest_first(self, submission_store):
        submission_store.create("Form", {"a": 1})
        submission_store.create("Other", {"b": 2})

        listed = submission_store.list_submissions()
        assert [s.id for s in listed] == [2, 1]
        assert listed[0].form_title == "Other"

    def test_get(self, submission_store):
        submission_store.create("Form", {"a": 1})
        assert submission_store.get(1).data == {"a": 1}
        assert submission_store.get(2) is None

    def test_stored_with_wire_names(self, submission_store):
        submission_store.create("Form", {"a": 1})
        stored = json.loads(submission_store.submissions_path.read_text(encoding="utf-8"))
        assert stored["submissions"][0]["formTitle"] == "Form"

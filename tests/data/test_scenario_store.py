"""Tests for SQLite-backed saved scenarios."""

import sqlite3
from dataclasses import replace
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from morty.data.scenario_store import (
    ScenarioNotFoundError,
    ScenarioStorageError,
    ScenarioStore,
)


class TestSaveAndGet:
    def test_save_assigns_id_and_timestamp(self, store, canonical_params):
        scenario = store.save(canonical_params, title="Maple St")
        assert scenario.id is not None
        assert scenario.saved_at.tzinfo is not None
        assert scenario.title == "Maple St"

    def test_get_returns_params_unmodified(self, store, full_params):
        saved = store.save(
            full_params,
            title="Lake house",
            address="1 Shore Rd",
            notes="Needs a new roof",
            image_url="https://example.com/house.jpg",
            listing_url="https://example.com/listing/1",
        )
        loaded = store.get(saved.id)
        assert loaded == saved
        assert loaded.params == full_params

    def test_get_missing(self, store):
        assert store.get(uuid4()) is None

    def test_persists_across_instances(self, tmp_db, canonical_params):
        saved = ScenarioStore(tmp_db).save(canonical_params)
        assert ScenarioStore(tmp_db).get(saved.id) == saved

    def test_creates_parent_directory(self, tmp_path, canonical_params):
        store = ScenarioStore(str(tmp_path / "nested" / "dir" / "scenarios.db"))
        store.save(canonical_params)
        assert len(store.list_all()) == 1

    def test_get_unreadable_row(self, store, tmp_db):
        scenario_id = "3f2b8c1e-0000-4000-8000-000000000001"
        with sqlite3.connect(tmp_db) as conn:
            conn.execute(
                "INSERT INTO scenarios (id, saved_at, params_json) VALUES (?, ?, ?)",
                (scenario_id, "2020-01-01T00:00:00+00:00", "{\"price\": \"abc\"}"),
            )
        with pytest.raises(ScenarioStorageError, match="Saved scenario is unreadable"):
            store.get(UUID(scenario_id))


class TestListAll:
    def test_empty(self, store):
        assert store.list_all() == []

    def test_newest_first(self, store, canonical_params):
        first = store.save(canonical_params, title="first")
        second = store.save(canonical_params, title="second")
        assert [s.id for s in store.list_all()] == [second.id, first.id]

    def test_skips_unreadable_rows(self, store, tmp_db, canonical_params):
        good = store.save(canonical_params)
        conn = sqlite3.connect(tmp_db)
        with conn:
            conn.execute(
                "INSERT INTO scenarios (id, saved_at, params_json) VALUES (?, ?, ?)",
                (str(uuid4()), "2020-01-01T00:00:00+00:00", "{not json"),
            )
        conn.close()
        assert [s.id for s in store.list_all()] == [good.id]


class TestUpdate:
    def test_replaces_params_and_keeps_identity(self, store, canonical_params):
        saved = store.save(canonical_params, title="Maple St", notes="first look")
        new_params = replace(canonical_params, annual_rate_percent=Decimal("5.99"))

        updated = store.update(saved.id, new_params, notes="second look")

        assert updated.id == saved.id
        assert updated.saved_at == saved.saved_at
        assert updated.title == "Maple St"
        assert updated.notes == "second look"
        assert store.get(saved.id) == updated
        assert store.get(saved.id).params.annual_rate_percent == Decimal("5.99")

    def test_missing(self, store, canonical_params):
        with pytest.raises(ScenarioNotFoundError):
            store.update(uuid4(), canonical_params)

    def test_unknown_field(self, store, canonical_params):
        saved = store.save(canonical_params)
        with pytest.raises(ValueError, match="color"):
            store.update(saved.id, canonical_params, color="blue")


class TestDeleteAndClear:
    def test_delete(self, store, canonical_params):
        saved = store.save(canonical_params)
        assert store.delete(saved.id) is True
        assert store.get(saved.id) is None

    def test_delete_missing(self, store):
        assert store.delete(uuid4()) is False

    def test_clear(self, store, canonical_params):
        store.save(canonical_params)
        store.save(canonical_params)
        assert store.clear() == 2
        assert store.list_all() == []


class TestStorageFailures:
    def test_unusable_path(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        with pytest.raises(ScenarioStorageError, match="Scenario storage is unavailable"):
            ScenarioStore(str(blocker / "scenarios.db"))

    def test_unavailable_database(self, store, tmp_path, canonical_params):
        store.db_path = str(tmp_path / "does-not-exist" / "scenarios.db")
        with pytest.raises(ScenarioStorageError, match="Failed to save scenario"):
            store.save(canonical_params)
        with pytest.raises(ScenarioStorageError, match="Failed to load saved scenarios"):
            store.list_all()
        with pytest.raises(ScenarioStorageError, match="Failed to delete scenario"):
            store.delete(uuid4())
        with pytest.raises(ScenarioStorageError, match="Failed to clear scenarios"):
            store.clear()

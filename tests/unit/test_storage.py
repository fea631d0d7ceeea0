"""Unit tests for whole-file persistence"""

import json
from datetime import datetime

import pytest

from crime_tracker.core.hashing import hash_password
from crime_tracker.core.json_store import JsonFileStore, StoreReadError, StoreWriteError
from crime_tracker.core.models import CrimeRecord, Database, Officer
from crime_tracker.core.storage import SCHEMA_VERSION, DatabaseStore, LoadStatus


def _sample_database():
    return Database(
        officers=[
            Officer(username="admin", password_hash=hash_password("admin")),
            Officer(username="alice", password_hash=hash_password("secret1")),
        ],
        crimes=[
            CrimeRecord(
                id="6f1c2b7e-0000-4000-8000-000000000001",
                offender_name="Doe",
                crime_type="Theft",
                description="Bicycle taken from the station yard",
                police_in_charge="alice",
                punishment="Pending",
                reported_at=datetime(2025, 3, 1, 9, 30, 15, 123456),
            ),
            CrimeRecord(
                id="6f1c2b7e-0000-4000-8000-000000000002",
                offender_name="Unknown",
                crime_type="Unspecified",
                description="",
                police_in_charge="admin",
                punishment="Fine",
                reported_at=datetime(2025, 3, 2, 14, 0),
            ),
        ],
    )


@pytest.mark.unit
class TestDatabaseStore:
    """Load/save of the full database"""

    def test_missing_file_loads_empty(self, store):
        result = store.load()

        assert result.status is LoadStatus.MISSING
        assert result.database == Database()
        assert result.error is None

    def test_round_trip(self, store):
        database = _sample_database()

        assert store.save(database) is True
        result = store.load()

        assert result.status is LoadStatus.LOADED
        assert result.database == database

    def test_round_trip_empty(self, store):
        assert store.save(Database()) is True

        assert store.load().database == Database()

    def test_saved_file_is_versioned_json(self, store, data_file):
        store.save(_sample_database())

        payload = json.loads(data_file.read_text(encoding="utf-8"))

        assert payload["format"] == "crime-tracker"
        assert payload["version"] == SCHEMA_VERSION
        assert [o["username"] for o in payload["officers"]] == ["admin", "alice"]
        assert payload["crimes"][0]["reported_at"] == "2025-03-01T09:30:15.123456"
        assert "secret1" not in data_file.read_text(encoding="utf-8")

    def test_save_replaces_previous_content(self, store):
        store.save(_sample_database())
        store.save(Database(officers=[Officer(username="bob", password_hash=hash_password("pw12"))]))

        database = store.load().database

        assert [o.username for o in database.officers] == ["bob"]
        assert database.crimes == []

    def test_corrupt_file_loads_empty_and_is_moved_aside(self, store, data_file):
        data_file.write_text("{not json", encoding="utf-8")

        result = store.load()

        assert result.status is LoadStatus.UNREADABLE
        assert result.database == Database()
        assert result.error
        assert not data_file.exists()
        assert result.backup_path.name == "crimedb.json.corrupt-20250301093000"
        assert result.backup_path.read_text(encoding="utf-8") == "{not json"

    def test_newer_schema_version_is_unreadable(self, store, data_file):
        data_file.write_text(
            json.dumps({"format": "crime-tracker", "version": SCHEMA_VERSION + 1, "officers": [], "crimes": []}),
            encoding="utf-8",
        )

        result = store.load()

        assert result.status is LoadStatus.UNREADABLE
        assert "version" in result.error

    def test_foreign_json_is_unreadable(self, store, data_file):
        data_file.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

        assert store.load().status is LoadStatus.UNREADABLE

    def test_record_missing_field_is_unreadable(self, store, data_file):
        payload = {
            "format": "crime-tracker",
            "version": 1,
            "officers": [],
            "crimes": [{"id": "x", "offender_name": "Doe"}],
        }
        data_file.write_text(json.dumps(payload), encoding="utf-8")

        assert store.load().status is LoadStatus.UNREADABLE

    def test_empty_file_loads_empty(self, store, data_file):
        data_file.write_text("", encoding="utf-8")

        result = store.load()

        assert result.status is LoadStatus.LOADED
        assert result.database == Database()

    def test_save_failure_returns_false(self, tmp_path, caplog):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        store = DatabaseStore(blocker / "crimedb.json")

        with caplog.at_level("ERROR"):
            assert store.save(_sample_database()) is False

        assert "Failed to save database" in caplog.text

    def test_unencodable_text_fails_save_without_crashing(self, store, data_file):
        database = _sample_database()
        assert store.save(database) is True
        before = data_file.read_text(encoding="utf-8")
        database.crimes.append(
            CrimeRecord(
                id="6f1c2b7e-0000-4000-8000-000000000003",
                offender_name="Do\udcffe",
                crime_type="Theft",
                description="",
                police_in_charge="alice",
                punishment="Pending",
                reported_at=datetime(2025, 3, 3, 10, 0),
            )
        )

        assert store.save(database) is False
        assert [p.name for p in data_file.parent.iterdir()] == ["crimedb.json"]
        assert data_file.read_text(encoding="utf-8") == before

    @pytest.mark.parametrize(
        "officer",
        [
            {"username": "alice", "password_hash": "\u00e9"},
            {"username": "alice", "password_hash": "A" * 64},
            {"username": "alice", "password_hash": None},
            {"username": None, "password_hash": "0" * 64},
            {"username": 42, "password_hash": "0" * 64},
        ],
    )
    def test_malformed_officer_is_unreadable(self, store, data_file, officer):
        payload = {"format": "crime-tracker", "version": 1, "officers": [officer], "crimes": []}
        data_file.write_text(json.dumps(payload), encoding="utf-8")

        assert store.load().status is LoadStatus.UNREADABLE

    def test_non_string_crime_field_is_unreadable(self, store, data_file):
        store.save(_sample_database())
        payload = json.loads(data_file.read_text(encoding="utf-8"))
        payload["crimes"][0]["offender_name"] = None
        data_file.write_text(json.dumps(payload), encoding="utf-8")

        assert store.load().status is LoadStatus.UNREADABLE

    def test_duplicate_usernames_are_unreadable(self, store, data_file):
        payload = {
            "format": "crime-tracker",
            "version": 1,
            "officers": [
                {"username": "bob", "password_hash": hash_password("pw12")},
                {"username": "Bob", "password_hash": hash_password("pw34")},
            ],
            "crimes": [],
        }
        data_file.write_text(json.dumps(payload), encoding="utf-8")

        result = store.load()

        assert result.status is LoadStatus.UNREADABLE
        assert "Duplicate officer username" in result.error

    def test_duplicate_record_ids_are_unreadable(self, store, data_file):
        store.save(_sample_database())
        payload = json.loads(data_file.read_text(encoding="utf-8"))
        payload["crimes"][1]["id"] = payload["crimes"][0]["id"]
        data_file.write_text(json.dumps(payload), encoding="utf-8")

        assert store.load().status is LoadStatus.UNREADABLE


def test_json_store_write_leaves_no_temp_files(tmp_path):
    json_store = JsonFileStore(tmp_path / "data.json")

    json_store.write({"a": 1})
    json_store.write({"a": 2})

    assert json_store.read(None) == {"a": 2}
    assert [p.name for p in tmp_path.iterdir()] == ["data.json"]


def test_json_store_read_default_when_missing(tmp_path):
    assert JsonFileStore(tmp_path / "absent.json").read({"users": []}) == {"users": []}


def test_json_store_errors(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[", encoding="utf-8")

    with pytest.raises(StoreReadError):
        JsonFileStore(path).read(None)

    with pytest.raises(StoreWriteError):
        JsonFileStore(path / "child.json").write({})

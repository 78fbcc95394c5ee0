"""
Tests for SQLite key-value storage
"""
import datetime

from core.storage import SQLiteStorage


def test_read_missing_key(storage):
    assert storage.read("nope") is None


def test_write_then_read(storage):
    storage.write("k", "[1, 2]")

    assert storage.read("k") == "[1, 2]"


def test_write_replaces_value(storage):
    storage.write("k", "first")
    storage.write("k", "second")

    assert storage.read("k") == "second"


def test_updated_at_is_utc(storage):
    storage.write("k", "v")

    ts = datetime.datetime.fromisoformat(storage.read_updated_at("k"))
    assert ts.utcoffset() == datetime.timedelta(0)


def test_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "dir" / "cart.sqlite3"

    store = SQLiteStorage(str(path))
    store.write("k", "v")

    assert path.exists()
    assert SQLiteStorage(str(path)).read("k") == "v"

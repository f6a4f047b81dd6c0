"""Unit tests for the client-side key/value storage."""

from shoutbox.client.storage import USERNAME_KEY, LocalStorage


def test_missing_file_reads_empty(tmp_path):
    storage = LocalStorage(tmp_path / "nested" / "storage.json")
    assert storage.get(USERNAME_KEY) is None


def test_value_survives_new_instance(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    LocalStorage(path).set(USERNAME_KEY, "alice")

    assert LocalStorage(path).get(USERNAME_KEY) == "alice"


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")
    storage = LocalStorage(path)

    assert storage.get(USERNAME_KEY) is None
    storage.set(USERNAME_KEY, "bob")
    assert storage.get(USERNAME_KEY) == "bob"

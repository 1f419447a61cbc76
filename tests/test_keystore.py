"""Tests for the persistent key file."""
import os

import pytest

from config import ALPHANUMERIC, KEY_LENGTH
from errors import StorageError
from keystore import generate_key, load_or_create_key


def test_generate_key_shape():
    key = generate_key()
    assert len(key) == KEY_LENGTH
    assert all(c in ALPHANUMERIC for c in key)


def test_generate_key_is_random():
    assert len({generate_key() for _ in range(50)}) == 50


def test_creates_key_file_when_missing(key_path):
    key = load_or_create_key(key_path)

    assert len(key) == KEY_LENGTH
    with open(key_path, encoding="utf-8") as fh:
        assert fh.read() == key


def test_consecutive_calls_return_same_key(key_path):
    assert load_or_create_key(key_path) == load_or_create_key(key_path)


def test_existing_key_file_is_read_verbatim(key_path):
    with open(key_path, "w", encoding="utf-8") as fh:
        fh.write("A" * KEY_LENGTH)

    assert load_or_create_key(key_path) == "A" * KEY_LENGTH


def test_deleted_key_file_is_regenerated(key_path):
    first = load_or_create_key(key_path)
    os.remove(key_path)

    second = load_or_create_key(key_path)

    assert second != first
    assert load_or_create_key(key_path) == second


def test_no_temp_files_left_behind(tmp_path, key_path):
    load_or_create_key(key_path)
    assert os.listdir(tmp_path) == ["encryption.key"]


def test_write_failure_raises_storage_error(tmp_path):
    missing_dir_path = str(tmp_path / "no-such-dir" / "encryption.key")

    with pytest.raises(StorageError) as exc_info:
        load_or_create_key(missing_dir_path)

    assert exc_info.value.path == missing_dir_path
    assert isinstance(exc_info.value.__cause__, OSError)


def test_read_failure_other_than_missing_is_surfaced(tmp_path):
    # A directory at the key path cannot be opened as a file.
    key_dir = tmp_path / "encryption.key"
    key_dir.mkdir()

    with pytest.raises(StorageError):
        load_or_create_key(str(key_dir))


def test_read_permission_error_is_surfaced(monkeypatch, key_path):
    def deny(*args, **kwargs):
        raise PermissionError(13, "Permission denied", key_path)

    monkeypatch.setattr("keystore.open", deny, raising=False)

    with pytest.raises(StorageError):
        load_or_create_key(key_path)


def test_key_file_that_is_not_utf8_is_surfaced(key_path):
    with open(key_path, "wb") as fh:
        fh.write(b"\xff" * 32)

    with pytest.raises(StorageError) as exc_info:
        load_or_create_key(key_path)

    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

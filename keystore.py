"""
keystore.py – Persistent symmetric key.

The key is a 32-character alphanumeric string stored verbatim (no newline,
no structure) in a plain-text file.  It is created on first use and read on
every later call; it is never rotated.
"""

import logging
import os
import secrets
import tempfile

from config import ALPHANUMERIC, KEY_LENGTH
from errors import StorageError

logger = logging.getLogger("VdoLink")


def generate_key() -> str:
    """Return a fresh key of KEY_LENGTH characters drawn from [A-Za-z0-9]."""
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(KEY_LENGTH))


def load_or_create_key(path: str) -> str:
    """
    Return the key stored at *path*, creating the file first if it is absent.

    Raises
    ------
    StorageError
        If the key file exists but cannot be read, or if a new key cannot
        be written.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError:
        pass
    except (OSError, UnicodeDecodeError) as exc:
        logger.exception("Failed to read key file %s", path)
        raise StorageError(f"Cannot read key file: {exc}", path) from exc

    key = generate_key()
    _write_atomically(path, key)
    logger.info("Created new encryption key file %s", path)
    return key


def _write_atomically(path: str, data: str) -> None:
    """
    Write *data* to a temporary file next to *path* and move it into place
    with os.replace(), so readers never see a half-written key.
    """
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".key-", suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(data)
        os.replace(tmp_path, path)
    except OSError as exc:
        logger.exception("Failed to write key file %s", path)
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise StorageError(f"Cannot write key file: {exc}", path) from exc

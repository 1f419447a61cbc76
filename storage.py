"""
storage.py – Encrypted configuration file.

The configuration file is a small JSON document with a single field:

    {"vdo_ninja_url": "<base64 ciphertext>"}

save_encrypted_url() encrypts a URL with the caller's key and overwrites the
file.  load_decrypted_url() reverses the process; every way in which that can
fail (missing file, unreadable file, bad JSON, missing field, bad base64,
wrong key) is reported as None, which the caller treats as "nothing saved
yet".

The key is passed in for each call and is not kept by this module.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from config import CONFIG_URL_FIELD
from crypto import DecryptionError, decrypt_url, encrypt_url
from errors import StorageError

logger = logging.getLogger("VdoLink")


@dataclass
class ConfigRecord:
    """The persisted shape of the configuration file."""

    encrypted_url: str

    def to_json(self) -> str:
        return json.dumps({CONFIG_URL_FIELD: self.encrypted_url})

    @classmethod
    def from_json(cls, text: str) -> "ConfigRecord":
        """
        Parse *text* into a ConfigRecord.

        Raises ValueError if the text is not a JSON object holding a string
        under the "vdo_ninja_url" key.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Config file is not a JSON object")
        value = data.get(CONFIG_URL_FIELD)
        if not isinstance(value, str):
            raise ValueError(f"Config file has no string field {CONFIG_URL_FIELD!r}")
        return cls(encrypted_url=value)


def save_encrypted_url(path: str, key: str, url: str) -> None:
    """
    Encrypt *url* with *key* and write the resulting record to *path*,
    replacing any existing file.

    Raises
    ------
    StorageError
        If the file cannot be written.
    """
    record = ConfigRecord(encrypted_url=encrypt_url(url, key))
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(record.to_json())
    except OSError as exc:
        logger.exception("Failed to write config file %s", path)
        raise StorageError(f"Cannot write config file: {exc}", path) from exc
    logger.info("Encrypted URL saved to %s", path)


def load_decrypted_url(path: str, key: str) -> Optional[str]:
    """
    Return the URL stored at *path*, decrypted with *key*.

    Returns None when the file is missing, unreadable or malformed, or when
    the stored value cannot be decrypted with *key*.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            text = fh.read()
    except FileNotFoundError:
        logger.debug("No config file at %s", path)
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read config file %s: %s", path, exc)
        return None

    try:
        record = ConfigRecord.from_json(text)
    except ValueError as exc:
        logger.warning("Ignoring malformed config file %s: %s", path, exc)
        return None

    try:
        return decrypt_url(record.encrypted_url, key)
    except DecryptionError as exc:
        logger.warning("Could not decrypt stored URL in %s: %s", path, exc)
        return None

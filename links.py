"""
links.py – Operations offered to the application layer.

Each function takes the paths of the configuration file and the key file,
so the caller decides where data lives.  Notifying anyone that the saved
link changed is also left to the caller.
"""

import logging
import os
from typing import Optional

from config import DEFAULT_HOST
from credentials import build_manual_url, build_secure_url, validate_password
from keystore import load_or_create_key
from storage import load_decrypted_url, save_encrypted_url

logger = logging.getLogger("VdoLink")


class PushIdRequired(ValueError):
    """Raised when a manual link is requested without a push id."""

    def __init__(self) -> None:
        super().__init__("Push ID (Room Name) is required.")


def generate_and_persist_random_link(config_path: str, key_path: str,
                                     host: str = DEFAULT_HOST) -> str:
    """Generate a secure URL, save it encrypted and return it."""
    url = build_secure_url(host)
    save_encrypted_url(config_path, load_or_create_key(key_path), url)
    logger.info("Generated and saved a random link")
    return url


def set_and_persist_manual_link(config_path: str, key_path: str, push_id: str,
                                audience_password: str = "",
                                host: str = DEFAULT_HOST) -> str:
    """
    Save a URL built from *push_id* and *audience_password* and return it.

    An empty *audience_password* produces a URL without an audience clause;
    a non-empty one must satisfy the password policy.

    Raises
    ------
    PushIdRequired
        If *push_id* is empty or blank.
    PolicyViolation
        If *audience_password* is non-empty and breaks the policy.
        Nothing is written in that case.
    """
    if not push_id or not push_id.strip():
        raise PushIdRequired()
    if audience_password:
        validate_password(audience_password)

    url = build_manual_url(push_id, audience_password, host)
    save_encrypted_url(config_path, load_or_create_key(key_path), url)
    logger.info("Saved manual link")
    return url


def load_persisted_link(config_path: str, key_path: str) -> Optional[str]:
    """
    Return the saved URL in clear text, or None when nothing usable is saved.

    No key file is created when there is no configuration file to read.
    """
    if not os.path.exists(config_path):
        return None
    return load_decrypted_url(config_path, load_or_create_key(key_path))

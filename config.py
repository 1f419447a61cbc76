"""
config.py – Application configuration and constants.

This module defines:
  - All application-wide constants (password policy, identifier lengths,
    key-derivation parameters, file names, default host).
  - AppConfig, the integration-side container that resolves where the key
    file, the encrypted configuration file and the log live, and that sets
    up the shared rotating logger.

The core modules (keystore, crypto, storage, credentials, links) only import
the constants.  They never build an AppConfig themselves: file paths are
resolved here and passed into every core call.

No other application module is imported here, so config.py sits at the bottom
of the dependency graph and can be safely imported by any other module.
"""

import logging
import os
import string
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

import appdirs

# ---------------------------------------------------------------------------
# Application-level constants – these never change at runtime.
# ---------------------------------------------------------------------------

APP_NAME = "VdoLink"

APP_VERSION = "1.0.0"

# Environment variable that overrides the data directory.
DATA_DIR_ENV = "VDOLINK_DATA_DIR"

# File names inside the data directory.
CONFIG_FILE_NAME = "config.json"
KEY_FILE_NAME = "encryption.key"
LOG_FILE_NAME = "app.log"

# Field name inside config.json.  Kept for compatibility with files written
# by earlier releases.
CONFIG_URL_FIELD = "vdo_ninja_url"

DEFAULT_HOST = "vdo.ninja"

# ---------------------------------------------------------------------------
# Password policy – consulted by both the generator and the validator.
# ---------------------------------------------------------------------------

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SPECIAL_CHARACTERS = "!@#$%^&*"

ALPHANUMERIC = UPPERCASE + LOWERCASE + DIGITS

# Minimum length accepted for a caller-supplied audience password.
MIN_PASSWORD_LENGTH = 8

# Length of a generated audience password.
PASSWORD_LENGTH = 16

# Length of a generated push id.
PUSH_ID_LENGTH = 8

# ---------------------------------------------------------------------------
# Key and cipher parameters.
# ---------------------------------------------------------------------------

# Number of alphanumeric characters in the stored key.
KEY_LENGTH = 32

# PBKDF2-HMAC-SHA256 parameters used to turn the stored key into a Fernet key.
# Changing the iteration count makes existing config files unreadable.
KDF_ITERATIONS = 390_000
KDF_SALT_LENGTH = 16


class AppConfig:
    """
    Resolves file paths and owns the application logger.

    The data directory is chosen in this order:
      1. the *data_dir* argument,
      2. the VDOLINK_DATA_DIR environment variable,
      3. the directory of the running executable when *portable* is True
         (the layout used by earlier releases),
      4. the OS-standard user-data directory provided by appdirs.

    Attributes
    ----------
    data_dir : str
        Absolute path of the directory that stores all persistent data.
    key_path : str
        Plain-text file holding the 32-character symmetric key.
    config_path : str
        JSON file holding the encrypted URL.
    log_path : str
        Rotating application log.
    logger : logging.Logger
        Shared Python logger for the whole application.
    """

    def __init__(self, data_dir: Optional[str] = None, portable: bool = False) -> None:
        # --- Resolve (and create) the persistent data directory ---
        self.data_dir: str = self._resolve_data_dir(data_dir, portable)

        # --- Derive all file paths from the data directory ---
        self.key_path:    str = os.path.join(self.data_dir, KEY_FILE_NAME)
        self.config_path: str = os.path.join(self.data_dir, CONFIG_FILE_NAME)
        self.log_path:    str = os.path.join(self.data_dir, LOG_FILE_NAME)

        # --- Configure the rotating log handler ---
        self.logger: logging.Logger = self._setup_logger()

        self.logger.info("AppConfig initialised; data dir: %s", self.data_dir)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @classmethod
    def _resolve_data_dir(cls, data_dir: Optional[str], portable: bool) -> str:
        """Return (and create if necessary) the data directory."""
        if data_dir:
            path = data_dir
        elif os.getenv(DATA_DIR_ENV):
            path = os.environ[DATA_DIR_ENV]
        elif portable:
            path = cls.executable_dir()
        else:
            path = appdirs.user_data_dir(APP_NAME)

        path = os.path.abspath(os.path.expanduser(path))
        os.makedirs(path, exist_ok=True)
        return path

    def _setup_logger(self) -> logging.Logger:
        """
        Create and configure a rotating file logger for the whole application.

        The log rotates at 2 MB and keeps up to 3 backup files.
        A handler is only added once per log file, so creating several
        AppConfig objects for the same directory does not duplicate lines.
        """
        logger = logging.getLogger(APP_NAME)
        logger.setLevel(logging.DEBUG)

        for handler in logger.handlers:
            if getattr(handler, "baseFilename", None) == self.log_path:
                return logger

        handler = RotatingFileHandler(
            self.log_path,
            maxBytes=2_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s: %(message)s")
        )
        logger.addHandler(handler)
        return logger

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @staticmethod
    def executable_dir() -> str:
        """
        Return the directory of the running program.

        Inside a PyInstaller bundle this is the folder holding the
        executable; otherwise it is the folder of the entry script.
        """
        if getattr(sys, "frozen", False):
            return os.path.dirname(os.path.abspath(sys.executable))
        return os.path.dirname(os.path.abspath(sys.argv[0] or "."))

import logging

import pytest

import crypto
from config import APP_NAME, DATA_DIR_ENV


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    """Keep PBKDF2 cheap so tests that encrypt repeatedly stay fast."""
    monkeypatch.setattr(crypto, "KDF_ITERATIONS", 1_000)


@pytest.fixture
def key_path(tmp_path):
    return str(tmp_path / "encryption.key")


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.json")


@pytest.fixture
def clean_logger(monkeypatch):
    """Detach and close any file handlers AppConfig adds during a test."""
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    logger = logging.getLogger(APP_NAME)
    before = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in before:
            logger.removeHandler(handler)
            handler.close()

"""
crypto.py – Encryption of the stored URL.

The stored key is a short text string, so it is never used as a cipher key
directly.  Instead every encryption:

  - draws a fresh 16-byte salt,
  - derives a 32-byte Fernet key from the stored key and the salt using
    PBKDF2-HMAC-SHA256,
  - encrypts the text with Fernet (AES-128-CBC + HMAC-SHA256, provided by
    the 'cryptography' package),
  - returns base64(salt || Fernet token) as a single ASCII string.

Because Fernet is authenticated, decrypting a Fernet value with the wrong key
or a modified token always fails.  The legacy format has no such guarantee
(see decrypt_legacy()).

Values written by earlier releases used AES-256-CBC with SHA-256(key) as the
cipher key, an all-zero IV and PKCS#7 padding.  decrypt_url() still reads
them so an existing config file keeps working after an upgrade; new values
are always written in the Fernet format.
"""

import base64
import binascii
import hashlib
import os

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from config import KDF_ITERATIONS, KDF_SALT_LENGTH

# AES block size in bytes, used by the legacy format.
_BLOCK_SIZE = 16


class DecryptionError(ValueError):
    """Raised by decrypt_url() when a value cannot be decrypted with the given key."""


# ----------------------------------------------------------------------
# Key derivation
# ----------------------------------------------------------------------

def derive_key(key: str, salt: bytes) -> bytes:
    """
    Derive a Fernet-compatible key from the stored *key* string and *salt*.

    The raw 32 bytes are URL-safe base64-encoded so they can be passed
    directly to Fernet().
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(key.encode("utf-8")))


# ----------------------------------------------------------------------
# Encrypt / decrypt
# ----------------------------------------------------------------------

def encrypt_url(plaintext: str, key: str) -> str:
    """Encrypt *plaintext* with *key* and return the base64 value to store."""
    salt = os.urandom(KDF_SALT_LENGTH)
    token = Fernet(derive_key(key, salt)).encrypt(plaintext.encode("utf-8"))
    # Fernet tokens are themselves URL-safe base64; store the raw bytes so
    # the whole value is a single standard base64 string.
    raw_token = base64.urlsafe_b64decode(token)
    return base64.b64encode(salt + raw_token).decode("ascii")


def decrypt_url(value: str, key: str) -> str:
    """
    Decrypt a value produced by encrypt_url() (or by an earlier release).

    Raises DecryptionError on invalid base64, a wrong key, a tampered value,
    or a plaintext that is not valid UTF-8.
    """
    try:
        raw = base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise DecryptionError("Stored value is not valid base64") from exc

    try:
        return _decrypt_fernet(raw, key)
    except DecryptionError:
        # Fall through to the legacy format only when the length allows it.
        if not raw or len(raw) % _BLOCK_SIZE:
            raise
    return decrypt_legacy(raw, key)


def _decrypt_fernet(raw: bytes, key: str) -> str:
    salt, raw_token = raw[:KDF_SALT_LENGTH], raw[KDF_SALT_LENGTH:]
    if len(salt) < KDF_SALT_LENGTH or not raw_token:
        raise DecryptionError("Stored value is too short")
    token = base64.urlsafe_b64encode(raw_token)
    try:
        plaintext = Fernet(derive_key(key, salt)).decrypt(token)
        return plaintext.decode("utf-8")
    except (InvalidToken, UnicodeDecodeError) as exc:
        raise DecryptionError("Stored value could not be decrypted") from exc


def decrypt_legacy(raw: bytes, key: str) -> str:
    """
    Decrypt *raw* ciphertext bytes written in the legacy AES-256-CBC format.

    Unlike the Fernet format this one carries no authentication tag; a wrong
    key is only detected through invalid padding or invalid UTF-8.
    decrypt_url() also lands here for any value whose length is a multiple of
    16 bytes, including a truncated or edited Fernet value, so for such input
    a wrong key or a modified value can occasionally decrypt to a wrong
    plaintext instead of failing.
    """
    if not raw or len(raw) % _BLOCK_SIZE:
        raise DecryptionError("Legacy ciphertext has an invalid length")

    cipher_key = hashlib.sha256(key.encode("utf-8")).digest()
    decryptor = Cipher(
        algorithms.AES(cipher_key), modes.CBC(bytes(_BLOCK_SIZE))
    ).decryptor()
    padded = decryptor.update(raw) + decryptor.finalize()

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        data = unpadder.update(padded) + unpadder.finalize()
        return data.decode("utf-8")
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecryptionError("Legacy ciphertext could not be decrypted") from exc


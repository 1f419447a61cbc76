"""
credentials.py – Push ids, audience passwords and the password policy.

Both halves of this module read the character classes and lengths from
config.py, so a generated password always passes validate_password().

Password policy
---------------
A password is accepted when it
  - is at least MIN_PASSWORD_LENGTH characters long,
  - contains an uppercase ASCII letter,
  - contains a lowercase ASCII letter,
  - contains a digit,
  - contains one of SPECIAL_CHARACTERS.
The clauses are checked in that order and the first failing one is reported.
"""

import enum
import secrets
from typing import List

from config import (
    ALPHANUMERIC, DEFAULT_HOST, DIGITS, LOWERCASE, MIN_PASSWORD_LENGTH,
    PASSWORD_LENGTH, PUSH_ID_LENGTH, SPECIAL_CHARACTERS, UPPERCASE,
)

# Character classes a password must each draw from at least once.
REQUIRED_CLASSES = (UPPERCASE, LOWERCASE, DIGITS, SPECIAL_CHARACTERS)

PASSWORD_ALPHABET = "".join(REQUIRED_CLASSES)


class PolicyClause(enum.Enum):
    """Policy clauses in the order they are checked."""

    LENGTH = "Password must be at least {} characters long.".format(MIN_PASSWORD_LENGTH)
    UPPERCASE = "Password must contain at least one uppercase letter."
    LOWERCASE = "Password must contain at least one lowercase letter."
    DIGIT = "Password must contain at least one digit."
    SPECIAL = "Password must contain at least one special character ({}).".format(
        SPECIAL_CHARACTERS
    )


class PolicyViolation(ValueError):
    """
    Raised by validate_password() when a password breaks the policy.

    The exception message is the user-facing reason.

    Attributes
    ----------
    clause : PolicyClause
        The first clause the password failed.
    """

    def __init__(self, clause: PolicyClause) -> None:
        super().__init__(clause.value)
        self.clause: PolicyClause = clause


# ----------------------------------------------------------------------
# Generation
# ----------------------------------------------------------------------

def random_push_id() -> str:
    """Return PUSH_ID_LENGTH characters drawn uniformly from [A-Za-z0-9]."""
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(PUSH_ID_LENGTH))


def random_password() -> str:
    """
    Return a PASSWORD_LENGTH-character password that satisfies the policy.

    One character is drawn from each required class, the remaining
    positions are drawn from the union of all classes, and the whole
    sequence is shuffled so the guaranteed characters can sit anywhere.
    """
    chars: List[str] = [secrets.choice(pool) for pool in REQUIRED_CLASSES]
    chars.extend(
        secrets.choice(PASSWORD_ALPHABET)
        for _ in range(PASSWORD_LENGTH - len(chars))
    )
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def build_manual_url(push_id: str, audience_password: str = "", host: str = DEFAULT_HOST) -> str:
    """
    Compose a session URL from caller-supplied values.

    The audience clause is omitted when *audience_password* is empty.
    Values are inserted as given, without percent-encoding.
    """
    url = f"https://{host}/?push={push_id}"
    if audience_password:
        url += f"&audience={audience_password}"
    return url


def build_secure_url(host: str = DEFAULT_HOST) -> str:
    """Return a URL with a fresh random push id and audience password."""
    return build_manual_url(random_push_id(), random_password(), host)


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------

def validate_password(password: str) -> None:
    """
    Check *password* against the policy.

    Raises PolicyViolation naming the first failing clause; returns None
    when every clause passes.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PolicyViolation(PolicyClause.LENGTH)
    if not any(c in UPPERCASE for c in password):
        raise PolicyViolation(PolicyClause.UPPERCASE)
    if not any(c in LOWERCASE for c in password):
        raise PolicyViolation(PolicyClause.LOWERCASE)
    if not any(c in DIGITS for c in password):
        raise PolicyViolation(PolicyClause.DIGIT)
    if not any(c in SPECIAL_CHARACTERS for c in password):
        raise PolicyViolation(PolicyClause.SPECIAL)


def is_valid_password(password: str) -> bool:
    """Return True if *password* satisfies every policy clause."""
    try:
        validate_password(password)
    except PolicyViolation:
        return False
    return True

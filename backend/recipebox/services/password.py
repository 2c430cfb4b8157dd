"""
RecipeBox Backend: Password Hashing
=====================================

What:  One-way hashing and checking of user passwords with bcrypt.
How:   Salted hashes at the configured cost factor (BCRYPT_ROUNDS). The
       functions are synchronous and CPU-bound; UserService calls them
       through run_in_threadpool.

bcrypt only consumes the first 72 bytes of a secret; longer passwords are
truncated explicitly so hashing and verification agree on the same input
regardless of the installed bcrypt version.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    """Return a salted bcrypt hash of password as a str."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except ValueError:
        # Stored value is not a bcrypt hash; it can never match
        logger.warning("Stored password hash is malformed")
        return False

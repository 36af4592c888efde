"""Credential hashing for account passwords.

Calls ``bcrypt`` directly (>=4.0); passlib is unmaintained and does not
work with current bcrypt releases. Only the salted hash is ever stored.
"""

import bcrypt

# bcrypt ignores input past 72 bytes and bcrypt>=4.1 raises instead
_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Hash ``plain`` with a fresh salt. Returns the utf-8 hash string."""
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """True if ``plain`` matches the stored bcrypt ``hashed`` value."""
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False

"""
Password hashing and verification utilities using bcrypt.

Hashes produced by the PBKDF2 fallback stay verifiable because both
schemes are registered on the context.
"""

import logging
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt", "pbkdf2_sha256"], deprecated="auto")
fallback_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _truncate(password: str) -> str:
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")
    return password


def hash_password(password: str) -> str:
    """
    Hash a plaintext password using bcrypt, or PBKDF2 when bcrypt is unusable.

    Args:
        password: The plaintext password to hash

    Returns:
        The hashed password as a string

    Example:
        >>> hashed = hash_password("mysecretpassword")
        >>> verify_password("mysecretpassword", hashed)
        True
    """
    password = _truncate(password)
    try:
        return pwd_context.hash(password)
    except (ValueError, AttributeError) as e:
        logger.warning("bcrypt hashing failed (%s), using pbkdf2_sha256", e)
        return fallback_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a stored hash.

    Returns:
        True if the password matches, False otherwise (including unknown
        hash formats)
    """
    try:
        return pwd_context.verify(_truncate(plain_password), hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning("Password verification failed: %s", e)
        return False

"""Identity hashing for logs.

Screening records carry the resolved subject identity, but log lines
never do. Anything identifying a person is passed through hash_pii()
before it reaches a logger.
"""
import hashlib
import logging
from typing import Optional

logger = logging.getLogger(__name__)


_PII_SALT: Optional[str] = None

MIN_SALT_LENGTH = 32


def configure_pii_salt(salt: str) -> None:
    """Configure the salt used for identity hashing.

    Must be called during application startup before any hashing.

    Args:
        salt: Secret salt value (PII_HASH_SALT in the environment)

    Raises:
        ValueError: If salt is empty or shorter than 32 characters
    """
    global _PII_SALT
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical(
            "PII_SALT_CONFIGURATION_FAILED",
            extra={"reason": "Salt too short or empty", "min_length": MIN_SALT_LENGTH}
        )
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    _PII_SALT = salt
    logger.info("PII_SALT_CONFIGURED", extra={"salt_length": len(salt)})


def hash_pii(value: str) -> str:
    """Hash an identity for safe logging.

    Args:
        value: Identity to hash (e.g. "auth:uid_123")

    Returns:
        64-char hex SHA-256 digest of salt + value

    Raises:
        RuntimeError: If the salt has not been configured
    """
    if _PII_SALT is None:
        logger.critical(
            "PII_HASH_FAILED",
            extra={"reason": "Salt not configured", "action": "call configure_pii_salt()"}
        )
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")

    salted = f"{_PII_SALT}{value}"
    return hashlib.sha256(salted.encode()).hexdigest()

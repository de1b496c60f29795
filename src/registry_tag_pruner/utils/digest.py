"""Digest validation utilities."""

import re
from typing import Optional

# Regex pattern for valid digest format (algorithm:hex)
DIGEST_PATTERN = re.compile(r"^[a-z0-9]+:[a-f0-9]+$")

SUPPORTED_ALGORITHMS = ("sha256", "sha512")


def validate_digest(digest: object) -> bool:
    """Validate digest format.

    Args:
        digest: Digest string to validate

    Returns:
        True if valid digest format
    """
    if not isinstance(digest, str):
        return False

    if not DIGEST_PATTERN.match(digest):
        return False

    algorithm, _ = digest.split(":", 1)
    return algorithm in SUPPORTED_ALGORITHMS


def clean_digest(digest: object) -> Optional[str]:
    """Return the digest unchanged when valid, ``None`` otherwise."""
    if isinstance(digest, str):
        digest = digest.strip()
    return digest if validate_digest(digest) else None  # type: ignore[return-value]

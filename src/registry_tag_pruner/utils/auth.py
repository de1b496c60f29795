"""HTTP Basic authentication helpers."""

from typing import Optional

import aiohttp


def basic_auth_header(user: str, password: str) -> str:
    """Build the value of an ``Authorization`` header for HTTP Basic auth.

    Args:
        user: Registry user name
        password: Registry password or token

    Returns:
        Header value in the form ``Basic base64(user:password)``
    """
    return aiohttp.encode_basic_auth(user, password)


def auth_headers(user: Optional[str], password: Optional[str]) -> dict[str, str]:
    """Return the auth headers for a registry, empty for anonymous access."""
    if not user:
        return {}
    return {"Authorization": basic_auth_header(user, password or "")}

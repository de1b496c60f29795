"""Utility functions for the registry tag pruner."""

from .auth import auth_headers, basic_auth_header
from .digest import clean_digest, validate_digest

__all__ = ["auth_headers", "basic_auth_header", "clean_digest", "validate_digest"]

"""Custom exceptions for the registry tag pruner."""

from typing import Optional


class RegistryError(Exception):
    """Base exception for all pruner errors."""

    pass


class ConfigurationError(RegistryError):
    """Raised when required input is missing or the keep pattern is malformed."""

    pass


class RegistryUnavailable(RegistryError):
    """Raised when the tag list of an image cannot be fetched."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ManifestResolutionFailure(RegistryError):
    """Raised when a tag cannot be resolved to its digest(s).

    Soft failure: callers skip the tag and continue.
    """

    def __init__(
        self, message: str, tag: Optional[str] = None, status: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.tag = tag
        self.status = status


class DeletionFailure(RegistryError):
    """Raised when a DELETE on a manifest digest does not succeed."""

    def __init__(
        self, message: str, digest: Optional[str] = None, status: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.digest = digest
        self.status = status

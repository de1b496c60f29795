"""Registry Tag Pruner - Delete Docker Registry v2 tags not protected by a keep pattern."""

__version__ = "0.1.0"

from .config import PruneOptions, load_options, options_from_env
from .core.registry_client import RegistryClient
from .core.types import ManifestIndex, ReferenceMap, SinglePlatformManifest
from .exceptions import (
    ConfigurationError,
    DeletionFailure,
    ManifestResolutionFailure,
    RegistryError,
    RegistryUnavailable,
)
from .operations import (
    DeletionReport,
    build_reference_map,
    delete_tags,
    make_kill_list,
    resolve_keep_set,
)
from .prune import domain_to_base, normalize_options, prune

__all__ = [
    "PruneOptions",
    "load_options",
    "options_from_env",
    "RegistryClient",
    "ManifestIndex",
    "ReferenceMap",
    "SinglePlatformManifest",
    "RegistryError",
    "ConfigurationError",
    "RegistryUnavailable",
    "ManifestResolutionFailure",
    "DeletionFailure",
    "DeletionReport",
    "build_reference_map",
    "delete_tags",
    "make_kill_list",
    "resolve_keep_set",
    "domain_to_base",
    "normalize_options",
    "prune",
]

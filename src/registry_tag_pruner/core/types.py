"""Core data types: manifest variants and the tag/reference map."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union

from ..exceptions import ManifestResolutionFailure
from ..utils.digest import clean_digest

DOCKER_MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
DOCKER_MANIFEST_LIST = "application/vnd.docker.distribution.manifest.list.v2+json"
OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
OCI_INDEX = "application/vnd.oci.image.index.v1+json"

MANIFEST_ACCEPT = ", ".join(
    [DOCKER_MANIFEST_V2, DOCKER_MANIFEST_LIST, OCI_MANIFEST, OCI_INDEX]
)

DIGEST_HEADER = "Docker-Content-Digest"


@dataclass(frozen=True)
class PlatformEntry:
    """One platform-specific manifest listed by a manifest index."""

    digest: str
    architecture: Optional[str] = None
    os: Optional[str] = None


@dataclass(frozen=True)
class SinglePlatformManifest:
    """Image manifest for a single platform.

    ``config_digest`` identifies the image content and is the reference tags
    are compared by, whatever manifest shape they point at. ``digest`` is the
    manifest's own digest as surfaced by the registry (used for deletion).
    """

    config_digest: str
    digest: Optional[str] = None

    def deletion_digests(self) -> list[str]:
        return [self.digest] if self.digest else []


@dataclass(frozen=True)
class ManifestIndex:
    """Manifest list / OCI index of a multi-architecture image."""

    entries: tuple[PlatformEntry, ...]
    digest: Optional[str] = None

    def entry_for(self, architecture: str) -> Optional[PlatformEntry]:
        for entry in self.entries:
            if entry.architecture == architecture:
                return entry
        return None

    def select(self, architecture: str) -> PlatformEntry:
        """Return the entry for ``architecture``.

        Raises:
            ManifestResolutionFailure: If the index has no such entry
        """
        entry = self.entry_for(architecture)
        if entry is None:
            raise ManifestResolutionFailure(
                f"Manifest index has no entry for architecture {architecture}"
            )
        return entry

    def deletion_digests(self) -> list[str]:
        digests = [entry.digest for entry in self.entries]
        if self.digest and self.digest not in digests:
            digests.append(self.digest)
        return digests


Manifest = Union[SinglePlatformManifest, ManifestIndex]


def parse_manifest(body: Any, headers: Optional[Mapping[str, str]] = None) -> Manifest:
    """Parse a registry manifest response into its tagged variant.

    Args:
        body: Decoded JSON body of ``GET /v2/{image}/manifests/{reference}``
        headers: Response headers, used for the ``Docker-Content-Digest`` value

    Returns:
        SinglePlatformManifest or ManifestIndex

    Raises:
        ManifestResolutionFailure: If the body matches neither shape
    """
    if not isinstance(body, dict):
        raise ManifestResolutionFailure("Manifest body is not a JSON object")

    digest = clean_digest((headers or {}).get(DIGEST_HEADER))

    manifests = body.get("manifests")
    if isinstance(manifests, list):
        entries = []
        for item in manifests:
            if not isinstance(item, dict):
                continue
            entry_digest = clean_digest(item.get("digest"))
            if entry_digest is None:
                continue
            platform = item.get("platform")
            if not isinstance(platform, dict):
                platform = {}
            entries.append(
                PlatformEntry(
                    digest=entry_digest,
                    architecture=platform.get("architecture"),
                    os=platform.get("os"),
                )
            )
        if not entries:
            raise ManifestResolutionFailure("Manifest index lists no valid entries")
        return ManifestIndex(entries=tuple(entries), digest=digest)

    config = body.get("config")
    if isinstance(config, dict):
        config_digest = clean_digest(config.get("digest"))
        if config_digest is None:
            raise ManifestResolutionFailure("Manifest config has no valid digest")
        return SinglePlatformManifest(config_digest=config_digest, digest=digest)

    raise ManifestResolutionFailure("Manifest has neither config nor manifests")


@dataclass
class ReferenceMap:
    """Bidirectional map between tags and the references they resolve to."""

    tags: list[str] = field(default_factory=list)
    tag_to_ref: dict[str, str] = field(default_factory=dict)
    ref_to_tags: dict[str, list[str]] = field(default_factory=dict)
    tag_digests: dict[str, list[str]] = field(default_factory=dict)

    def add(self, tag: str, ref: str, digests: Iterable[str] = ()) -> None:
        """Record that ``tag`` resolves to ``ref`` through manifests ``digests``."""
        self.tag_to_ref[tag] = ref
        tags = self.ref_to_tags.setdefault(ref, [])
        if tag not in tags:
            tags.append(tag)
        self.tag_digests[tag] = list(digests)

    def digests_of(self, tags: Iterable[str]) -> set[str]:
        """Every manifest digest reachable from ``tags``."""
        return {
            digest for tag in tags for digest in self.tag_digests.get(tag, ())
        }

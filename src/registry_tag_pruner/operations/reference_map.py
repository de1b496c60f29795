"""Build the tag/reference map of an image."""

import logging
from typing import Optional

from ..config import DEFAULT_ARCHITECTURE
from ..core.pacing import RequestPacer
from ..core.registry_client import RegistryClient
from ..core.types import ManifestIndex, ReferenceMap, SinglePlatformManifest
from ..exceptions import ManifestResolutionFailure

logger = logging.getLogger(__name__)


async def resolve_tag(
    client: RegistryClient,
    image: str,
    tag: str,
    architecture: str,
    pacer: Optional[RequestPacer] = None,
) -> tuple[str, list[str]]:
    """Resolve one tag to its canonical reference.

    Both manifest shapes resolve to a config digest: for an index the entry
    for ``architecture`` is fetched and its config digest is used, so a
    multi-arch tag and a tag on the same platform image share a reference.

    Returns:
        Tuple of (reference, manifest digests the tag points at)

    Raises:
        ManifestResolutionFailure: If a manifest cannot be fetched or has no
            reference for ``architecture``
    """
    manifest = await client.get_manifest(image, tag)
    try:
        if isinstance(manifest, ManifestIndex):
            entry = manifest.select(architecture)
            if pacer is not None:
                await pacer.wait()
            child = await client.get_manifest(image, entry.digest)
            if not isinstance(child, SinglePlatformManifest):
                raise ManifestResolutionFailure(
                    f"Index entry {entry.digest} is not a platform manifest"
                )
            ref = child.config_digest
        else:
            ref = manifest.config_digest
    except ManifestResolutionFailure as e:
        e.tag = tag
        raise

    return ref, manifest.deletion_digests()


async def build_reference_map(
    client: RegistryClient,
    image: str,
    pacer: Optional[RequestPacer] = None,
    architecture: str = DEFAULT_ARCHITECTURE,
) -> ReferenceMap:
    """Walk every tag of an image and map tags to references and back.

    Args:
        client: Open registry client
        image: Image (repository) name
        pacer: Backoff between requests, a fresh one when omitted
        architecture: Platform whose entry is tracked for manifest indexes

    Returns:
        ReferenceMap; tags that cannot be resolved are left out

    Raises:
        RegistryUnavailable: If the tag list cannot be fetched
    """
    pacer = pacer or RequestPacer()

    await pacer.wait()
    tags = await client.list_tags(image)
    logger.debug("Found tags: %s", ", ".join(tags))
    pacer.reset()

    ref_map = ReferenceMap(tags=list(tags))
    for tag in tags:
        await pacer.wait()
        try:
            ref, digests = await resolve_tag(client, image, tag, architecture, pacer)
        except ManifestResolutionFailure as e:
            logger.warning("Skipping tag %s: %s", tag, e)
            continue

        logger.debug("Found tag %s has ref %s", tag, ref)
        ref_map.add(tag, ref, digests)

    return ref_map

"""Delete the tags on a kill list, one at a time."""

import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Optional

from ..core.pacing import RequestPacer
from ..core.registry_client import RegistryClient
from ..exceptions import DeletionFailure, ManifestResolutionFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionOutcome:
    """Result of one DELETE call."""

    tag: str
    digest: str
    ok: bool
    status: Optional[int] = None


@dataclass
class DeletionReport:
    """Per-tag results of a deletion pass."""

    deleted: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    outcomes: list[DeletionOutcome] = field(default_factory=list)


async def delete_tag(
    client: RegistryClient,
    image: str,
    tag: str,
    report: DeletionReport,
    protected: AbstractSet[str] = frozenset(),
) -> Optional[bool]:
    """Delete every manifest digest behind one tag.

    Digests in ``protected`` are still reachable from kept tags and are left
    in place.

    Returns:
        True when every DELETE succeeded, None when every digest is protected

    Raises:
        ManifestResolutionFailure: If the tag cannot be resolved to a digest
    """
    manifest = await client.get_manifest(image, tag)
    digests = manifest.deletion_digests()
    if not digests:
        raise ManifestResolutionFailure(f"No digest found for tag {tag}", tag=tag)

    digests = [digest for digest in digests if digest not in protected]
    if not digests:
        return None

    all_ok = True
    for digest in digests:
        try:
            status = await client.delete_manifest(image, digest)
        except DeletionFailure as e:
            logger.debug("Failed to delete tag %s (%s): %s", tag, digest, e)
            report.outcomes.append(DeletionOutcome(tag, digest, False, e.status))
            all_ok = False
            continue

        logger.debug("Deleted tag %s (%s): HTTP %s", tag, digest, status)
        report.outcomes.append(DeletionOutcome(tag, digest, True, status))

    return all_ok


async def delete_tags(
    client: RegistryClient,
    image: str,
    kill_list: list[str],
    pacer: Optional[RequestPacer] = None,
    dry_run: bool = False,
    protected: AbstractSet[str] = frozenset(),
) -> DeletionReport:
    """Delete every tag of the kill list.

    Failures are logged and recorded per tag; they never abort the batch.

    Args:
        client: Open registry client
        image: Image (repository) name
        kill_list: Tags to delete, in order
        pacer: Backoff between tags, a fresh one when omitted
        dry_run: Log what would be deleted without issuing DELETE calls
        protected: Manifest digests of kept tags, never deleted

    Returns:
        DeletionReport
    """
    pacer = pacer or RequestPacer()
    report = DeletionReport()

    for tag in kill_list:
        if dry_run:
            logger.info("Dry run, not deleting tag %s", tag)
            report.skipped.append(tag)
            continue

        await pacer.wait()
        try:
            ok = await delete_tag(client, image, tag, report, protected)
        except ManifestResolutionFailure as e:
            logger.warning("Failed to resolve tag %s for deletion: %s", tag, e)
            report.failed.append(tag)
            continue

        if ok is None:
            logger.info("Tag %s only points at manifests of kept tags, skipping", tag)
            report.skipped.append(tag)
        elif ok:
            logger.debug("Successfully deleted tag %s", tag)
            report.deleted.append(tag)
        else:
            logger.warning("Failed to delete tag %s", tag)
            report.failed.append(tag)

    return report

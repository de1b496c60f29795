"""Async prune run: reference map, keep set, kill list, deletions."""

import dataclasses
import logging
import re

from .config import PruneOptions
from .core.pacing import RequestPacer
from .core.registry_client import RegistryClient
from .operations.deletion import DeletionReport, delete_tags
from .operations.keep_set import make_kill_list, resolve_keep_set
from .operations.reference_map import build_reference_map

logger = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^https?://")


def domain_to_base(domain: str) -> str:
    """Prefix the domain with ``https://`` unless it already has a scheme."""
    if not SCHEME_PATTERN.match(domain):
        return f"https://{domain}"
    return domain


def normalize_options(options: PruneOptions) -> PruneOptions:
    """Return a copy of the options whose domain is a valid base URL."""
    return dataclasses.replace(options, domain=domain_to_base(options.domain))


async def prune(options: PruneOptions) -> DeletionReport:
    """레지스트리에서 유지 패턴으로 보호되지 않는 모든 태그를 삭제합니다.

    Args:
        options: 정리 옵션 (도메인은 사용 전에 정규화됨)

    Returns:
        DeletionReport: 태그별 삭제 결과

    Raises:
        RegistryUnavailable: 태그 목록을 가져오지 못한 경우 (아무것도 삭제되지 않음)

    Examples:
        options = load_options("registry.example.com", "team/app", "^v1$")
        report = await prune(options)
        print(f"삭제됨: {report.deleted}, 실패: {report.failed}")
    """
    options = normalize_options(options)

    async with RegistryClient(
        options.domain,
        user=options.user,
        password=options.password,
        timeout=options.timeout,
    ) as client:
        pacer = RequestPacer(options.request_delay, options.max_request_delay)
        ref_map = await build_reference_map(
            client, options.image, pacer, options.architecture
        )

        keep = resolve_keep_set(ref_map, options.regex)
        kill_list = make_kill_list(ref_map, keep)
        logger.debug("Killing tags: %s", ", ".join(kill_list))

        pacer.reset()
        report = await delete_tags(
            client,
            options.image,
            kill_list,
            pacer,
            dry_run=options.dry_run,
            protected=ref_map.digests_of(keep),
        )

    logger.info(
        "Pruned %s: kept %d, deleted %d, failed %d, skipped %d",
        options.image,
        len(keep),
        len(report.deleted),
        len(report.failed),
        len(report.skipped),
    )
    return report

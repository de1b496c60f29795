"""Example: preview and prune the tags of a local registry image."""

import asyncio
import logging
import sys

from registry_tag_pruner import (
    RegistryClient,
    RegistryError,
    build_reference_map,
    load_options,
    make_kill_list,
    prune,
    resolve_keep_set,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """Show the keep set and kill list, then run a dry-run prune."""
    options = load_options(
        "http://localhost:15000", "myapp", r"^v\d+\.\d+\.\d+$", dry_run=True
    )

    try:
        async with RegistryClient(options.domain) as client:
            ref_map = await build_reference_map(client, options.image)

        keep = resolve_keep_set(ref_map, options.regex)
        logger.info(f"Keeping {len(keep)} tags: {sorted(keep)}")
        logger.info(f"Would delete: {make_kill_list(ref_map, keep)}")

        report = await prune(options)
        logger.info(f"Dry run skipped {len(report.skipped)} tags")

    except RegistryError as e:
        logger.error(f"Registry error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

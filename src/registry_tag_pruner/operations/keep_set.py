"""Keep set and kill list computation."""

import re

from ..core.types import ReferenceMap


def resolve_keep_set(ref_map: ReferenceMap, pattern: re.Pattern[str]) -> set[str]:
    """Return every tag that must survive.

    A tag matching ``pattern`` protects all tags that resolve to the same
    reference, whether or not their own names match.
    """
    keep: set[str] = set()

    for tag, ref in ref_map.tag_to_ref.items():
        if pattern.search(tag):
            keep.update(ref_map.ref_to_tags[ref])

    return keep


def make_kill_list(ref_map: ReferenceMap, keep: set[str]) -> list[str]:
    """List resolved tags outside the keep set, in discovery order."""
    return [tag for tag in ref_map.tag_to_ref if tag not in keep]

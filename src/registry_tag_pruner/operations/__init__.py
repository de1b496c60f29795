"""Reconciliation steps: reference map, keep set, deletion."""

from .deletion import DeletionOutcome, DeletionReport, delete_tags
from .keep_set import make_kill_list, resolve_keep_set
from .reference_map import build_reference_map

__all__ = [
    "DeletionOutcome",
    "DeletionReport",
    "build_reference_map",
    "delete_tags",
    "make_kill_list",
    "resolve_keep_set",
]

"""Forest deduplication.

A composite that also appears inside another composite's tree (a nested
composite) is reported only as part of that tree, never as its own root.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from crossplane_diagnose.models.tree import CompositeTree

_log = structlog.get_logger(component="tree.forest")


def descendant_keys(forest: Sequence[CompositeTree]) -> set[tuple[str, str]]:
    """Return every ``(kind, name)`` reachable below a root, at any depth."""
    keys: set[tuple[str, str]] = set()
    for entry in forest:
        if entry.tree is None:
            continue
        for child in entry.tree.children:
            keys.update(node.key for node in child.walk())
    return keys


def prune_nested_roots(forest: Sequence[CompositeTree]) -> list[CompositeTree]:
    """Drop roots that are descendants elsewhere in *forest*, preserving order."""
    nested = descendant_keys(forest)
    surviving: list[CompositeTree] = []
    for entry in forest:
        if entry.key in nested:
            _log.debug("hiding nested composite from top level", kind=entry.kind, name=entry.name)
            continue
        surviving.append(entry)
    return surviving

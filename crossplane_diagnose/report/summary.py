"""Failure digest across a forest of composite trees.

The text format is consumed by substring matching downstream (the AI prompt
and anyone grepping stderr), so the header, ``Reason:`` and healthy lines
are fixed.
"""

from __future__ import annotations

from collections.abc import Sequence

from crossplane_diagnose.models.tree import CompositeTree, HealthStatus, ResourceNode

SUMMARY_HEADER = "\n--- Summary ---\n"
ALL_HEALTHY = "✅ All resources are healthy!\n"
UNKNOWN_REASON = "Unknown reason"

# "Synced" is never assigned as an overall status; kept so such nodes are never reported.
_HEALTHY_STATUSES = frozenset({HealthStatus.AVAILABLE, "Synced"})


def collect_unhealthy(node: ResourceNode) -> list[ResourceNode]:
    """Return every unhealthy node in the subtree, depth-first, pre-order."""
    return [n for n in node.walk() if n.status not in _HEALTHY_STATUSES]


def pick_reason(node: ResourceNode) -> str:
    """Choose one line that best explains why *node* is unhealthy."""
    for condition in node.conditions:
        if "False" in condition or "Unknown" in condition:
            return condition
    if node.conditions:
        return node.conditions[0]
    if node.events:
        return node.events[0]
    return UNKNOWN_REASON


def summarize_failures(forest: Sequence[CompositeTree]) -> tuple[str, bool]:
    """Return ``(summary_text, has_failures)`` for *forest*."""
    parts = [SUMMARY_HEADER]
    has_failures = False

    for entry in forest:
        if entry.tree is None:
            continue
        unhealthy = collect_unhealthy(entry.tree)
        if not unhealthy:
            continue
        has_failures = True
        parts.append(f"❌ Top Parent: {entry.kind}/{entry.name}\n")
        for node in unhealthy:
            parts.append(f"  - Child {node.kind}/{node.name}: {node.status}\n")
            parts.append(f"    Reason: {pick_reason(node)}\n")
        parts.append("\n")

    if not has_failures:
        parts.append(ALL_HEALTHY)

    return "".join(parts), has_failures

"""Dependency-tree construction and health classification.

Submodules:
    resolver -- apiVersion/kind -> TypeRef (naive pluralization).
    health   -- Synced/Ready/overall status from a condition list.
    events   -- Event lookup and formatting for one resource identity.
    builder  -- Recursive tree builder and per-root forest assembly.
    forest   -- Removal of roots nested inside another tree.
"""

from crossplane_diagnose.tree.builder import TreeBuilder
from crossplane_diagnose.tree.events import EventCorrelator
from crossplane_diagnose.tree.forest import prune_nested_roots
from crossplane_diagnose.tree.health import HealthAssessment, classify_conditions, overall_status
from crossplane_diagnose.tree.resolver import resolve_reference

__all__ = [
    "EventCorrelator",
    "HealthAssessment",
    "TreeBuilder",
    "classify_conditions",
    "overall_status",
    "prune_nested_roots",
    "resolve_reference",
]

"""Core data structures for crossplane-diagnose."""

from crossplane_diagnose.models.config import DiagnoseConfig
from crossplane_diagnose.models.tree import (
    FETCH_ERROR_PREFIX,
    UNKNOWN,
    CompositeItem,
    CompositeTree,
    HealthStatus,
    ResourceNode,
    TypeRef,
)

__all__ = [
    "FETCH_ERROR_PREFIX",
    "UNKNOWN",
    "CompositeItem",
    "CompositeTree",
    "DiagnoseConfig",
    "HealthStatus",
    "ResourceNode",
    "TypeRef",
]

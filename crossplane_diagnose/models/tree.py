"""Data structures for composite resource trees."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum


class HealthStatus(StrEnum):
    """Overall status values assigned by the tree builder.

    Fetch failures carry a free-form ``"Error fetching: ..."`` status instead.
    """

    AVAILABLE = "Available"
    UNHEALTHY = "Unhealthy"
    CYCLE_DETECTED = "Cycle detected"


UNKNOWN = "Unknown"
FETCH_ERROR_PREFIX = "Error fetching: "


@dataclass(frozen=True)
class TypeRef:
    """A queryable resource type: API group, version and plural resource name."""

    group: str
    version: str
    plural: str

    @property
    def api_version(self) -> str:
        """Return the ``group/version`` form (bare version for the core group)."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return f"{self.api_version}, Resource={self.plural}"


@dataclass(frozen=True)
class CompositeItem:
    """A live composite instance found during discovery."""

    api_version: str
    kind: str
    name: str


@dataclass(frozen=True)
class ResourceNode:
    """One observed resource in a dependency tree.

    Immutable once built. Each node exclusively owns its children, which are
    kept in the order the parent declares its references.
    """

    kind: str
    name: str
    synced: str = UNKNOWN
    ready: str = UNKNOWN
    status: str = HealthStatus.UNHEALTHY
    conditions: tuple[str, ...] = ()
    events: tuple[str, ...] = ()
    children: tuple[ResourceNode, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        """Return the ``(kind, name)`` identity used for cycle and dedup checks."""
        return (self.kind, self.name)

    def walk(self) -> Iterator[ResourceNode]:
        """Yield this node and every descendant, depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class CompositeTree:
    """A composite root paired with its built tree, or the error that prevented it."""

    name: str
    kind: str
    tree: ResourceNode | None = None
    error: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.name)

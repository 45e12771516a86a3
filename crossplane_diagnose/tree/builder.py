"""Tree construction: recursive fetch-and-descend over declared resource references.

Every fetched object becomes a ResourceNode carrying its classified health and
correlated events. Children come from the references the object declares in
``spec.resourceRefs``. All round trips are awaited one at a time, depth-first,
so a tree costs one get plus one event list per node.

Failure scope:
    incomplete or unresolvable reference -> dropped, no node
    child fetch error                    -> leaf node with "Error fetching: ..." status
    event fetch error                    -> node recorded with zero events
    root fetch error                     -> RootFetchError, no partial tree
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import structlog

from crossplane_diagnose.errors import FetchError, InvalidAPIVersionError, RootFetchError
from crossplane_diagnose.models.tree import (
    FETCH_ERROR_PREFIX,
    CompositeItem,
    CompositeTree,
    HealthStatus,
    ResourceNode,
    TypeRef,
)
from crossplane_diagnose.tree.events import EventCorrelator
from crossplane_diagnose.tree.health import classify_conditions
from crossplane_diagnose.tree.resolver import resolve_reference

if TYPE_CHECKING:
    from crossplane_diagnose.kube.client import ResourceAPI

_log = structlog.get_logger(component="tree.builder")

REFERENCES_PATH = ("spec", "resourceRefs")
CONDITIONS_PATH = ("status", "conditions")


def _nested(obj: dict[str, Any], path: tuple[str, ...]) -> Any:
    current: Any = obj
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _nested_list(obj: dict[str, Any], path: tuple[str, ...]) -> list[Any]:
    value = _nested(obj, path)
    return value if isinstance(value, list) else []


def _metadata(obj: dict[str, Any], key: str) -> str:
    value = _nested(obj, ("metadata", key))
    return value if isinstance(value, str) else ""


def _str_value(mapping: dict[str, Any], key: str) -> str:
    value = mapping.get(key)
    return value if isinstance(value, str) else ""


class TreeBuilder:
    """Builds one ResourceNode tree per composite root.

    Args:
        api:        Resource API used for gets and event lists.
        correlator: Event correlator. Defaults to one backed by *api*.
    """

    def __init__(self, api: ResourceAPI, correlator: EventCorrelator | None = None) -> None:
        self._api = api
        self._correlator = correlator or EventCorrelator(api)

    async def build_tree(self, type_ref: TypeRef, name: str) -> ResourceNode:
        """Fetch the root object and build its full subtree.

        Raises:
            RootFetchError: if the root object cannot be fetched.
        """
        try:
            obj = await self._api.get(type_ref, name)
        except FetchError as exc:
            raise RootFetchError(name, exc) from exc
        return await self._build_node(obj, in_progress=set())

    async def build_forest(self, roots: Iterable[CompositeItem]) -> list[CompositeTree]:
        """Build a CompositeTree per root, in input order.

        A root that cannot be resolved or fetched is recorded with its error;
        sibling roots are unaffected.
        """
        forest: list[CompositeTree] = []
        for item in roots:
            log = _log.bind(kind=item.kind, name=item.name)
            log.info("analyzing composite")
            try:
                type_ref = resolve_reference(item.api_version, item.kind)
                root = await self.build_tree(type_ref, item.name)
            except (InvalidAPIVersionError, RootFetchError) as exc:
                log.warning("composite tree build failed", error=str(exc))
                forest.append(CompositeTree(name=item.name, kind=item.kind, error=str(exc)))
                continue
            forest.append(CompositeTree(name=item.name, kind=item.kind, tree=root))
        return forest

    async def _build_node(self, obj: dict[str, Any], in_progress: set[tuple[str, str]]) -> ResourceNode:
        kind = _str_value(obj, "kind")
        name = _metadata(obj, "name")
        namespace = _metadata(obj, "namespace")
        key = (kind, name)

        health = classify_conditions(_nested_list(obj, CONDITIONS_PATH))
        events = await self._fetch_events(kind, name, namespace)

        in_progress.add(key)
        try:
            children = await self._build_children(obj, in_progress)
        finally:
            in_progress.discard(key)

        return ResourceNode(
            kind=kind,
            name=name,
            synced=health.synced,
            ready=health.ready,
            status=health.status,
            conditions=health.conditions,
            events=tuple(events),
            children=tuple(children),
        )

    async def _build_children(
        self, obj: dict[str, Any], in_progress: set[tuple[str, str]]
    ) -> list[ResourceNode]:
        children: list[ResourceNode] = []
        for ref in _nested_list(obj, REFERENCES_PATH):
            if not isinstance(ref, dict):
                continue
            api_version = _str_value(ref, "apiVersion")
            kind = _str_value(ref, "kind")
            name = _str_value(ref, "name")
            if not api_version or not kind or not name:
                continue
            try:
                type_ref = resolve_reference(api_version, kind)
            except InvalidAPIVersionError:
                _log.debug("skipping unresolvable reference", api_version=api_version, kind=kind, name=name)
                continue

            if (kind, name) in in_progress:
                _log.warning("reference cycle detected", kind=kind, name=name)
                children.append(ResourceNode(kind=kind, name=name, status=HealthStatus.CYCLE_DETECTED))
                continue

            try:
                child_obj = await self._api.get(type_ref, name)
            except FetchError as exc:
                _log.info("child fetch failed", kind=kind, name=name, error=str(exc))
                children.append(ResourceNode(kind=kind, name=name, status=f"{FETCH_ERROR_PREFIX}{exc}"))
                continue

            children.append(await self._build_node(child_obj, in_progress))
        return children

    async def _fetch_events(self, kind: str, name: str, namespace: str) -> list[str]:
        # Events are looked up for every node, healthy or not.
        try:
            return await self._correlator.fetch(kind, name, namespace)
        except FetchError as exc:
            _log.debug("event lookup failed", kind=kind, name=name, error=str(exc))
            return []

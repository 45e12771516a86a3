"""Composite discovery: which composite types exist and which instances are live.

A type counts as composite when its CustomResourceDefinition lists the
``composite`` category. Instances are listed cluster-wide per type.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

import aiohttp
import structlog
from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio.client.rest import ApiException  # type: ignore[import-untyped]

from crossplane_diagnose.kube.client import fetch_error_from
from crossplane_diagnose.models.tree import CompositeItem, TypeRef

_log = structlog.get_logger(component="kube.discovery")

COMPOSITE_CATEGORY = "composite"


def _pick_version(versions: Iterable[Any]) -> str:
    """Prefer the storage version, else the first served version."""
    served = [v for v in versions if getattr(v, "served", False)]
    for version in served:
        if getattr(version, "storage", False):
            return str(version.name)
    return str(served[0].name) if served else ""


async def discover_composite_types(api_client: k8s_client.ApiClient) -> list[TypeRef]:
    """Return one TypeRef per CRD carrying the ``composite`` category."""
    ext = k8s_client.ApiextensionsV1Api(api_client)
    try:
        crds = await ext.list_custom_resource_definition()
    except ApiException as exc:
        raise fetch_error_from(exc) from exc

    types: list[TypeRef] = []
    for crd in crds.items or []:
        spec = crd.spec
        categories = spec.names.categories or []
        if COMPOSITE_CATEGORY not in categories:
            continue
        version = _pick_version(spec.versions or [])
        if not version:
            _log.debug("composite type has no served version", crd=crd.metadata.name)
            continue
        types.append(TypeRef(group=spec.group, version=version, plural=spec.names.plural))
    _log.info("discovered composite types", count=len(types))
    return types


async def list_composites(api_client: k8s_client.ApiClient, types: Iterable[TypeRef]) -> list[CompositeItem]:
    """List live instances of every type. A type that cannot be listed is skipped."""
    custom = k8s_client.CustomObjectsApi(api_client)
    items: list[CompositeItem] = []
    for type_ref in types:
        try:
            result = await custom.list_cluster_custom_object(type_ref.group, type_ref.version, type_ref.plural)
        except ApiException as exc:
            _log.warning("error listing composite type", type=str(type_ref), error=str(fetch_error_from(exc)))
            continue
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            _log.warning("error listing composite type", type=str(type_ref), error=str(exc) or type(exc).__name__)
            continue
        objs = result.get("items") if isinstance(result, dict) else None
        for obj in objs or []:
            metadata = obj.get("metadata") or {}
            items.append(
                CompositeItem(
                    api_version=obj.get("apiVersion") or type_ref.api_version,
                    kind=obj.get("kind") or "",
                    name=metadata.get("name") or "",
                )
            )
    _log.info("listed composites", count=len(items))
    return items


def filter_composites(items: Iterable[CompositeItem], name: str = "", kind: str = "") -> list[CompositeItem]:
    """Keep items matching *name* exactly and *kind* case-insensitively.

    Empty filters match everything. Logs a warning when filters are set and
    nothing matches.
    """
    items = list(items)
    if not name and not kind:
        return items
    selected = [
        item
        for item in items
        if (not name or item.name == name) and (not kind or item.kind.lower() == kind.lower())
    ]
    if not selected:
        _log.warning("no resources found matching filters", name=name or None, kind=kind or None)
    return selected

"""Resource API access for the tree builder.

ResourceAPI is the narrow interface the core depends on: a get by type and
name, and an event list filtered server-side by involved object. The
production implementation, KubeResourceAPI, talks to the API server through
kubernetes-asyncio; tests substitute an in-memory fake.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol

import aiohttp
import structlog
from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]
from kubernetes_asyncio.client.rest import ApiException  # type: ignore[import-untyped]

from crossplane_diagnose.errors import FetchError
from crossplane_diagnose.models.config import KubeConfig
from crossplane_diagnose.models.tree import TypeRef
from crossplane_diagnose.tree.events import event_field_selector

_log = structlog.get_logger(component="kube.client")


class ResourceAPI(Protocol):
    """Read-only access to live resource state."""

    async def get(self, type_ref: TypeRef, name: str) -> dict[str, Any]:
        """Return the object *name* of *type_ref*, or raise FetchError."""
        ...

    async def list_events(self, kind: str, name: str, namespace: str = "") -> list[dict[str, Any]]:
        """Return events whose involvedObject matches *kind*/*name*, or raise FetchError."""
        ...


def fetch_error_from(exc: ApiException) -> FetchError:
    """Convert an ApiException into a FetchError carrying the server's message."""
    message = ""
    if exc.body:
        try:
            body = json.loads(exc.body)
        except (TypeError, ValueError):
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            message = body["message"]
    if not message:
        message = f"{exc.status} {exc.reason}".strip()
    return FetchError(message, status=exc.status)


async def load_api_client(config: KubeConfig) -> k8s_client.ApiClient:
    """Build an ApiClient from in-cluster config, falling back to kubeconfig."""
    try:
        # load_incluster_config() is synchronous in kubernetes-asyncio
        k8s_config.load_incluster_config()
        _log.info("k8s client configured from in-cluster service account")
    except k8s_config.ConfigException:
        await k8s_config.load_kube_config(
            config_file=config.kubeconfig or None,
            context=config.context or None,
        )
        _log.info("k8s client configured from kubeconfig", kubeconfig=config.kubeconfig, context=config.context)
    return k8s_client.ApiClient()


class KubeResourceAPI:
    """ResourceAPI backed by the Kubernetes API server.

    Objects are read through the cluster-scoped custom objects endpoint,
    which covers composite and managed resources. Core-group types have no
    such endpoint and are reported as fetch errors.
    """

    def __init__(self, api_client: k8s_client.ApiClient) -> None:
        self._api_client = api_client
        self._custom = k8s_client.CustomObjectsApi(api_client)
        self._core = k8s_client.CoreV1Api(api_client)

    async def get(self, type_ref: TypeRef, name: str) -> dict[str, Any]:
        if not type_ref.group:
            raise FetchError(f'{type_ref.plural} "{name}": core group resources are not supported')
        try:
            obj = await self._custom.get_cluster_custom_object(
                type_ref.group,
                type_ref.version,
                type_ref.plural,
                name,
            )
        except ApiException as exc:
            raise fetch_error_from(exc) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(str(exc) or type(exc).__name__) from exc
        if not isinstance(obj, dict):
            raise FetchError(f'{type_ref.plural} "{name}": unexpected response type {type(obj).__name__}')
        return obj

    async def list_events(self, kind: str, name: str, namespace: str = "") -> list[dict[str, Any]]:
        selector = event_field_selector(kind, name)
        try:
            if namespace:
                result = await self._core.list_namespaced_event(namespace, field_selector=selector)
            else:
                result = await self._core.list_event_for_all_namespaces(field_selector=selector)
        except ApiException as exc:
            raise fetch_error_from(exc) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(str(exc) or type(exc).__name__) from exc
        data = self._api_client.sanitize_for_serialization(result)
        items = data.get("items") if isinstance(data, dict) else None
        return items if isinstance(items, list) else []

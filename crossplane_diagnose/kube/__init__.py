"""Kubernetes access for crossplane-diagnose.

Submodules:
    client    -- ResourceAPI protocol and its kubernetes-asyncio implementation.
    discovery -- Composite type discovery, instance listing and filtering.
"""

from crossplane_diagnose.kube.client import KubeResourceAPI, ResourceAPI, load_api_client

__all__ = ["KubeResourceAPI", "ResourceAPI", "load_api_client"]

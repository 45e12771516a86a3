"""Event correlation: diagnostic events tied to one resource identity."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from crossplane_diagnose.kube.client import ResourceAPI


def event_field_selector(kind: str, name: str) -> str:
    """Server-side selector matching ``involvedObject`` kind and name exactly."""
    return f"involvedObject.kind={kind},involvedObject.name={name}"


def format_event(event: dict[str, Any]) -> str:
    """Render an event as ``[type] reason: message``."""

    def _get(key: str) -> str:
        value = event.get(key)
        return value if isinstance(value, str) else ""

    return f"[{_get('type')}] {_get('reason')}: {_get('message')}"


class EventCorrelator:
    """Fetches and formats the events recorded against a resource.

    Errors from the resource API propagate; deciding that a failed lookup
    means "no events" is left to the caller.
    """

    def __init__(self, api: ResourceAPI) -> None:
        self._api = api

    async def fetch(self, kind: str, name: str, namespace: str = "") -> list[str]:
        """Return formatted event lines in API order.

        Scoped to *namespace* when it is non-empty, otherwise cluster-wide.
        """
        items = await self._api.list_events(kind, name, namespace)
        return [format_event(item) for item in items if isinstance(item, dict)]

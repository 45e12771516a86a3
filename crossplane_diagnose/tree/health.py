"""Readiness classification from a resource's status conditions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from crossplane_diagnose.models.tree import UNKNOWN, HealthStatus

CONDITION_SYNCED = "Synced"
CONDITION_READY = "Ready"
CONDITION_TRUE = "True"


@dataclass(frozen=True)
class HealthAssessment:
    """Result of classifying one condition list."""

    synced: str = UNKNOWN
    ready: str = UNKNOWN
    conditions: tuple[str, ...] = ()

    @property
    def status(self) -> HealthStatus:
        return overall_status(self.ready, self.synced)


def _str_field(record: dict[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else ""


def format_condition(record: dict[str, Any]) -> str:
    """Render a condition as ``type=status (reason): message``."""
    return "{}={} ({}): {}".format(
        _str_field(record, "type"),
        _str_field(record, "status"),
        _str_field(record, "reason"),
        _str_field(record, "message"),
    )


def classify_conditions(conditions: Iterable[Any] | None) -> HealthAssessment:
    """Derive Synced/Ready state and formatted lines from *conditions*.

    The last ``Synced`` and the last ``Ready`` record win. Records of other
    types are formatted but do not affect state. Entries that are not
    mappings are skipped; missing or non-string fields read as ``""``.
    """
    synced = UNKNOWN
    ready = UNKNOWN
    lines: list[str] = []
    for record in conditions or ():
        if not isinstance(record, dict):
            continue
        cond_type = _str_field(record, "type")
        cond_status = _str_field(record, "status")
        if cond_type == CONDITION_SYNCED:
            synced = cond_status
        elif cond_type == CONDITION_READY:
            ready = cond_status
        lines.append(format_condition(record))
    return HealthAssessment(synced=synced, ready=ready, conditions=tuple(lines))


def overall_status(ready: str, synced: str) -> HealthStatus:
    """Return Available iff both Ready and Synced are exactly ``"True"``."""
    if ready == CONDITION_TRUE and synced == CONDITION_TRUE:
        return HealthStatus.AVAILABLE
    return HealthStatus.UNHEALTHY

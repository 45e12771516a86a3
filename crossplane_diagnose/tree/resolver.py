"""Reference resolution: (apiVersion, kind) -> queryable resource type.

The plural resource name is derived with a fixed heuristic, ``kind.lower() + "s"``.
Irregular plurals (``Policy`` -> ``policys``) resolve incorrectly and surface as
fetch errors on the affected node; no discovery lookup is attempted.
"""

from __future__ import annotations

from crossplane_diagnose.errors import InvalidAPIVersionError
from crossplane_diagnose.models.tree import TypeRef


def parse_group_version(api_version: str) -> tuple[str, str]:
    """Split ``group/version`` (or a bare core-group ``version``) into its parts.

    Raises:
        InvalidAPIVersionError: if the string holds more than one ``/``.
    """
    if not api_version:
        return "", ""
    if api_version.count("/") > 1:
        raise InvalidAPIVersionError(api_version)
    if "/" not in api_version:
        return "", api_version
    group, version = api_version.split("/", 1)
    return group, version


def naive_plural(kind: str) -> str:
    return kind.lower() + "s"


def resolve_reference(api_version: str, kind: str) -> TypeRef:
    """Turn an apiVersion/kind pair into a TypeRef. Pure, no I/O."""
    group, version = parse_group_version(api_version)
    return TypeRef(group=group, version=version, plural=naive_plural(kind))

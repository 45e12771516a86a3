"""Report rendering: JSON, CSV and aligned-table output of a forest."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterator, Sequence
from typing import Any, TextIO

import structlog
from rich.console import Console
from rich.table import Table
from rich.text import Text

from crossplane_diagnose.models.tree import CompositeTree, ResourceNode

_log = structlog.get_logger(component="report.render")

_TABLE_WIDTH = 200

COLUMNS = (
    "Root Name",
    "Parent Kind",
    "Parent Name",
    "Kind",
    "Name",
    "Status",
    "Synced",
    "Ready",
    "Details",
)


def node_to_dict(node: ResourceNode) -> dict[str, Any]:
    """Serialise *node* to a plain dict, omitting empty lists."""
    payload: dict[str, Any] = {
        "kind": node.kind,
        "name": node.name,
        "synced": node.synced,
        "ready": node.ready,
        "status": str(node.status),
    }
    if node.events:
        payload["events"] = list(node.events)
    if node.conditions:
        payload["conditions"] = list(node.conditions)
    if node.children:
        payload["children"] = [node_to_dict(child) for child in node.children]
    return payload


def composite_to_dict(entry: CompositeTree) -> dict[str, Any]:
    payload: dict[str, Any] = {"name": entry.name, "kind": entry.kind}
    if entry.error:
        payload["error"] = entry.error
    if entry.tree is not None:
        payload["tree"] = node_to_dict(entry.tree)
    return payload


def iter_rows(forest: Sequence[CompositeTree]) -> Iterator[list[str]]:
    """Yield one row per node, depth-first; a tree-less entry yields one Error row."""
    for entry in forest:
        if entry.tree is None:
            yield [entry.name, "", "", entry.kind, entry.name, "Error", "", "", entry.error]
            continue
        yield from _node_rows(entry.tree, entry.name, "", "")


def _node_rows(node: ResourceNode, root_name: str, parent_kind: str, parent_name: str) -> Iterator[list[str]]:
    details = "; ".join([*node.conditions, *node.events])
    yield [
        root_name,
        parent_kind,
        parent_name,
        node.kind,
        node.name,
        str(node.status),
        node.synced,
        node.ready,
        details,
    ]
    for child in node.children:
        yield from _node_rows(child, root_name, node.kind, node.name)


def render_json(forest: Sequence[CompositeTree], stream: TextIO) -> None:
    json.dump([composite_to_dict(entry) for entry in forest], stream, indent=2, ensure_ascii=False)
    stream.write("\n")


def render_csv(forest: Sequence[CompositeTree], stream: TextIO) -> None:
    writer = csv.writer(stream)
    writer.writerow(COLUMNS)
    writer.writerows(iter_rows(forest))


def render_table(forest: Sequence[CompositeTree], stream: TextIO) -> None:
    table = Table(box=None, pad_edge=False, show_edge=False, header_style="bold")
    for column in COLUMNS:
        table.add_column(column.upper(), overflow="fold")
    for row in iter_rows(forest):
        # cells are cluster text, not markup
        table.add_row(*(Text(cell) for cell in row))
    console = Console(file=stream, width=_TABLE_WIDTH, highlight=False)
    console.print(table)


_RENDERERS = {
    "json": render_json,
    "csv": render_csv,
    "table": render_table,
}


def render(fmt: str, forest: Sequence[CompositeTree], stream: TextIO) -> None:
    """Write *forest* to *stream* in *fmt*; unknown formats fall back to JSON."""
    renderer = _RENDERERS.get(fmt.lower())
    if renderer is None:
        _log.warning("unknown output format, defaulting to json", format=fmt)
        renderer = render_json
    renderer(forest, stream)

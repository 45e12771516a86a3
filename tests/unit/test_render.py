"""Tests for JSON, CSV and table report rendering."""

from __future__ import annotations

import csv
import io
import json

from crossplane_diagnose.models.tree import CompositeTree, HealthStatus, ResourceNode
from crossplane_diagnose.report.render import COLUMNS, iter_rows, render, render_csv, render_json, render_table

_CHILD = ResourceNode(
    kind="RDSInstance",
    name="my-db-abc",
    synced="True",
    ready="False",
    status=HealthStatus.UNHEALTHY,
    conditions=("Ready=False (CreateFailed): AWS error",),
    events=("[Warning] CannotCreate: denied",),
)
_ROOT = ResourceNode(
    kind="XDatabase",
    name="my-db",
    synced="True",
    ready="True",
    status=HealthStatus.AVAILABLE,
    children=(_CHILD,),
)
_FOREST = [
    CompositeTree(name="my-db", kind="XDatabase", tree=_ROOT),
    CompositeTree(name="broken", kind="XDatabase", error="failed to get XR broken: forbidden"),
]


class TestJSON:
    def test_structure(self) -> None:
        buf = io.StringIO()
        render_json(_FOREST, buf)
        data = json.loads(buf.getvalue())

        assert data[0]["name"] == "my-db"
        assert "error" not in data[0]
        tree = data[0]["tree"]
        assert tree["status"] == "Available"
        assert "conditions" not in tree
        assert tree["children"][0]["events"] == ["[Warning] CannotCreate: denied"]
        assert "children" not in tree["children"][0]
        assert data[1] == {"name": "broken", "kind": "XDatabase", "error": "failed to get XR broken: forbidden"}

    def test_empty_forest(self) -> None:
        buf = io.StringIO()
        render_json([], buf)
        assert json.loads(buf.getvalue()) == []


class TestRows:
    def test_rows_depth_first_with_parent(self) -> None:
        rows = list(iter_rows(_FOREST))
        assert rows[0][:6] == ["my-db", "", "", "XDatabase", "my-db", "Available"]
        assert rows[1][:6] == ["my-db", "XDatabase", "my-db", "RDSInstance", "my-db-abc", "Unhealthy"]
        assert rows[1][8] == "Ready=False (CreateFailed): AWS error; [Warning] CannotCreate: denied"
        assert rows[2] == ["broken", "", "", "XDatabase", "broken", "Error", "", "", "failed to get XR broken: forbidden"]

    def test_csv(self) -> None:
        buf = io.StringIO()
        render_csv(_FOREST, buf)
        rows = list(csv.reader(io.StringIO(buf.getvalue())))
        assert tuple(rows[0]) == COLUMNS
        assert len(rows) == 4

    def test_table(self) -> None:
        buf = io.StringIO()
        render_table(_FOREST, buf)
        output = buf.getvalue()
        assert "ROOT NAME" in output
        assert "my-db-abc" in output
        assert "failed to get XR broken: forbidden" in output


_BRACKETED = ResourceNode(
    kind="ResourceGroup",
    name="rg-main",
    synced="False",
    ready="False",
    status=HealthStatus.UNHEALTHY,
    conditions=("Ready=False (ReconcileError): cannot get [/subscriptions/abc] resource",),
    events=("[Warning] CannotObserve: field [bold] is invalid",),
)
_BRACKETED_FOREST = [CompositeTree(name="rg-main", kind="ResourceGroup", tree=_BRACKETED)]
_BRACKETED_DETAILS = (
    "Ready=False (ReconcileError): cannot get [/subscriptions/abc] resource; "
    "[Warning] CannotObserve: field [bold] is invalid"
)


class TestBracketedText:
    def test_table_keeps_brackets_literal(self) -> None:
        buf = io.StringIO()
        render_table(_BRACKETED_FOREST, buf)
        output = buf.getvalue()
        assert "[/subscriptions/abc]" in output
        assert "[bold]" in output
        assert "[Warning]" in output

    def test_table_error_row_keeps_brackets_literal(self) -> None:
        buf = io.StringIO()
        render_table([CompositeTree(name="x", kind="XNet", error="failed to get XR x: [/denied]")], buf)
        assert "[/denied]" in buf.getvalue()

    def test_csv_details_match_node(self) -> None:
        buf = io.StringIO()
        render_csv(_BRACKETED_FOREST, buf)
        rows = list(csv.reader(io.StringIO(buf.getvalue())))
        assert rows[1][8] == _BRACKETED_DETAILS

    def test_json_conditions_match_node(self) -> None:
        buf = io.StringIO()
        render_json(_BRACKETED_FOREST, buf)
        tree = json.loads(buf.getvalue())[0]["tree"]
        assert tree["conditions"] == list(_BRACKETED.conditions)
        assert tree["events"] == list(_BRACKETED.events)


def test_unknown_format_falls_back_to_json() -> None:
    buf = io.StringIO()
    render("yaml", _FOREST, buf)
    assert json.loads(buf.getvalue())[0]["kind"] == "XDatabase"


def test_format_is_case_insensitive() -> None:
    buf = io.StringIO()
    render("CSV", _FOREST, buf)
    assert buf.getvalue().startswith("Root Name,")

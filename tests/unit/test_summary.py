"""Tests for the failure summarizer and its text contract."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from crossplane_diagnose.models.tree import CompositeTree, HealthStatus, ResourceNode
from crossplane_diagnose.report.summary import (
    ALL_HEALTHY,
    SUMMARY_HEADER,
    collect_unhealthy,
    pick_reason,
    summarize_failures,
)


def _ok(kind: str, name: str, *children: ResourceNode) -> ResourceNode:
    return ResourceNode(
        kind=kind,
        name=name,
        synced="True",
        ready="True",
        status=HealthStatus.AVAILABLE,
        conditions=("Ready=True (): ", "Synced=True (): "),
        children=children,
    )


class TestPickReason:
    def test_prefers_false_condition(self) -> None:
        node = ResourceNode(
            kind="Instance",
            name="db",
            conditions=("Synced=True (): ", "Ready=False (CreateFailed): AWS error"),
        )
        assert pick_reason(node) == "Ready=False (CreateFailed): AWS error"

    def test_unknown_condition_matches(self) -> None:
        node = ResourceNode(kind="Instance", name="db", conditions=("Synced=True (): ", "Ready=Unknown (): "))
        assert pick_reason(node) == "Ready=Unknown (): "

    def test_falls_back_to_first_condition(self) -> None:
        node = ResourceNode(kind="Instance", name="db", conditions=("Synced=True (): ", "Healthy=True (): "))
        assert pick_reason(node) == "Synced=True (): "

    def test_falls_back_to_first_event(self) -> None:
        node = ResourceNode(kind="Instance", name="db", events=("[Warning] Failed: boom", "[Normal] Other: x"))
        assert pick_reason(node) == "[Warning] Failed: boom"

    def test_unknown_reason(self) -> None:
        assert pick_reason(ResourceNode(kind="Instance", name="db", status="Error fetching: x")) == "Unknown reason"


class TestCollectUnhealthy:
    def test_depth_first_order(self) -> None:
        bad_leaf = ResourceNode(kind="Leaf", name="l")
        bad_mid = ResourceNode(kind="Mid", name="m", children=(bad_leaf,))
        root = _ok("Top", "t", bad_mid, ResourceNode(kind="Other", name="o"))
        assert [n.name for n in collect_unhealthy(root)] == ["m", "l", "o"]

    def test_synced_status_is_not_reported(self) -> None:
        assert collect_unhealthy(ResourceNode(kind="Legacy", name="x", status="Synced")) == []


class TestSummarizeFailures:
    def test_database_scenario(self) -> None:
        child = ResourceNode(
            kind="RDSInstance",
            name="my-db-abc",
            synced="True",
            ready="False",
            status=HealthStatus.UNHEALTHY,
            conditions=("Ready=False (CreateFailed): AWS error", "Synced=True (): "),
        )
        forest = [CompositeTree(name="my-db", kind="XDatabase", tree=_ok("XDatabase", "my-db", child))]

        text, has_failures = summarize_failures(forest)

        assert has_failures is True
        assert text == (
            "\n--- Summary ---\n"
            "❌ Top Parent: XDatabase/my-db\n"
            "  - Child RDSInstance/my-db-abc: Unhealthy\n"
            "    Reason: Ready=False (CreateFailed): AWS error\n"
            "\n"
        )

    def test_root_itself_listed_when_unhealthy(self) -> None:
        root = ResourceNode(kind="XNet", name="n", conditions=("Synced=False (ReconcileError): bad",))
        text, has_failures = summarize_failures([CompositeTree(name="n", kind="XNet", tree=root)])
        assert has_failures
        assert "  - Child XNet/n: Unhealthy\n    Reason: Synced=False (ReconcileError): bad\n" in text

    def test_error_and_cycle_nodes_reported(self) -> None:
        root = _ok(
            "XNet",
            "n",
            ResourceNode(kind="Subnet", name="s", status="Error fetching: not found"),
            ResourceNode(kind="XNet", name="n", status=HealthStatus.CYCLE_DETECTED),
        )
        text, _ = summarize_failures([CompositeTree(name="n", kind="XNet", tree=root)])
        assert "  - Child Subnet/s: Error fetching: not found\n    Reason: Unknown reason\n" in text
        assert "  - Child XNet/n: Cycle detected\n" in text

    def test_only_failing_groups_emitted(self) -> None:
        healthy = CompositeTree(name="good", kind="XApp", tree=_ok("XApp", "good"))
        failing = CompositeTree(name="bad", kind="XApp", tree=ResourceNode(kind="XApp", name="bad"))
        text, has_failures = summarize_failures([healthy, failing])
        assert has_failures
        assert "XApp/good" not in text
        assert "❌ Top Parent: XApp/bad\n" in text
        assert ALL_HEALTHY not in text

    def test_tree_less_entries_ignored(self) -> None:
        errored = CompositeTree(name="x", kind="XApp", error="failed to get XR x: forbidden")
        text, has_failures = summarize_failures([errored])
        assert has_failures is False
        assert text == SUMMARY_HEADER + ALL_HEALTHY

    def test_empty_forest(self) -> None:
        assert summarize_failures([]) == (SUMMARY_HEADER + ALL_HEALTHY, False)


_healthy_trees = st.recursive(
    st.builds(_ok, st.sampled_from(["XA", "B"]), st.text(min_size=1, max_size=4)),
    lambda children: st.builds(
        lambda kind, name, ch: _ok(kind, name, *ch),
        st.sampled_from(["XA", "B"]),
        st.text(min_size=1, max_size=4),
        st.lists(children, max_size=3),
    ),
    max_leaves=6,
)


@given(st.lists(_healthy_trees, max_size=4))
def test_all_available_forest_is_healthy(trees: list[ResourceNode]) -> None:
    forest = [CompositeTree(name=t.name, kind=t.kind, tree=t) for t in trees]
    text, has_failures = summarize_failures(forest)
    assert has_failures is False
    assert text == "\n--- Summary ---\n✅ All resources are healthy!\n"

"""Reporting for crossplane-diagnose.

Submodules:
    summary -- Failure digest with a best-effort reason per unhealthy node.
    render  -- JSON, CSV and table output of the final forest.
"""

from crossplane_diagnose.report.render import render
from crossplane_diagnose.report.summary import summarize_failures

__all__ = ["render", "summarize_failures"]

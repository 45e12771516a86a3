"""Entry point for `python -m crossplane_diagnose`.

Usage:
    python -m crossplane_diagnose -o table
    uv run python -m crossplane_diagnose --ai-analysis
"""

from __future__ import annotations

from crossplane_diagnose.cli import cli

cli()

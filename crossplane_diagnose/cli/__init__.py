"""crossplane-diagnose command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``crossplane-diagnose`` script).
"""

from crossplane_diagnose.cli.main import cli

__all__ = ["cli"]

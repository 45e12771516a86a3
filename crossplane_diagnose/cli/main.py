"""Click entry point for the ``crossplane-diagnose`` command.

Environment variables (``XPDIAG_*``) supply defaults; flags given on the
command line override them.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import replace

import click

from crossplane_diagnose import __version__
from crossplane_diagnose.app import main
from crossplane_diagnose.config import AI_PROVIDERS, LOG_FORMATS, load_config
from crossplane_diagnose.models.config import DiagnoseConfig


def apply_overrides(
    config: DiagnoseConfig,
    *,
    output: str | None = None,
    ai_analysis: bool | None = None,
    ai_provider: str | None = None,
    resource: str | None = None,
    kind: str | None = None,
    kubeconfig: str | None = None,
    context: str | None = None,
    timeout: int | None = None,
    log_level: str | None = None,
    log_format: str | None = None,
) -> DiagnoseConfig:
    """Return a copy of *config* with every non-None flag applied."""
    kube = config.kube
    if kubeconfig is not None:
        kube = replace(kube, kubeconfig=kubeconfig)
    if context is not None:
        kube = replace(kube, context=context)

    ai = config.ai
    if ai_analysis is not None:
        ai = replace(ai, enabled=ai_analysis)
    if ai_provider is not None:
        ai = replace(ai, provider=ai_provider.lower())

    filters = config.filters
    if resource is not None:
        filters = replace(filters, resource_name=resource)
    if kind is not None:
        filters = replace(filters, kind=kind)

    output_cfg = config.output if output is None else replace(config.output, format=output.lower())

    log = config.log
    if log_level is not None:
        log = replace(log, level=log_level.lower())
    if log_format is not None:
        log = replace(log, format=log_format.lower())

    return replace(
        config,
        kube=kube,
        ai=ai,
        filters=filters,
        output=output_cfg,
        log=log,
        timeout_seconds=config.timeout_seconds if timeout is None else timeout,
    )


@click.command(name="crossplane-diagnose")
@click.option("-o", "--output", default=None, help="Output format (json, csv, table).  [default: json]")
@click.option(
    "--ai-analysis/--no-ai-analysis",
    default=None,
    help="Send the failure summary to an AI provider for analysis.",
)
@click.option(
    "--ai-provider",
    type=click.Choice(AI_PROVIDERS, case_sensitive=False),
    default=None,
    help="AI provider to use for analysis.  [default: claude]",
)
@click.option("-r", "--resource", default=None, help="Name of the composite resource to diagnose.")
@click.option("-k", "--kind", default=None, help="Kind of the composite resources to diagnose (case-insensitive).")
@click.option("--kubeconfig", default=None, type=click.Path(dir_okay=False), help="Path to the kubeconfig file.")
@click.option("--context", default=None, help="Kubeconfig context to use.")
@click.option("--timeout", default=None, type=click.IntRange(min=0), help="Abort the whole run after N seconds.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Log verbosity.  [default: info]",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    default=None,
    help="Log rendering on stderr.  [default: console]",
)
@click.version_option(__version__, prog_name="crossplane-diagnose")
def cli(**flags: object) -> None:
    """Diagnose Crossplane composite resources.

    Builds a resource tree for every composite resource in the cluster,
    prints a report to stdout and a failure summary to stderr.
    """
    try:
        config = load_config()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    config = apply_overrides(config, **flags)  # type: ignore[arg-type]
    sys.exit(asyncio.run(main(config)))

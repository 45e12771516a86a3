"""Application bootstrap for crossplane-diagnose.

Wires the components for one diagnosis run, in order:
config → logging (main) → K8s client → discovery → filter → tree builder
      → forest pruning → report → summary → AI analysis (optional)

Mandatory steps (client, discovery) raise _ComponentError, which ``main()``
turns into exit status 1. Everything after discovery degrades instead of
failing: a broken composite becomes an error entry in the report and a
failed AI call is logged.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TextIO

from crossplane_diagnose.errors import AnalysisError
from crossplane_diagnose.kube.client import KubeResourceAPI, ResourceAPI, load_api_client
from crossplane_diagnose.kube.discovery import discover_composite_types, filter_composites, list_composites
from crossplane_diagnose.llm.analyzer import build_analyzer, run_analysis
from crossplane_diagnose.models.config import DiagnoseConfig
from crossplane_diagnose.models.tree import CompositeItem, CompositeTree
from crossplane_diagnose.observability.logging import get_logger, setup_logging
from crossplane_diagnose.report.render import render
from crossplane_diagnose.report.summary import summarize_failures
from crossplane_diagnose.tree.builder import TreeBuilder
from crossplane_diagnose.tree.forest import prune_nested_roots

if TYPE_CHECKING:
    import structlog


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


@dataclass(frozen=True)
class DiagnosisResult:
    """Outcome of one run: the pruned forest and its failure digest."""

    forest: list[CompositeTree]
    summary: str
    has_failures: bool


class DiagnoseApp:
    """Owns the components of a single diagnosis run.

    Args:
        config: Fully resolved configuration (environment plus CLI flags).
        out:    Stream receiving the report and any AI analysis.
        err:    Stream receiving the failure summary.
    """

    def __init__(self, config: DiagnoseConfig, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self.config = config
        self._out = out if out is not None else sys.stdout
        self._err = err if err is not None else sys.stderr
        self._api_client: Any = None
        self._log: structlog.stdlib.BoundLogger = get_logger("app")

    async def run(self) -> DiagnosisResult:
        """Discover composites in the cluster and diagnose them."""
        self._log.info("starting crossplane diagnosis", version=_version())

        try:
            await self._start_k8s_client()
            items = await self._discover()
            api = KubeResourceAPI(self._api_client)
            return await self.diagnose(api, items)
        finally:
            await self._stop_k8s_client()

    async def diagnose(self, api: ResourceAPI, items: Sequence[CompositeItem]) -> DiagnosisResult:
        """Build, prune, report and summarize the trees for *items*."""
        self._log.info("building trees", composites=len(items))
        builder = TreeBuilder(api)
        forest = prune_nested_roots(await builder.build_forest(items))

        render(self.config.output.format, forest, self._out)
        self._out.flush()

        summary, has_failures = summarize_failures(forest)
        self._err.write(summary)
        self._err.flush()

        if has_failures and self.config.ai.enabled:
            await self._run_ai_analysis(summary)

        return DiagnosisResult(forest=forest, summary=summary, has_failures=has_failures)

    # ------------------------------------------------------------------
    # Component helpers
    # ------------------------------------------------------------------

    async def _start_k8s_client(self) -> None:
        self._log.debug("starting k8s client")
        try:
            self._api_client = await load_api_client(self.config.kube)
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _discover(self) -> list[CompositeItem]:
        self._log.info("discovering composite resources")
        try:
            types = await discover_composite_types(self._api_client)
            items = await list_composites(self._api_client, types)
        except Exception as exc:
            raise _ComponentError("discovery", exc) from exc
        filters = self.config.filters
        return filter_composites(items, name=filters.resource_name, kind=filters.kind)

    async def _run_ai_analysis(self, summary: str) -> None:
        try:
            analyzer = build_analyzer(self.config.ai)
        except AnalysisError as exc:
            self._log.error("ai analysis unavailable", error=str(exc))
            return
        await run_analysis(analyzer, summary, self._out)

    async def _stop_k8s_client(self) -> None:
        if self._api_client is None:
            return
        try:
            await self._api_client.close()
        except Exception as exc:
            self._log.debug("k8s client close raised (non-fatal)", error=str(exc))
        self._api_client = None


def _version() -> str:
    from crossplane_diagnose import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: DiagnoseConfig) -> int:
    """Run one diagnosis and return the process exit status."""
    setup_logging(config.log.level, config.log.format)
    app = DiagnoseApp(config)
    try:
        if config.timeout_seconds > 0:
            await asyncio.wait_for(app.run(), timeout=config.timeout_seconds)
        else:
            await app.run()
    except _ComponentError as exc:
        get_logger("app").critical("fatal startup error", component=exc.component, error=str(exc.cause))
        return 1
    except TimeoutError:
        get_logger("app").error("diagnosis timed out", timeout=config.timeout_seconds)
        return 1
    return 0

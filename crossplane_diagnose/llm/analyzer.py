"""AI analysis providers.

Each provider takes the failure summary, sends it with the analysis prompt to
an external reasoning service and writes the answer to an output stream.

    ClaudeCLIAnalyzer -- runs ``claude -p <prompt>`` and streams its stdout.
    OllamaAnalyzer    -- POSTs to an Ollama server's /api/generate endpoint.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod
from typing import TextIO

import httpx
import structlog

from crossplane_diagnose.errors import AnalysisError
from crossplane_diagnose.llm.prompts import build_analysis_prompt
from crossplane_diagnose.models.config import AIConfig, OllamaConfig

_log = structlog.get_logger(component="llm.analyzer")


class Analyzer(ABC):
    """Abstract base for AI analysis providers."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Identifier used in logs."""

    @abstractmethod
    async def analyze(self, summary: str, out: TextIO) -> None:
        """Analyze *summary* and write the result to *out*.

        Raises:
            AnalysisError: if the provider cannot produce an answer.
        """


class ClaudeCLIAnalyzer(Analyzer):
    """Runs the ``claude`` CLI in non-interactive print mode.

    Args:
        timeout:    Seconds to wait for the process before killing it.
        executable: CLI binary to run. Defaults to ``claude`` on PATH.
    """

    def __init__(self, timeout: float = 120.0, executable: str = "claude") -> None:
        self._timeout = timeout
        self._executable = executable

    @property
    def provider_name(self) -> str:
        return "claude"

    async def analyze(self, summary: str, out: TextIO) -> None:
        prompt = build_analysis_prompt(summary)
        try:
            proc = await asyncio.create_subprocess_exec(
                self._executable,
                "-p",
                prompt,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise AnalysisError(f"{self._executable!r} executable not found on PATH") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise AnalysisError(f"{self._executable} timed out after {self._timeout}s") from exc

        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()[:500]
            raise AnalysisError(f"{self._executable} exited with status {proc.returncode}: {detail}")
        out.write(stdout.decode(errors="replace"))
        out.flush()


class OllamaAnalyzer(Analyzer):
    """Sends the prompt to an Ollama server and prints the generated text."""

    def __init__(self, config: OllamaConfig, timeout: float = 120.0) -> None:
        self._config = config
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return "ollama"

    async def analyze(self, summary: str, out: TextIO) -> None:
        payload = {
            "model": self._config.model,
            "prompt": build_analysis_prompt(summary),
            "stream": False,
            "options": {"temperature": self._config.temperature},
        }
        url = f"{self._config.endpoint.rstrip('/')}/api/generate"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(url, json=payload)
        except httpx.TimeoutException as exc:
            raise AnalysisError(f"ollama request timed out after {self._timeout}s") from exc
        except httpx.HTTPError as exc:
            raise AnalysisError(f"ollama request failed: {exc}") from exc

        if not response.is_success:
            raise AnalysisError(f"ollama returned HTTP {response.status_code}: {response.text[:200]}")
        try:
            body = response.json()
        except ValueError as exc:
            raise AnalysisError("ollama returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise AnalysisError(f"ollama returned unexpected body type {type(body).__name__}")
        text = body.get("response", "")
        if not isinstance(text, str):
            raise AnalysisError(f"ollama response field is {type(text).__name__}, expected a string")
        out.write(text)
        if not text.endswith("\n"):
            out.write("\n")
        out.flush()


def build_analyzer(config: AIConfig) -> Analyzer:
    """Return the analyzer for ``config.provider``.

    Raises:
        AnalysisError: for an unknown provider.
    """
    provider = config.provider.lower()
    if provider == "claude":
        return ClaudeCLIAnalyzer(timeout=config.timeout_seconds)
    if provider == "ollama":
        return OllamaAnalyzer(config.ollama, timeout=config.timeout_seconds)
    raise AnalysisError(f"Unknown AI provider '{config.provider}'. Supported providers: claude, ollama")


async def run_analysis(analyzer: Analyzer, summary: str, out: TextIO = sys.stdout) -> bool:
    """Run *analyzer* on *summary*; failures are logged and reported as False."""
    _log.info("sending failure summary for analysis", provider=analyzer.provider_name)
    try:
        await analyzer.analyze(summary, out)
    except AnalysisError as exc:
        _log.error("ai analysis failed", provider=analyzer.provider_name, error=str(exc))
        return False
    return True

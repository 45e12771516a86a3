"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class KubeConfig:
    """Kubernetes API client configuration."""

    kubeconfig: str = ""
    context: str = ""


@dataclass
class OllamaConfig:
    """Ollama LLM configuration."""

    endpoint: str = "http://localhost:11434"
    model: str = "qwen2.5:7b"
    temperature: float = 0.1


@dataclass
class AIConfig:
    """AI failure analysis configuration."""

    enabled: bool = False
    provider: str = "claude"
    timeout_seconds: int = 120
    ollama: OllamaConfig = field(default_factory=OllamaConfig)


@dataclass
class OutputConfig:
    """Report output configuration."""

    format: str = "json"


@dataclass
class FilterConfig:
    """Composite selection filters. Empty strings match everything."""

    resource_name: str = ""
    kind: str = ""


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "console"


@dataclass
class DiagnoseConfig:
    """Top-level crossplane-diagnose configuration."""

    kube: KubeConfig = field(default_factory=KubeConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    log: LogConfig = field(default_factory=LogConfig)
    timeout_seconds: int = 0

"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from crossplane_diagnose.models.config import (
    AIConfig,
    DiagnoseConfig,
    FilterConfig,
    KubeConfig,
    LogConfig,
    OllamaConfig,
    OutputConfig,
)

OUTPUT_FORMATS = ("json", "csv", "table")
AI_PROVIDERS = ("claude", "ollama")
LOG_FORMATS = ("json", "console")


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"XPDIAG_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError:
        raise ValueError(f"Invalid XPDIAG_{key}: {raw!r} is not an integer") from None
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float) -> float:
    raw = _env(key, str(default))
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid XPDIAG_{key}: {raw!r} is not a number") from None


def _validate_choice(name: str, value: str, valid: tuple[str, ...]) -> str:
    if value.lower() not in valid:
        raise ValueError(f"Invalid {name}: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_level(value: str) -> str:
    return _validate_choice("log level", value, ("debug", "info", "warning", "error"))


def _default_kubeconfig() -> str:
    kubeconfig = os.environ.get("KUBECONFIG", "")
    if kubeconfig:
        return kubeconfig
    home = os.path.expanduser("~")
    if home and home != "~":
        return os.path.join(home, ".kube", "config")
    return ""


def load_config() -> DiagnoseConfig:
    """Load configuration from XPDIAG_* environment variables."""
    return DiagnoseConfig(
        kube=KubeConfig(
            kubeconfig=_env("KUBECONFIG", "") or _default_kubeconfig(),
            context=_env("KUBE_CONTEXT", ""),
        ),
        ai=AIConfig(
            enabled=_env_bool("AI_ENABLED", False),
            provider=_validate_choice("AI provider", _env("AI_PROVIDER", "claude"), AI_PROVIDERS),
            timeout_seconds=_env_int("AI_TIMEOUT", 120, min_val=10, max_val=600),
            ollama=OllamaConfig(
                endpoint=_env("OLLAMA_ENDPOINT", "http://localhost:11434"),
                model=_env("OLLAMA_MODEL", "qwen2.5:7b"),
                temperature=_env_float("OLLAMA_TEMPERATURE", 0.1),
            ),
        ),
        output=OutputConfig(
            format=_env("OUTPUT", "json").lower(),
        ),
        filters=FilterConfig(
            resource_name=_env("RESOURCE", ""),
            kind=_env("KIND", ""),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_choice("log format", _env("LOG_FORMAT", "console"), LOG_FORMATS),
        ),
        timeout_seconds=_env_int("TIMEOUT", 0, min_val=0),
    )

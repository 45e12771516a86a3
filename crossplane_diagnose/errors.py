"""Exception hierarchy for crossplane-diagnose.

Each class maps to one unit of work that a failure can take down:

    InvalidAPIVersionError -- a single declared reference is dropped.
    FetchError             -- one API round trip failed (child node or event set).
    RootFetchError         -- a whole composite tree could not be built.
    AnalysisError          -- the optional AI provider failed.
"""

from __future__ import annotations


class DiagnoseError(Exception):
    """Base class for every error raised by crossplane-diagnose."""


class InvalidAPIVersionError(DiagnoseError, ValueError):
    """Raised when an apiVersion string cannot be split into group/version."""

    def __init__(self, api_version: str) -> None:
        super().__init__(f"unexpected GroupVersion string: {api_version}")
        self.api_version = api_version


class FetchError(DiagnoseError):
    """Raised when a request to the resource API fails.

    Args:
        message: Human-readable cause, usually the API server's own message.
        status:  HTTP status code when one was received, else None.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class RootFetchError(DiagnoseError):
    """Raised when the root object of a composite tree cannot be fetched."""

    def __init__(self, name: str, cause: Exception) -> None:
        super().__init__(f"failed to get XR {name}: {cause}")
        self.name = name
        self.cause = cause


class AnalysisError(DiagnoseError):
    """Raised when an AI analysis provider cannot produce a result."""

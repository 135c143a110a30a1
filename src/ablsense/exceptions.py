"""
Package-level exception hierarchy for ablsense.

All exceptions inherit from AblSenseError, enabling:
- Catching all ablsense errors with a single except clause
- Context fields for debugging (source, config_key)
- Structured serialization via to_dict() for JSON error output

Hierarchy:
    AblSenseError
    ├── SourceReadError      – An input blob could not be read or decoded
    └── ConfigurationError   – Invalid configuration value

Missing schemas, unknown tables and statements without filters are not
exceptions: the advisor reports them as AdvisorWarning results.
"""

from __future__ import annotations

from typing import Any


class AblSenseError(Exception):
    """
    Base exception for all ablsense errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error responses."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


# ── Input Errors ─────────────────────────────────────────────────────────


class SourceReadError(AblSenseError):
    """
    Failed to read or decode an input blob.

    Fatal to the whole run: the service discards every partial result
    and the CLI reports the failure once.

    Attributes:
        source: Name of the blob that failed (file path or archive entry).
        detail: Underlying error text, if any.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.source = source
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}\n\nDetails: {self.detail}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["source"] = self.source
        result["detail"] = self.detail
        return result


# ── Configuration Errors ─────────────────────────────────────────────────


class ConfigurationError(AblSenseError):
    """
    Error in ablsense configuration.

    Attributes:
        config_key: The configuration key that caused the error (if known).
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result

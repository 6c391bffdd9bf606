"""
errors.py - Error Code System

Error Code Structure:
- 1xxx: Configuration errors
- 3xxx: Runtime errors (prompt, execution)
- 4xxx: Manifest errors

Usage:
    from yrun.errors import ManifestError

    raise ManifestError("Invalid JSON", path="packages/api/package.json")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for yrun.

    - 1xxx: Configuration errors
    - 3xxx: Runtime errors
    - 4xxx: Manifest errors
    """

    # ==========================================================================
    # Configuration Errors (1xxx)
    # ==========================================================================
    INVALID_CONFIG = "1001"
    CONFIG_NOT_FOUND = "1002"

    # ==========================================================================
    # Runtime Errors (3xxx)
    # ==========================================================================
    PROMPT_FAILED = "3001"
    PROMPT_CANCELLED = "3002"
    EXECUTION_FAILED = "3003"

    # ==========================================================================
    # Manifest Errors (4xxx)
    # ==========================================================================
    MANIFEST_READ_ERROR = "4001"
    MANIFEST_PARSE_ERROR = "4002"
    MANIFEST_SHAPE_ERROR = "4003"


class YrunError(Exception):
    """Base exception for yrun errors.

    Attributes:
        message: Human-readable error description
        code: Error code from ErrorCode
        details: Additional error context dictionary
    """

    default_code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(str(self))

    def __str__(self) -> str:
        code_str = self.code.value if self.code else "UNKNOWN"
        return f"[{code_str}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"code={self.code.value if self.code else None!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "message": self.message,
            "code": self.code.value if self.code else None,
            "details": self.details,
        }


class ConfigError(YrunError):
    """Invalid or unreadable configuration."""

    default_code = ErrorCode.INVALID_CONFIG


class ManifestError(YrunError):
    """A manifest could not be read, parsed, or has the wrong shape.

    Always fatal for the whole aggregation.
    """

    default_code = ErrorCode.MANIFEST_READ_ERROR

    def __init__(
        self,
        message: str,
        path: str,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.path = path
        merged = {"path": path}
        if details:
            merged.update(details)
        super().__init__(message, code=code, details=merged)


class PromptError(YrunError):
    """The interactive prompt failed for a reason other than cancellation."""

    default_code = ErrorCode.PROMPT_FAILED


class PromptCancelled(YrunError):
    """The user cancelled an interactive prompt."""

    default_code = ErrorCode.PROMPT_CANCELLED

    def __init__(self, message: str = "Cancelled by user"):
        super().__init__(message)


class ExecutionError(YrunError):
    """The shell could not be spawned for the composed command."""

    default_code = ErrorCode.EXECUTION_FAILED


__all__ = [
    "ConfigError",
    "ErrorCode",
    "ExecutionError",
    "ManifestError",
    "PromptCancelled",
    "PromptError",
    "YrunError",
]

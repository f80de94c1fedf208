"""Custom exceptions for the note graph builder.

Errors come in two tiers. Configuration and export errors are fatal and
abort the run before (or instead of) writing output. Document errors are
recoverable: the offending document is skipped and the run continues.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Error codes for machine-readable error identification."""

    # Configuration errors (1xxx)
    CONFIG_INVALID = 1001
    CONFIG_MISSING = 1002
    VAULT_NOT_FOUND = 1003
    VAULT_NOT_A_DIRECTORY = 1004

    # Document errors (2xxx)
    DOCUMENT_READ_FAILED = 2001
    DOCUMENT_PARSE_FAILED = 2002

    # Export errors (3xxx)
    OUTPUT_WRITE_FAILED = 3001


class BrainGraphError(Exception):
    """Base exception for all graph builder errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class ConfigurationError(BrainGraphError):
    """Raised for missing or invalid configuration. Always fatal."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key
        if path:
            details["path"] = path

        super().__init__(message, code=code, details=details)
        self.config_key = config_key
        self.path = path


class DocumentError(BrainGraphError):
    """Raised when a single document cannot be read or parsed.

    The builder catches this per document, logs it and moves on.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.DOCUMENT_READ_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if path:
            details["path"] = path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.path = path
        self.original_error = original_error


class ExportError(BrainGraphError):
    """Raised when the graph artifact cannot be written."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if path:
            details["path"] = path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=ErrorCode.OUTPUT_WRITE_FAILED, details=details)
        self.path = path
        self.original_error = original_error

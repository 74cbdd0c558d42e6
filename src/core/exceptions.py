"""Structured exception hierarchy for consistent error handling.

This module defines the exception system for the FoodBridge record layer,
providing a rich error model that supports debugging, monitoring, and
caller-facing error reporting.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **FoodBridgeError**: Base exception with rich context and fingerprinting
- **Specialized exceptions**: Validation, duplicate key and lookup failures

Field-level validation problems are collected by the validator as data;
``ValidationError`` only wraps that collection when a caller asks the record
store to save an invalid record. ``DuplicateKeyError`` is raised by the
persistence layer and is not a ``ValidationError`` subclass: a value already
in use is not malformed input.
"""

from __future__ import annotations

import hashlib
import traceback
from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.core.types import ErrorContext
    from src.domain.records.results import FieldError


class ErrorCode(Enum):
    """Standardized error codes for the FoodBridge application."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """A candidate record failed one or more field rules."""

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    """The requested resource (for example a record kind) does not exist."""

    # Storage errors
    DUPLICATE_KEY = "DUPLICATE_KEY"
    """A value for a unique field is already held by another record."""


class Severity(Enum):
    """Severity levels for errors in the FoodBridge application."""

    LOW = "LOW"
    """Low severity errors that don't significantly impact functionality."""

    MEDIUM = "MEDIUM"
    """Medium severity errors that may affect some features but not critical ops."""

    HIGH = "HIGH"
    """High severity errors impacting critical functionality or data integrity."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention, may cause system failures."""


class FoodBridgeError(Exception):
    """Base exception class for all FoodBridge application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash built from the error type and the raising location.
        """
        max_frames = 5
        relevant_frames = (
            self.stack_trace[-max_frames:]
            if len(self.stack_trace) > max_frames
            else self.stack_trace
        )

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"

        for frame in relevant_frames:
            if "site-packages" not in frame and "src/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether this error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether this error should trigger alerts (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: A string showing the class name, error code, message, severity,
                and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(FoodBridgeError):
    """Exception raised when a record is rejected by its field rules.

    Args:
        message: Description of the validation failure
        field_errors: Errors keyed by the offending field name
        error_code: Error code (defaults to VALIDATION_ERROR)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        field_errors: Mapping[str, FieldError] | None = None,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.field_errors: dict[str, FieldError] = dict(field_errors or {})
        merged_context = dict(context or {})
        if self.field_errors:
            merged_context.setdefault(
                "fields",
                {name: error.kind.value for name, error in self.field_errors.items()},
            )
        super().__init__(error_code, message, Severity.LOW, merged_context, cause)


class DuplicateKeyError(FoodBridgeError):
    """Exception raised when a unique field value is already stored.

    Args:
        message: Description of the conflict
        kind: Record kind whose unique index rejected the insert
        field: Name of the unique field, when it could be determined
        error_code: Error code (defaults to DUPLICATE_KEY)
        context: Additional context information about the error
        cause: The original storage exception
    """

    def __init__(
        self,
        message: str,
        kind: str,
        field: str | None = None,
        error_code: str | ErrorCode = ErrorCode.DUPLICATE_KEY,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.kind = kind
        self.field = field
        merged_context = {"kind": kind, "field": field, **(context or {})}
        super().__init__(error_code, message, Severity.LOW, merged_context, cause)


class NotFoundError(FoodBridgeError):
    """Exception raised when a requested resource cannot be found.

    Args:
        message: Description of what resource was not found
        error_code: Error code (defaults to NOT_FOUND)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)

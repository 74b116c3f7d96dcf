from __future__ import annotations

from typing import Optional


class LicenseAuditError(Exception):
    """Base class for fatal audit failures surfaced to the caller."""

    exit_code = 1

    def __init__(self, message: str, path: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.operation = operation

    def user_message(self) -> str:
        text = self.message
        if self.path:
            text += f" (path: {self.path})"
        if self.operation:
            text += f" (operation: {self.operation})"
        return text


class ConfigurationError(LicenseAuditError):
    exit_code = 2


class DetectionError(LicenseAuditError):
    exit_code = 3


class TraversalError(LicenseAuditError):
    exit_code = 4


class RepositoryError(LicenseAuditError):
    exit_code = 5


class PatternSyntaxError(ValueError):
    """Raised when an ignore pattern cannot be compiled.

    Never fatal: the matcher logs it and treats the pattern as never-matching.
    """

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid ignore pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    CONFIG = "config"
    DEPENDENCY = "dependency"
    RUNTIME = "runtime"
    INTEGRITY = "integrity"
    RESOURCE = "resource"


DEFAULT_EXIT_CODES: dict[ErrorCategory, int] = {
    ErrorCategory.RUNTIME: 1,
    ErrorCategory.CONFIG: 2,
    ErrorCategory.DEPENDENCY: 3,
    ErrorCategory.INTEGRITY: 4,
    ErrorCategory.RESOURCE: 5,
}


@dataclass
class LinguaSyncError(Exception):
    """Base exception for LinguaSync with standardized categories."""

    message: str
    category: ErrorCategory = ErrorCategory.RUNTIME
    exit_code: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.exit_code is None:
            self.exit_code = DEFAULT_EXIT_CODES.get(self.category, 1)

    def __str__(self) -> str:
        return self.message

    def label(self) -> str:
        return {
            ErrorCategory.CONFIG: "Configuration error",
            ErrorCategory.DEPENDENCY: "Dependency error",
            ErrorCategory.RUNTIME: "Runtime error",
            ErrorCategory.INTEGRITY: "Integrity error",
            ErrorCategory.RESOURCE: "Resource error",
        }.get(self.category, "Error")


class DependencyMissingError(LinguaSyncError):
    """Raised when a required external dependency is missing."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DEPENDENCY,
            exit_code=exit_code,
        )


class ConfigurationError(LinguaSyncError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIG,
            exit_code=exit_code,
        )


class CountMismatchError(LinguaSyncError):
    """Raised when translated texts do not line up 1:1 with the original cues."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Cue count mismatch: {expected} original vs {actual} translated",
            category=ErrorCategory.INTEGRITY,
        )
        self.expected = expected
        self.actual = actual


class TranslationCountMismatchError(LinguaSyncError):
    """Raised when a batch keeps coming back with the wrong number of entries."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Translation count mismatch: expected {expected}, got {actual}",
            category=ErrorCategory.INTEGRITY,
        )
        self.expected = expected
        self.actual = actual


class TranslationResponseError(LinguaSyncError):
    """Raised when the translation model reply cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.RUNTIME)


class TranslationServiceError(LinguaSyncError):
    """Raised when a batch still fails after all retry attempts."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.RUNTIME)


class TranscriptionError(LinguaSyncError):
    """Raised when the transcription collaborator returns nothing usable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.RUNTIME)


class StorageError(LinguaSyncError):
    """Raised when reading or writing a stored object fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, category=ErrorCategory.RESOURCE)

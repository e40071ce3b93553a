"""Custom exceptions and exit codes for VERCHECK.

This module defines the exit codes and exception hierarchy used throughout
the application. Library callers catch the exceptions; the CLI maps them
to process exit codes.
"""

from enum import IntEnum
from pathlib import Path
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes reported by the vercheck CLI.

    These codes are used for consistent error reporting and can be
    checked by calling scripts or CI systems.
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    FETCH_FAILED = 2
    INVALID_VERSION = 3
    MANIFEST_NOT_FOUND = 4
    UPDATE_AVAILABLE = 10  # Only with --fail-on-update


class VercheckError(Exception):
    """Base exception for VERCHECK errors.

    All custom exceptions in this application should inherit from this class.
    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Error message describing what went wrong
            exit_code: Optional override for the default exit code
        """
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception.

        Returns:
            The instance exit code if set, otherwise the class default.
        """
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class FetchFailedError(VercheckError):
    """Retrieving a manifest failed.

    Raised when:
    - The host is unreachable or the connection times out
    - The server answers with a non-2xx status
    - The response body is not valid UTF-8
    - A local manifest file cannot be read

    Attributes:
        location: URL or path that was being fetched
        reason: Short description of the underlying failure
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.FETCH_FAILED

    def __init__(
        self,
        location: str,
        reason: str,
        message: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            location: URL or path that was being fetched
            reason: Short description of the failure, e.g. "HTTP 404 Not Found"
            message: Full message; built from location and reason when omitted
        """
        self.location = location
        self.reason = reason
        if message is None:
            message = f"Failed to fetch manifest from {location}: {reason}"
        super().__init__(message)


class InvalidVersionFormatError(VercheckError):
    """A version string does not follow MAJOR.MINOR.PATCH[-PRE][+BUILD].

    Attributes:
        version: The rejected text
        reason: What was wrong with it
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.INVALID_VERSION

    def __init__(self, version: str, reason: str = "") -> None:
        """Initialize the exception.

        Args:
            version: The rejected text, exactly as received
            reason: Optional detail appended to the message
        """
        self.version = version
        self.reason = reason
        message = f"Invalid version format: {version!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ManifestNotFoundError(VercheckError):
    """No manifest has been published for an application.

    Attributes:
        app_name: Application whose manifest was requested
        path: Where the manifest was expected
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.MANIFEST_NOT_FOUND

    def __init__(self, app_name: str, path: Path) -> None:
        """Initialize the exception.

        Args:
            app_name: Application whose manifest was requested
            path: Expected manifest file
        """
        self.app_name = app_name
        self.path = path
        super().__init__(f"No manifest published for '{app_name}' (expected {path})")


__all__ = [
    "ExitCode",
    "VercheckError",
    "FetchFailedError",
    "InvalidVersionFormatError",
    "ManifestNotFoundError",
]

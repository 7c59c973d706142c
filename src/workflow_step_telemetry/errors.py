"""Error taxonomy for telemetry phases."""

from enum import Enum


class ErrorKind(Enum):
    """Category of a telemetry failure.

    Lets callers and tests tell failures apart. The phases do not branch
    on it; each component converts its own errors to the bool or None
    results the phases act on.
    """

    CONFIGURATION = "configuration"
    PLATFORM_UNSUPPORTED = "platform_unsupported"
    EXECUTABLE_INVOCATION = "executable_invocation"
    JOB_RESOLUTION = "job_resolution"
    COMMENT_API = "comment_api"


class TelemetryError(Exception):
    """Base error carrying an ``ErrorKind``.

    Parameters
    ----------
    message : str
        Human-readable description.
    kind : ErrorKind
        Failure category.

    """

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind


class ConfigurationError(TelemetryError):
    """A required input is missing or invalid."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.CONFIGURATION)


class UnsupportedPlatformError(TelemetryError):
    """No buildevents release exists for this OS or architecture."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.PLATFORM_UNSUPPORTED)


class SpanEmissionError(TelemetryError):
    """The buildevents executable exited with a non-zero status.

    Parameters
    ----------
    subcommand : str
        The buildevents subcommand that failed (``build``, ``step``, ``cmd``).
    returncode : int
        Exit status of the process.

    """

    def __init__(self, subcommand: str, returncode: int):
        super().__init__(
            f"Could not execute 'buildevents {subcommand}' (exit code {returncode})",
            ErrorKind.EXECUTABLE_INVOCATION,
        )
        self.subcommand = subcommand
        self.returncode = returncode


class GitHubAPIError(TelemetryError):
    """A call to the GitHub API through the gh CLI failed."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.COMMENT_API):
        super().__init__(message, kind)


class InstallationError(TelemetryError):
    """buildevents could not be downloaded."""

    def __init__(self, message: str):
        super().__init__(message, ErrorKind.EXECUTABLE_INVOCATION)

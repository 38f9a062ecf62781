"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class YtrsError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(YtrsError):
    """Raised when paths or the configuration file cannot be resolved or validated."""


class InvalidRequestError(YtrsError):
    """Raised when command-line arguments do not describe a valid invocation."""


class DownloadError(YtrsError):
    """Raised when an HTTP transfer fails or cannot be written to disk."""


class DependencyFetchError(YtrsError):
    """Raised when a required external binary cannot be obtained."""


class ExternalProcessError(YtrsError):
    """
    Raised when a spawned process cannot be launched or exits with a non-zero status.
    """

    def __init__(
        self,
        message: str,
        argv: list[str] | None = None,
        returncode: int | None = None,
    ):
        super().__init__(message)
        self.argv = argv or []
        self.returncode = returncode


class PlayerNotFoundError(ExternalProcessError):
    """Raised when the media player binary is not installed or not on PATH."""


class SummarizerError(ExternalProcessError):
    """Raised when the local language-model server fails or cannot be reached."""


class MediaNotFoundError(YtrsError):
    """Raised when a search or a requested language yields nothing to work with."""

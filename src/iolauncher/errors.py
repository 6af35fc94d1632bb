"""Unified exception hierarchy for iolauncher.

All custom exceptions inherit from LauncherError for consistent error handling.
Components raise these; only the CLI turns them into messages and exit codes.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other iolauncher modules.
    It should NOT import from any other iolauncher modules.
"""

from __future__ import annotations


class LauncherError(Exception):
    """Base exception for all iolauncher errors.

    All iolauncher-specific exceptions should inherit from this class.
    The CLI catches it and exits with status 1.
    """


class ConfigError(LauncherError):
    """Configuration-related errors."""


class CacheError(ConfigError):
    """Device cache file is missing, unreadable, or malformed."""


class DockerError(LauncherError):
    """Docker operation errors.

    Base class for all Docker-related exceptions.
    """


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""


class DockerNotRunningError(DockerError):
    """Raised when Docker daemon is not running."""


class ContainerError(DockerError):
    """Raised when container operations fail."""


class ImageRemovalError(DockerError):
    """Raised when a stale image cannot be removed."""


class ProbeError(LauncherError):
    """A platform probe could not be executed or failed a hard requirement.

    Examples:
        - uname missing or hung
        - nvidia-smi failing on a GPU host
    """


class GPUError(ProbeError):
    """GPU or NVIDIA Container Toolkit check failed."""


class ValidationError(LauncherError):
    """Input validation errors.

    Examples:
        - Unsupported operating system or architecture
        - Required value missing in non-interactive mode
    """


class MissingValueError(ValidationError):
    """A value is required but prompting is disabled."""


class TooManyAttemptsError(ValidationError):
    """The user exhausted the allowed number of prompt attempts."""


class UnsupportedPlatformError(ValidationError):
    """The resolved platform cannot run the worker."""


class InputClosedError(LauncherError):
    """Standard input was closed or interrupted while prompting.

    The CLI terminates quietly on this error instead of reporting it.
    """

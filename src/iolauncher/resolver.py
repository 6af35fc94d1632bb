"""Launch configuration resolution.

Merges explicit flags, the cached snapshot, and interactive prompts into a
validated Arguments record, then checks the resolved platform can actually
run the worker. Nothing here exits the process: failures are raised as
LauncherError subclasses for the CLI to turn into exit codes.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any, Protocol

from rich.console import Console

from . import detector
from .arguments import (
    Arguments,
    is_valid_arch,
    is_valid_gpu_choice,
    is_valid_os,
    is_valid_uuid,
)
from .config import apply_cache
from .constants import (
    MSG_INVALID_UUID,
    MSG_MAC_PLATFORM_NOTE,
    MSG_NOT_MAC_SILICON,
    VALID_OS_CHOICES,
)
from .errors import GPUError, TooManyAttemptsError, UnsupportedPlatformError, ValidationError
from .logging import get_logger

console = Console(highlight=False)
logger = get_logger(__name__)


class Prompter(Protocol):
    """Source of answers for missing or invalid fields.

    Implementations raise InputClosedError when input is exhausted and may
    raise MissingValueError to refuse prompting altogether.
    """

    def ask(self, text: str, *, flag: str) -> str: ...


def _prompt_until(
    prompter: Prompter,
    text: str,
    flag: str,
    is_valid: Callable[[str], bool],
    error: str,
    max_attempts: int | None,
) -> str:
    """Ask until is_valid accepts the answer."""
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        value = prompter.ask(text, flag=flag).strip()
        attempts += 1
        if is_valid(value):
            return value
        console.print(f"[red]{error}[/red]")
    raise TooManyAttemptsError(f"No valid value for {flag} after {attempts} attempt(s)")


def _is_non_empty(value: str) -> bool:
    return bool(value)


def resolve_arguments(
    args: Arguments,
    prompter: Prompter,
    *,
    cache: dict[str, Any] | None = None,
    probe_architecture: Callable[[], str] | None = None,
    max_attempts: int | None = None,
) -> Arguments:
    """Resolve every field of args.

    Precedence per field: explicit flag, then cached value, then prompt.
    Architecture is never prompted; it falls back to the live probe.

    Args:
        args: Arguments built from CLI flags.
        prompter: Answers for fields still missing or invalid.
        cache: Snapshot from the last successful run.
        probe_architecture: Returns the host architecture (default: uname probe).
        max_attempts: Bound on prompts per field (None = unbounded).

    Returns:
        Arguments with identity, OS, architecture and GPU choice filled in.

    Raises:
        InputClosedError: If input ends while prompting.
        MissingValueError: If prompting is disabled and a value is missing.
        TooManyAttemptsError: If max_attempts is exhausted.
        ProbeError: If the architecture probe cannot run.
    """
    if cache:
        args = apply_cache(args, cache)

    def field(value: str, is_valid: Callable[[str], bool], text: str, flag: str, error: str) -> str:
        if is_valid(value):
            return value
        return _prompt_until(prompter, text, flag, is_valid, error, max_attempts)

    device_name = field(
        args.device_name,
        _is_non_empty,
        "Enter device name",
        "--device_name",
        "Device name cannot be empty. Please enter a valid name.",
    )
    device_id = field(
        args.device_id, is_valid_uuid, "Enter device ID (UUID)", "--device_id", MSG_INVALID_UUID
    )
    user_id = field(
        args.user_id, is_valid_uuid, "Enter user ID (UUID)", "--user_id", MSG_INVALID_UUID
    )
    operating_system = field(
        args.operating_system,
        is_valid_os,
        f"Enter operating system ({'/'.join(VALID_OS_CHOICES)})",
        "--operating_system",
        f"Invalid operating system. Please choose from {'/'.join(VALID_OS_CHOICES)}.",
    )

    if args.architecture:
        architecture = args.architecture
    else:
        architecture = (probe_architecture or detector.get_architecture)().strip()

    resolved = replace(
        args,
        device_name=device_name,
        device_id=device_id,
        user_id=user_id,
        operating_system=operating_system,
        architecture=architecture,
    )

    if resolved.is_macos:
        console.print(MSG_MAC_PLATFORM_NOTE)
        use_gpus = "false"
    else:
        use_gpus = field(
            args.use_gpus,
            is_valid_gpu_choice,
            "Does this system have an NVIDIA GPU which you want to use? (true/false)",
            "--usegpus",
            "Invalid input. Please enter 'true' or 'false'.",
        )

    resolved = replace(resolved, use_gpus=use_gpus)
    logger.debug(
        "Resolved arguments: os=%s arch=%s usegpus=%s beta=%s",
        resolved.operating_system,
        resolved.architecture,
        resolved.use_gpus,
        resolved.beta,
    )
    return resolved


def validate_platform(
    args: Arguments,
    *,
    check_gpu: Callable[[], bool] | None = None,
    check_container_toolkit: Callable[[], bool] | None = None,
    is_mac_silicon: Callable[[], bool] | None = None,
) -> None:
    """Check that resolved arguments describe a platform the worker supports.

    Raises:
        GPUError: GPUs requested on Linux but the driver or toolkit is missing.
        ValidationError: Operating system outside the supported choices.
        UnsupportedPlatformError: Unsupported architecture, or macOS on
            hardware that is not Apple silicon.
    """
    check_gpu = check_gpu or detector.check_gpu
    check_container_toolkit = check_container_toolkit or detector.check_container_toolkit
    is_mac_silicon = is_mac_silicon or detector.is_mac_silicon

    if not args.is_macos and args.wants_gpus:
        if not check_gpu() or not check_container_toolkit():
            raise GPUError("GPU support was requested but the GPU checks failed")

    if not is_valid_os(args.operating_system):
        raise ValidationError(f"Invalid operating system choice '{args.operating_system}'")

    if not is_valid_arch(args.architecture):
        raise UnsupportedPlatformError(
            f"Platform {args.architecture} - {args.operating_system} is not supported"
        )

    if args.is_macos and not is_mac_silicon():
        raise UnsupportedPlatformError(MSG_NOT_MAC_SILICON)

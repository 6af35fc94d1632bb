"""Run operations for iolauncher.

Sequences cache loading, resolution, platform checks, cleanup, and the final
docker run. Errors propagate as LauncherError subclasses to the CLI.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from rich.console import Console

from .. import detector, docker
from ..arguments import Arguments
from ..config import load_cache, save_cache
from ..errors import DockerNotRunningError
from ..generator import get_docker_run_cmd
from ..logging import get_logger
from ..resolver import Prompter, resolve_arguments, validate_platform
from .cleanup import cleanup_before_launch

console = Console(highlight=False)
logger = get_logger(__name__)


def ensure_runtime() -> None:
    """Raise DockerNotRunningError unless the Docker daemon answers."""
    if not detector.check_runtime():
        raise DockerNotRunningError("Docker is not running")


def build_command(args: Arguments) -> list[str]:
    """Collect host facts needed by the command, then generate it."""
    mac_info = detector.get_mac_info() if args.is_macos else ""
    return get_docker_run_cmd(args, args.architecture, mac_info=mac_info)


def launch(
    flags: Arguments,
    prompter: Prompter,
    *,
    cache_path: Path | None = None,
    dry_run: bool = False,
    max_attempts: int | None = None,
) -> list[str]:
    """Resolve the configuration and start the worker container.

    Args:
        flags: Arguments from the command line.
        prompter: Source of answers for missing fields.
        cache_path: Device cache file (default: see config.get_cache_path).
        dry_run: Print the command instead of saving, pruning and running.
        max_attempts: Bound on prompts per field.

    Returns:
        The docker run command that was (or would be) executed.
    """
    cache = load_cache(cache_path)
    ensure_runtime()

    args = resolve_arguments(flags, prompter, cache=cache, max_attempts=max_attempts)
    validate_platform(args)

    cmd = build_command(args)
    logger.debug("Docker run command: %s", " ".join(cmd))

    if dry_run:
        console.print(shlex.join(cmd), soft_wrap=True, markup=False)
        return cmd

    save_cache(args, cache_path)
    cleanup_before_launch()

    container_id = docker.run_container(cmd)
    console.print(f"[green]✓ Worker container started[/green] [dim]{container_id[:12]}[/dim]")
    return cmd

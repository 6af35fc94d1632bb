"""Docker operations for iolauncher.

Every docker CLI call goes through safe_docker_run so that a missing binary or
a hung daemon surfaces as a typed DockerError instead of a raw subprocess error.
"""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from .constants import DOCKER_COMMAND_TIMEOUT, DOCKER_RUN_TIMEOUT, DOCKER_STOP_TIMEOUT
from .errors import ContainerError, DockerError, DockerNotFoundError, DockerTimeoutError
from .logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "DockerError",
    "DockerNotFoundError",
    "DockerTimeoutError",
    "safe_docker_run",
    "check_docker_status",
    "list_running_containers",
    "stop_containers",
    "kill_containers",
    "list_image_ids_by_age",
    "remove_image",
    "run_container",
]

# Oldest possible timestamp, used for CreatedAt values docker formats unexpectedly
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def safe_docker_run(
    cmd: Sequence[str],
    *,
    timeout: int = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a Docker command with consistent error handling.

    Args:
        cmd: Command to run (should start with 'docker').
        timeout: Command timeout in seconds.
        capture_output: Capture stdout/stderr if True.
        check: Raise CalledProcessError on non-zero exit.

    Returns:
        CompletedProcess with command result.

    Raises:
        DockerNotFoundError: If docker command is not found.
        DockerTimeoutError: If command times out.
        subprocess.CalledProcessError: If check=True and command fails.
    """
    cmd_str = " ".join(cmd[:4]) + ("..." if len(cmd) > 4 else "")
    logger.debug("Running Docker command: %s", cmd_str)
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=check,
            timeout=timeout,
        )
        logger.debug("Docker command completed: exit=%d", result.returncode)
        return result
    except FileNotFoundError as e:
        logger.error("Docker not found in PATH: %s", cmd_str)
        raise DockerNotFoundError(f"Docker not found in PATH. Command: {cmd_str}") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Docker command timed out after %ds: %s", timeout, cmd_str)
        raise DockerTimeoutError(
            f"Docker command timed out after {timeout}s. Command: {cmd_str}"
        ) from e


def check_docker_status() -> bool:
    """Check if Docker daemon is responsive.

    Returns:
        True if Docker is running and responsive, False otherwise.
    """
    try:
        result = safe_docker_run(["docker", "info"])
        return result.returncode == 0
    except (DockerNotFoundError, DockerTimeoutError):
        return False


def _split_lines(output: str) -> list[str]:
    return [line for line in output.strip().split("\n") if line]


def list_running_containers() -> list[str]:
    """List IDs of all running containers.

    Raises:
        DockerError: If the container listing fails.
    """
    result = safe_docker_run(["docker", "ps", "-q"])
    if result.returncode != 0:
        raise DockerError(f"Failed to list running containers: {result.stderr.strip()}")
    return _split_lines(result.stdout)


def stop_containers(container_ids: Sequence[str]) -> bool:
    """Gracefully stop containers.

    Returns:
        True on success. False if docker fails or the stop times out, so the
        caller can escalate to kill_containers.
    """
    try:
        result = safe_docker_run(["docker", "stop", *container_ids], timeout=DOCKER_STOP_TIMEOUT)
    except DockerTimeoutError as e:
        logger.warning("%s", e)
        return False
    return result.returncode == 0


def kill_containers(container_ids: Sequence[str]) -> bool:
    """Forcefully kill containers. Returns True on success."""
    result = safe_docker_run(["docker", "kill", *container_ids])
    return result.returncode == 0


def _parse_created_at(value: str) -> datetime:
    """Parse docker's CreatedAt column, e.g. '2024-05-01 10:20:30 +0000 UTC'."""
    parts = value.split()
    try:
        return datetime.strptime(" ".join(parts[:3]), "%Y-%m-%d %H:%M:%S %z")
    except ValueError:
        logger.debug("Unparseable image creation time: %r", value)
        return _EPOCH


def list_image_ids_by_age(repository: str) -> list[str]:
    """List image IDs of a repository, most recently created first.

    The repository is passed to docker as a reference argument, never through
    a shell. An image tagged more than once is listed a single time.

    Args:
        repository: Image repository name, e.g. 'ionetcontainers/io-launch'.

    Returns:
        Unique image IDs sorted by creation time descending.

    Raises:
        DockerError: If the image listing fails.
    """
    result = safe_docker_run(
        [
            "docker",
            "image",
            "ls",
            "--no-trunc",
            "--format",
            "{{.ID}}\t{{.CreatedAt}}",
            repository,
        ]
    )
    if result.returncode != 0:
        raise DockerError(f"Failed to list images for {repository}: {result.stderr.strip()}")

    images: list[tuple[datetime, str]] = []
    for line in _split_lines(result.stdout):
        image_id, _, created_at = line.partition("\t")
        images.append((_parse_created_at(created_at), image_id.strip()))

    # Stable sort keeps docker's own (newest-first) order for equal timestamps
    images.sort(key=lambda item: item[0], reverse=True)

    ordered: list[str] = []
    for _, image_id in images:
        if image_id and image_id not in ordered:
            ordered.append(image_id)
    return ordered


def remove_image(image_id: str) -> bool:
    """Remove a Docker image.

    Returns:
        True if image was removed, False otherwise.
    """
    result = safe_docker_run(["docker", "rmi", image_id])
    if result.returncode != 0:
        logger.debug("docker rmi %s failed: %s", image_id, result.stderr.strip())
    return result.returncode == 0


def run_container(cmd: Sequence[str]) -> str:
    """Run a detached 'docker run' command.

    Returns:
        The new container ID printed by docker.

    Raises:
        ContainerError: If docker exits non-zero.
    """
    result = safe_docker_run(cmd, timeout=DOCKER_RUN_TIMEOUT)
    if result.returncode != 0:
        raise ContainerError(f"Failed to start container: {result.stderr.strip()}")
    return result.stdout.strip()

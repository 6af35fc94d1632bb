"""Cleanup operations for iolauncher.

Stops running containers and prunes stale worker images so that only the
newest image of each tracked repository stays on disk.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console

from .. import docker
from ..constants import TRACKED_REPOSITORIES
from ..errors import ContainerError, ImageRemovalError
from ..logging import get_logger

console = Console(highlight=False)
logger = get_logger(__name__)


def stop_running_containers() -> int:
    """Stop every running container, escalating to kill if stop fails.

    Returns:
        Number of containers that were running.

    Raises:
        ContainerError: If both stop and kill fail.
        DockerError: If running containers cannot be listed.
    """
    containers = docker.list_running_containers()
    if not containers:
        return 0

    console.print("Stopping all running Docker containers...")
    if docker.stop_containers(containers):
        return len(containers)

    console.print(
        "[yellow]Stopping containers failed, attempting to forcefully kill containers...[/yellow]"
    )
    if not docker.kill_containers(containers):
        raise ContainerError("Failed to kill running Docker containers.")
    return len(containers)


def prune_stale_images(repositories: Iterable[str] = TRACKED_REPOSITORIES) -> dict[str, int]:
    """Keep only the most recently created image of each repository.

    Args:
        repositories: Repository names to prune.

    Returns:
        Dict of repository name to number of images removed.

    Raises:
        ImageRemovalError: If an image cannot be removed.
        DockerError: If images cannot be listed.
    """
    results: dict[str, int] = {}
    for repository in repositories:
        image_ids = docker.list_image_ids_by_age(repository)
        stale = image_ids[1:]
        results[repository] = 0
        if not stale:
            continue

        console.print(f"removing stale images: {repository}")
        for image_id in stale:
            if not docker.remove_image(image_id):
                raise ImageRemovalError(f"Failed to remove image {image_id} ({repository})")
            results[repository] += 1
        logger.debug("Removed %d stale image(s) from %s", results[repository], repository)
    return results


def cleanup_before_launch() -> dict[str, int]:
    """Stop running containers, then prune stale tracked images.

    Containers are stopped first so their images are no longer in use.
    """
    stop_running_containers()
    return prune_stale_images()

"""CLI package for iolauncher.

This package contains the CLI command and supporting modules:
- run: launch workflow (cache, resolution, checks, docker run)
- cleanup: container stop and stale image pruning
- prompts: prompt providers for missing fields
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..arguments import Arguments
from ..constants import CACHE_FILE_ENV
from ..errors import InputClosedError, LauncherError
from ..logging import get_logger, set_debug
from .prompts import ClickPrompter, NonInteractivePrompter
from .run import launch

console = Console(highlight=False)
logger = get_logger(__name__)

__all__ = ["cli"]


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--device_name", "device_name", default="", help="Device name")
@click.option("--device_id", "device_id", default="", help="Device ID (UUID)")
@click.option("--user_id", "user_id", default="", help="User ID (UUID)")
@click.option("--operating_system", "operating_system", default="", help="macOS or Linux")
@click.option("--usegpus", default="", help="Use NVIDIA GPUs (true/false)")
@click.option("--arch", default="", help="Architecture (x86_64, arm64, aarch64)")
@click.option(
    "--beta",
    is_flag=True,
    help=(
        "Run the beta worker image with debug logging. "
        "Old io-launch-beta images are not pruned automatically"
    ),
)
@click.option(
    "--cache-file",
    envvar=CACHE_FILE_ENV,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Device cache file (default: ./ionet_device_cache.txt)",
)
@click.option("--no-input", is_flag=True, help="Fail instead of prompting for missing values")
@click.option(
    "--max-attempts",
    type=click.IntRange(min=1),
    help="Give up after this many invalid answers per field",
)
@click.option("--dry-run", is_flag=True, help="Print the docker command without running it")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="iolauncher")
def cli(
    device_name: str,
    device_id: str,
    user_id: str,
    operating_system: str,
    usegpus: str,
    arch: str,
    beta: bool,
    cache_file: Path | None,
    no_input: bool,
    max_attempts: int | None,
    dry_run: bool,
    debug: bool,
) -> None:
    """iolauncher - start an io.net worker container on this machine.

    Missing values are taken from the device cache, then asked for.
    """
    if debug:
        set_debug(True)

    flags = Arguments.from_cli(
        device_name=device_name,
        device_id=device_id,
        user_id=user_id,
        operating_system=operating_system,
        usegpus=usegpus,
        arch=arch,
        beta=beta,
    )
    prompter = NonInteractivePrompter() if no_input else ClickPrompter()

    try:
        launch(
            flags,
            prompter,
            cache_path=cache_file,
            dry_run=dry_run,
            max_attempts=max_attempts,
        )
    except InputClosedError as e:
        # Closed stdin ends the run quietly
        logger.debug("%s", e)
        sys.exit(1)
    except LauncherError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    cli()

"""Docker run command generation for the worker container."""

from __future__ import annotations

from .arguments import Arguments
from .constants import (
    BETA_IMAGE,
    DOCKER_SOCKET,
    EMULATED_PLATFORM,
    NATIVE_ARCH,
    STABLE_IMAGE,
)


def get_image_name(beta: bool) -> str:
    """Get the worker image reference for a release channel."""
    return BETA_IMAGE if beta else STABLE_IMAGE


def _env(name: str, value: str) -> list[str]:
    return ["-e", f"{name}={value}"]


def get_docker_run_cmd(args: Arguments, architecture: str, *, mac_info: str = "") -> list[str]:
    """Generate the detached docker run command for the worker.

    Pure function: the same inputs always produce the same token list. Host
    facts (MAC_INFO) are collected by the caller and passed in.

    Args:
        args: Resolved launch arguments.
        architecture: Host architecture, e.g. 'x86_64' or 'arm64'.
        mac_info: JSON blob of machdep sysctl values, used on macOS only.

    Token order:
        base flags, ARCH, --platform (non-x86_64 only), identity variables
        (each only when set), macOS extras, channel variables, image.
    """
    cmd = [
        "docker",
        "run",
        "-d",
        "-v",
        f"{DOCKER_SOCKET}:{DOCKER_SOCKET}",
        "--network",
        "host",
    ]
    cmd.extend(_env("ARCH", architecture))

    # Worker images are amd64 only; everything else runs emulated
    if architecture != NATIVE_ARCH:
        cmd.extend(["--platform", EMULATED_PLATFORM])

    for name, value in (
        ("DEVICE_NAME", args.device_name),
        ("DEVICE_ID", args.device_id),
        ("USER_ID", args.user_id),
        ("OPERATING_SYSTEM", args.operating_system),
        ("USEGPUS", args.use_gpus),
    ):
        if value:
            cmd.extend(_env(name, value))

    if args.is_macos:
        cmd.extend(_env("MAC_INFO", mac_info.strip()))
        cmd.extend(["--pull", "always"])

    if args.beta:
        cmd.extend(_env("CURRENT_LOG_LEVEL", "DEBUG"))
        cmd.extend(_env("ENVIRONMENT", "DEV"))

    cmd.append(get_image_name(args.beta))
    return cmd

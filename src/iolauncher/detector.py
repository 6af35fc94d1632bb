"""Platform detection for the worker launch.

Each probe shells out to a single utility and interprets its exit code or
output. Probes never mutate state; failing boolean probes print a remediation
hint for the operator.
"""

from __future__ import annotations

import json
import subprocess

from rich.console import Console

from . import docker
from .constants import (
    CTK_VERSION_MARKER,
    MACHDEP_PREFIX,
    MSG_CTK_FAILED,
    MSG_CTK_MISSING,
    MSG_DOCKER_NOT_RUNNING,
    MSG_NVIDIA_SMI_FAILED,
    PROBE_TIMEOUT,
)
from .errors import ProbeError
from .logging import get_logger

console = Console(highlight=False)
logger = get_logger(__name__)


def _run_probe(cmd: list[str]) -> subprocess.CompletedProcess[str] | None:
    """Run a probe command, returning None if it could not be executed."""
    logger.debug("Probe: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=False,
            timeout=PROBE_TIMEOUT,
        )
    except (FileNotFoundError, PermissionError) as e:
        logger.debug("Probe %s not executable: %s", cmd[0], e)
        return None
    except subprocess.TimeoutExpired:
        logger.warning("Probe %s timed out after %ds", cmd[0], PROBE_TIMEOUT)
        return None
    logger.debug("Probe %s exit=%d", cmd[0], result.returncode)
    return result


def get_architecture() -> str:
    """Return the machine architecture reported by 'uname -m'.

    Raises:
        ProbeError: If uname cannot be run or fails.
    """
    result = _run_probe(["uname", "-m"])
    if result is None or result.returncode != 0:
        raise ProbeError("Unable to determine platform architecture")
    return result.stdout.strip()


def is_mac_silicon() -> bool:
    """True if the CPU brand query succeeds (Apple silicon host)."""
    result = _run_probe(["sysctl", "-n", "machdep.cpu.brand_string"])
    return result is not None and result.returncode == 0


def check_gpu() -> bool:
    """True if nvidia-smi reports a working driver."""
    result = _run_probe(["nvidia-smi"])
    if result is None or result.returncode != 0:
        console.print(MSG_NVIDIA_SMI_FAILED)
        return False
    return True


def check_container_toolkit() -> bool:
    """True if the NVIDIA Container Toolkit CLI is installed."""
    result = _run_probe(["nvidia-ctk", "--version"])
    if result is None or result.returncode != 0:
        console.print(MSG_CTK_FAILED)
        return False
    if CTK_VERSION_MARKER not in result.stdout:
        console.print(MSG_CTK_MISSING)
        return False
    return True


def check_runtime() -> bool:
    """True if the Docker daemon answers 'docker info'."""
    if docker.check_docker_status():
        return True
    console.print(MSG_DOCKER_NOT_RUNNING)
    return False


def get_mac_info() -> str:
    """Collect machdep.* sysctl values as a JSON object string.

    Output matches the MAC_INFO format the worker image parses:
    {"machdep.cpu.brand_string": "Apple M1","machdep.cpu.core_count": "8"}

    Raises:
        ProbeError: If sysctl cannot be run.
    """
    result = _run_probe(["sysctl", "-a"])
    if result is None or result.returncode != 0:
        raise ProbeError("Unable to read machdep information via sysctl")

    info: dict[str, str] = {}
    for line in result.stdout.splitlines():
        if not line.startswith(MACHDEP_PREFIX):
            continue
        key, sep, value = line.partition(": ")
        if sep:
            info[key] = value
    return json.dumps(info, separators=(",", ": "), ensure_ascii=False)

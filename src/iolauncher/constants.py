"""Constants module for iolauncher.

All timeouts, image names, and user-facing messages are defined here (SSOT).
"""

from __future__ import annotations

# === Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick docker commands (info, ps, image ls, rmi)
DOCKER_STOP_TIMEOUT = 180  # docker stop waits 10s per container before SIGKILL
DOCKER_RUN_TIMEOUT = 1800  # docker run may pull the image first
PROBE_TIMEOUT = 30  # uname, sysctl, nvidia-smi, nvidia-ctk

# === Images ===
TRACKED_REPOSITORIES = (
    "ionetcontainers/io-worker-vc",
    "ionetcontainers/io-worker-monitor",
    "ionetcontainers/io-launch",
)
STABLE_IMAGE = "ionetcontainers/io-launch:v0.1"
BETA_IMAGE = "ionetcontainers/io-launch-beta:v0.1"
EMULATED_PLATFORM = "linux/amd64"
DOCKER_SOCKET = "/var/run/docker.sock"

# === Validation Constants ===
OS_MACOS = "macOS"
OS_LINUX = "Linux"
VALID_OS_CHOICES = (OS_MACOS, OS_LINUX)
NATIVE_ARCH = "x86_64"
VALID_ARCH_CHOICES = ("x86_64", "arm64", "aarch64")
GPU_CHOICES = ("true", "false")

# === Cache ===
CACHE_FILE_NAME = "ionet_device_cache.txt"
CACHE_FILE_ENV = "IOLAUNCH_CACHE_FILE"

# === Probe markers ===
CTK_VERSION_MARKER = "NVIDIA Container Toolkit CLI version"
MACHDEP_PREFIX = "machdep"

# === Messages ===
MSG_DOCKER_NOT_RUNNING = "Docker daemon is not running. Please start Docker and try again."
MSG_NVIDIA_SMI_FAILED = "nvidia-smi failed - please rerun io-setup or contact support on discord"
MSG_CTK_FAILED = (
    "NVIDIA Container Toolkit check failed - please rerun io-setup or contact support on discord"
)
MSG_CTK_MISSING = (
    "NVIDIA Container Toolkit not installed - please rerun io-setup or contact support on discord"
)
MSG_INVALID_UUID = "Invalid UUID. Please enter a proper UUID as shown on the website dashboard."
MSG_MAC_PLATFORM_NOTE = (
    "NOTE: If you see a warning regarding the platform mismatch (linux/amd64 vs. linux/arm64/v8), "
    "please ignore it. This is expected when running on macOS with M1/M2/M3 chips."
)
MSG_NOT_MAC_SILICON = (
    "Your hardware isn't Mac silicon (M1, M2, M3) chips, "
    "please select proper OS and chip from website"
)

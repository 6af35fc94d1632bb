"""End-to-end tests for the iolauncher CLI."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from iolauncher import __version__
from iolauncher.cli import cli

from conftest import DEVICE_ID, USER_ID

LINUX_FLAGS = [
    "--device_name=dev1",
    f"--device_id={DEVICE_ID}",
    f"--user_id={USER_ID}",
    "--operating_system=Linux",
    "--usegpus=false",
    "--arch=x86_64",
]


@pytest.fixture
def host() -> Iterator[dict[str, MagicMock]]:
    """Patch every external collaborator of the launch workflow."""
    with patch("iolauncher.detector.check_runtime", return_value=True) as runtime, patch(
        "iolauncher.detector.get_architecture", return_value="x86_64"
    ) as arch, patch("iolauncher.detector.is_mac_silicon", return_value=True) as silicon, patch(
        "iolauncher.detector.get_mac_info", return_value='{"machdep.cpu.core_count": "8"}'
    ) as mac_info, patch("iolauncher.detector.check_gpu", return_value=True) as gpu, patch(
        "iolauncher.detector.check_container_toolkit", return_value=True
    ) as toolkit, patch("iolauncher.cli.run.cleanup_before_launch") as cleanup, patch(
        "iolauncher.docker.run_container", return_value="0123456789abcdef"
    ) as run_container:
        yield {
            "runtime": runtime,
            "arch": arch,
            "silicon": silicon,
            "mac_info": mac_info,
            "gpu": gpu,
            "toolkit": toolkit,
            "cleanup": cleanup,
            "run_container": run_container,
        }


def _invoke(cache_file: Path, *args: str, input: str | None = None):
    return CliRunner().invoke(cli, ["--cache-file", str(cache_file), *args], input=input)


def _run_cmd(host: dict[str, MagicMock]) -> list[str]:
    host["run_container"].assert_called_once()
    return host["run_container"].call_args.args[0]


class TestScenarios:
    """Documented launch scenarios."""

    def test_complete_linux_flags(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        result = _invoke(cache_file, *LINUX_FLAGS)
        assert result.exit_code == 0, result.output
        assert "Enter" not in result.output

        cmd = _run_cmd(host)
        assert "--platform" not in cmd
        assert not any(token.startswith("MAC_INFO=") for token in cmd)
        assert "DEVICE_NAME=dev1" in cmd
        assert f"DEVICE_ID={DEVICE_ID}" in cmd
        assert f"USER_ID={USER_ID}" in cmd
        assert cmd[-1] == "ionetcontainers/io-launch:v0.1"

        assert json.loads(cache_file.read_text()) == {
            "device_name": "dev1",
            "device_id": DEVICE_ID,
            "user_id": USER_ID,
            "operating_system": "Linux",
            "usegpus": "false",
        }
        host["cleanup"].assert_called_once()
        host["arch"].assert_not_called()

    def test_macos_without_gpu_flag(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        flags = [f for f in LINUX_FLAGS if not f.startswith(("--usegpus", "--operating_system"))]
        result = _invoke(cache_file, *flags, "--operating_system=macOS", "--arch=arm64")
        assert result.exit_code == 0, result.output
        assert "NVIDIA GPU" not in result.output

        cmd = _run_cmd(host)
        assert "USEGPUS=false" in cmd
        assert 'MAC_INFO={"machdep.cpu.core_count": "8"}' in cmd
        assert cmd[cmd.index("--pull") + 1] == "always"
        assert cmd[cmd.index("--platform") + 1] == "linux/amd64"
        host["gpu"].assert_not_called()

    def test_invalid_device_id_with_closed_input(
        self, cache_file: Path, host: dict[str, MagicMock]
    ) -> None:
        flags = [f for f in LINUX_FLAGS if not f.startswith("--device_id")]
        result = _invoke(cache_file, *flags, "--device_id=not-a-uuid", input="")
        assert result.exit_code == 1
        assert "Error" not in result.output
        host["run_container"].assert_not_called()
        host["cleanup"].assert_not_called()
        assert json.loads(cache_file.read_text()) == {}

    def test_beta(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        result = _invoke(cache_file, *LINUX_FLAGS, "--beta")
        assert result.exit_code == 0, result.output
        cmd = _run_cmd(host)
        assert cmd[-1] == "ionetcontainers/io-launch-beta:v0.1"
        assert "CURRENT_LOG_LEVEL=DEBUG" in cmd
        assert "ENVIRONMENT=DEV" in cmd


class TestInteractive:
    """Prompting through standard input."""

    def test_prompts_for_everything(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        answers = "\n".join(["dev1", "nope", DEVICE_ID, USER_ID, "Windows", "Linux", "false"])
        result = _invoke(cache_file, input=answers + "\n")
        assert result.exit_code == 0, result.output
        assert "Enter device name" in result.output
        assert "Invalid UUID" in result.output
        assert "Invalid operating system" in result.output
        assert "ARCH=x86_64" in _run_cmd(host)
        host["arch"].assert_called_once()

    def test_uses_cache(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        cache_file.write_text(
            json.dumps(
                {
                    "device_name": "cached",
                    "device_id": DEVICE_ID,
                    "user_id": USER_ID,
                    "operating_system": "Linux",
                    "usegpus": "false",
                }
            )
        )
        result = _invoke(cache_file)
        assert result.exit_code == 0, result.output
        assert "Enter" not in result.output
        assert "DEVICE_NAME=cached" in _run_cmd(host)

    def test_no_input_reports_missing_flag(
        self, cache_file: Path, host: dict[str, MagicMock]
    ) -> None:
        flags = [f for f in LINUX_FLAGS if not f.startswith("--user_id")]
        result = _invoke(cache_file, *flags, "--no-input")
        assert result.exit_code == 1
        assert "--user_id" in result.output
        host["run_container"].assert_not_called()


class TestFailures:
    """Exit status 1 cases."""

    def test_missing_cache(self, tmp_path: Path, host: dict[str, MagicMock]) -> None:
        result = _invoke(tmp_path / "absent.txt", *LINUX_FLAGS)
        assert result.exit_code == 1
        assert "Device cache not found" in result.output
        host["run_container"].assert_not_called()

    def test_docker_not_running(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        host["runtime"].return_value = False
        result = _invoke(cache_file, *LINUX_FLAGS)
        assert result.exit_code == 1
        host["run_container"].assert_not_called()

    def test_unsupported_arch_flag(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        flags = [f for f in LINUX_FLAGS if not f.startswith("--arch")]
        result = _invoke(cache_file, *flags, "--arch=i386")
        assert result.exit_code == 1
        assert "i386" in result.output
        host["run_container"].assert_not_called()

    def test_gpu_check_failure(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        host["toolkit"].return_value = False
        flags = [f for f in LINUX_FLAGS if not f.startswith("--usegpus")]
        result = _invoke(cache_file, *flags, "--usegpus=true")
        assert result.exit_code == 1
        host["run_container"].assert_not_called()
        assert json.loads(cache_file.read_text()) == {}

    def test_not_apple_silicon(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        host["silicon"].return_value = False
        flags = [f for f in LINUX_FLAGS if not f.startswith("--operating_system")]
        result = _invoke(cache_file, *flags, "--operating_system=macOS")
        assert result.exit_code == 1
        assert "Mac silicon" in result.output
        host["run_container"].assert_not_called()


class TestOptions:
    """Auxiliary options."""

    def test_dry_run(self, cache_file: Path, host: dict[str, MagicMock]) -> None:
        result = _invoke(cache_file, *LINUX_FLAGS, "--dry-run")
        assert result.exit_code == 0, result.output
        assert "docker run -d" in result.output
        host["run_container"].assert_not_called()
        host["cleanup"].assert_not_called()
        assert json.loads(cache_file.read_text()) == {}

    def test_cache_file_from_environment(
        self, cache_file: Path, host: dict[str, MagicMock]
    ) -> None:
        result = CliRunner().invoke(
            cli, LINUX_FLAGS, env={"IOLAUNCH_CACHE_FILE": str(cache_file)}
        )
        assert result.exit_code == 0, result.output
        assert json.loads(cache_file.read_text())["device_name"] == "dev1"

    def test_beta_help_mentions_pruning(self) -> None:
        beta = next(param for param in cli.params if param.name == "beta")
        assert "io-launch-beta images are not pruned" in beta.help

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

"""Launch arguments for iolauncher.

Bundles the worker identity and platform choices into a single immutable
record, plus the per-field validators the resolver enforces.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .constants import GPU_CHOICES, OS_MACOS, VALID_ARCH_CHOICES, VALID_OS_CHOICES

_CANONICAL_UUID = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
_HEX_UUID = re.compile(r"[0-9a-fA-F]{32}")


def is_valid_uuid(value: str) -> bool:
    """True if value is a UUID in one of the standard textual forms.

    Accepted: canonical 8-4-4-4-12 hex, the same wrapped in braces, with a
    "urn:uuid:" prefix, or 32 bare hex digits. Any version is accepted.
    """
    if not isinstance(value, str):
        return False
    if len(value) == 45 and value[:9].lower() == "urn:uuid:":
        value = value[9:]
    elif len(value) == 38 and value.startswith("{") and value.endswith("}"):
        value = value[1:-1]
    return bool(_CANONICAL_UUID.fullmatch(value) or _HEX_UUID.fullmatch(value))


def is_valid_os(value: str) -> bool:
    return value in VALID_OS_CHOICES


def is_valid_arch(value: str) -> bool:
    return value in VALID_ARCH_CHOICES


def is_valid_gpu_choice(value: str) -> bool:
    return value in GPU_CHOICES


def normalize_value(value: Any) -> str:
    """Convert a raw flag or cached JSON value to the string form used by Arguments.

    None becomes "", JSON booleans become "true"/"false".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


@dataclass(frozen=True)
class Arguments:
    """Resolved (or partially resolved) launch configuration.

    Empty strings mean "not provided". use_gpus is kept as the literal
    "true"/"false" string because that is what the worker image receives.
    """

    device_name: str = ""
    device_id: str = ""
    user_id: str = ""
    operating_system: str = ""
    use_gpus: str = ""
    architecture: str = ""
    beta: bool = False

    @classmethod
    def from_cli(
        cls,
        *,
        device_name: str | None = None,
        device_id: str | None = None,
        user_id: str | None = None,
        operating_system: str | None = None,
        usegpus: str | None = None,
        arch: str | None = None,
        beta: bool = False,
    ) -> Arguments:
        """Create Arguments from CLI flags.

        Handles flag naming (--usegpus -> use_gpus, --arch -> architecture).
        """
        return cls(
            device_name=normalize_value(device_name),
            device_id=normalize_value(device_id),
            user_id=normalize_value(user_id),
            operating_system=normalize_value(operating_system),
            use_gpus=normalize_value(usegpus),
            architecture=normalize_value(arch),
            beta=beta,
        )

    @property
    def is_macos(self) -> bool:
        return self.operating_system == OS_MACOS

    @property
    def wants_gpus(self) -> bool:
        return self.use_gpus == "true"

    def to_cache(self) -> dict[str, str]:
        """Snapshot persisted after a successful run.

        Architecture and beta are deliberately not part of the snapshot.
        """
        return {
            "device_name": self.device_name,
            "device_id": self.device_id,
            "user_id": self.user_id,
            "operating_system": self.operating_system,
            "usegpus": self.use_gpus,
        }

"""Device cache management for iolauncher.

The cache is a single JSON object holding the identity of the last
successful launch. It is read once at startup and overwritten once the
configuration has been resolved.
"""

from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

from .arguments import Arguments, normalize_value
from .constants import CACHE_FILE_ENV, CACHE_FILE_NAME
from .errors import CacheError
from .logging import get_logger

logger = get_logger(__name__)


def get_cache_path() -> Path:
    """Get the path to the device cache file.

    IOLAUNCH_CACHE_FILE overrides the default file in the working directory.
    """
    override = os.environ.get(CACHE_FILE_ENV)
    if override:
        return Path(override).expanduser()
    return Path.cwd() / CACHE_FILE_NAME


def load_cache(path: Path | None = None) -> dict[str, Any]:
    """Load the cache snapshot.

    Raises:
        CacheError: If the file is missing, unreadable, or not a JSON object.
    """
    cache_path = path or get_cache_path()
    try:
        data = json.loads(cache_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CacheError(f"Device cache not found: {cache_path}") from e
    except OSError as e:
        raise CacheError(f"Cannot read device cache {cache_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CacheError(f"Device cache {cache_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CacheError(f"Device cache {cache_path} must contain a JSON object")

    logger.debug("Loaded cache from %s (keys: %s)", cache_path, ", ".join(sorted(data)))
    return data


def save_cache(args: Arguments, path: Path | None = None) -> Path:
    """Overwrite the cache with the resolved identity.

    Raises:
        CacheError: If the file cannot be written.
    """
    cache_path = path or get_cache_path()
    try:
        cache_path.write_text(
            json.dumps(args.to_cache(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as e:
        raise CacheError(f"Cannot write device cache {cache_path}: {e}") from e
    logger.debug("Saved cache to %s", cache_path)
    return cache_path


def apply_cache(args: Arguments, cache: dict[str, Any]) -> Arguments:
    """Fill empty fields of args from the cache, each key into its own field.

    Flags always win; only empty fields are taken from the cache.
    """

    def pick(current: str, key: str) -> str:
        return current or normalize_value(cache.get(key))

    return replace(
        args,
        device_name=pick(args.device_name, "device_name"),
        device_id=pick(args.device_id, "device_id"),
        user_id=pick(args.user_id, "user_id"),
        operating_system=pick(args.operating_system, "operating_system"),
        use_gpus=pick(args.use_gpus, "usegpus"),
    )

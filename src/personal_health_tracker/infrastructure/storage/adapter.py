"""
Persistence adapters for on-device storage.

An adapter stores opaque text blobs under fixed string keys. Every save
replaces the whole value for its key; keys are independent of each other.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from personal_health_tracker.utils.exceptions import ConfigurationError, PersistenceError
from personal_health_tracker.utils.parameters import StorageConfig

logger = logging.getLogger(__name__)

ACTIVITIES_KEY = "activities"
TIPS_KEY = "healthTips"
STEPS_KEY = "steps"
CALORIES_KEY = "calories"
WATER_KEY = "water"


class PersistenceAdapter(ABC):
    """Durable key/value storage of serialized collections."""

    @abstractmethod
    async def load(self, key: str) -> str | None:
        """
        Load the blob stored under a key.

        Args:
            key: Storage key.

        Returns:
            Stored blob, or None if nothing is stored under the key.

        Raises:
            PersistenceError: If the storage medium cannot be read.
        """

    @abstractmethod
    async def save(self, key: str, blob: str) -> None:
        """
        Replace the blob stored under a key.

        Args:
            key: Storage key.
            blob: Serialized value.

        Raises:
            PersistenceError: If the storage medium cannot be written.
        """


class MemoryAdapter(PersistenceAdapter):
    """Adapter keeping blobs in process memory."""

    def __init__(self, blobs: dict[str, str] | None = None) -> None:
        self.blobs: dict[str, str] = dict(blobs or {})

    async def load(self, key: str) -> str | None:
        return self.blobs.get(key)

    async def save(self, key: str, blob: str) -> None:
        self.blobs[key] = blob


class JsonFileAdapter(PersistenceAdapter):
    """
    Adapter storing each key as a JSON file in a directory.

    Writes go to a temporary sibling file that is then renamed over the
    target, so a reader sees either the old or the new blob.
    """

    def __init__(self, directory: str | Path) -> None:
        """
        Initialize file adapter.

        Args:
            directory: Directory holding one ``<key>.json`` file per key.
        """
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def _read(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _write(self, path: Path, blob: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(blob, encoding="utf-8")
        os.replace(tmp, path)

    async def load(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            blob = await asyncio.to_thread(self._read, path)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

        if blob is None:
            logger.debug(f"No stored data for key '{key}'")
        return blob

    async def save(self, key: str, blob: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, blob)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Saved key '{key}' to {path}")


def build_adapter(config: StorageConfig) -> PersistenceAdapter:
    """
    Create the adapter selected by configuration.

    Args:
        config: Storage configuration.

    Returns:
        Persistence adapter instance.

    Raises:
        ConfigurationError: If the backend is unknown.
    """
    if config.backend == "json":
        return JsonFileAdapter(config.dir)
    if config.backend == "memory":
        return MemoryAdapter()
    raise ConfigurationError(f"Unknown storage backend: {config.backend}")

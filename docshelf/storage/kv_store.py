from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import aiofiles
import aiofiles.os

from docshelf.storage.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """
    Abstract base class for durable string key -> string value storage.

    There are no transactions: every `set` replaces one value and nothing
    else. Read-modify-write sequences built on top of this port are not
    atomic.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete a key. Removing an absent key is not an error."""
        pass


class JsonKeyValueStore(KeyValueStore):
    """
    Key-value store persisted as a single JSON object on disk.

    The whole file is read on every call and rewritten on every write, so
    no handle or cached copy outlives a call.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> Optional[str]:
        data = await self._read_all()
        value = data.get(key)
        if value is None:
            return None
        return str(value)

    async def set(self, key: str, value: str) -> None:
        data = await self._read_all()
        data[key] = value
        await self._write_all(data)

    async def remove(self, key: str) -> None:
        data = await self._read_all()
        if key not in data:
            return
        del data[key]
        await self._write_all(data)

    async def _read_all(self) -> Dict[str, str]:
        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError as e:
            logger.warning(f"Ignoring undecodable key-value file {self._path}: {e}")
            return {}
        except OSError as e:
            raise StorageError(f"Could not read {self._path}: {e}") from e

        if not content.strip():
            return {}
        try:
            raw = json.loads(content)
        except (json.JSONDecodeError, RecursionError) as e:
            # Same recovery as a missing file: the next write starts a fresh document.
            logger.warning(f"Ignoring unreadable key-value file {self._path}: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring key-value file {self._path}: top-level value is not an object")
            return {}
        return raw

    async def _write_all(self, data: Dict[str, str]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            await aiofiles.os.makedirs(self._path.parent, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2))
            await aiofiles.os.replace(tmp_path, self._path)
        except OSError as e:
            raise StorageError(f"Could not write {self._path}: {e}") from e

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterator, List

import aiofiles
import aiofiles.os

from docshelf.storage.errors import InvalidFilenameError, PackNotFoundError, StorageError

logger = logging.getLogger(__name__)

# In-progress downloads; never listed as packs.
PARTIAL_SUFFIX = ".part"


def validate_filename(filename: str) -> str:
    """
    Make sure a pack filename names a file directly inside the directory.
    """
    if not filename or not filename.strip():
        raise InvalidFilenameError("Pack filename is empty")
    if "/" in filename or "\\" in filename or "\x00" in filename:
        raise InvalidFilenameError(f"Pack filename {filename!r} contains a path separator")
    if filename in (".", ".."):
        raise InvalidFilenameError(f"Pack filename {filename!r} is not a file name")
    if filename.endswith(PARTIAL_SUFFIX):
        raise InvalidFilenameError(f"Pack filename {filename!r} uses the reserved {PARTIAL_SUFFIX} suffix")
    return filename


class PackDirectory(ABC):
    """
    Abstract base class for the sandboxed directory holding overlay pack files.

    Every method fully acquires and releases what it touches; implementations
    keep no open handles between calls. I/O problems are reported as
    StorageError subclasses.
    """

    @abstractmethod
    async def ensure_exists(self) -> None:
        """Create the directory if it is missing. Idempotent."""
        pass

    @abstractmethod
    async def list_files(self) -> List[str]:
        """Return the names of the pack files, sorted by name."""
        pass

    @abstractmethod
    async def read_text(self, filename: str) -> str:
        """Return the content of one pack file decoded as UTF-8."""
        pass

    @abstractmethod
    async def write_stream(self, filename: str, chunks: AsyncIterator[bytes]) -> int:
        """
        Write a file from a stream of chunks and return the number of bytes written.

        The target only appears once the whole stream has been written. If the
        stream raises, nothing is left behind and the exception propagates.
        """
        pass

    @abstractmethod
    async def delete(self, filename: str) -> None:
        """
        Delete one pack file.

        Raises PackNotFoundError if there is no such file.
        """
        pass


class LocalPackDirectory(PackDirectory):
    """
    PackDirectory backed by a directory on the local filesystem.
    """

    def __init__(self, root: Path):
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, filename: str) -> Path:
        return self._root / validate_filename(filename)

    async def ensure_exists(self) -> None:
        try:
            await aiofiles.os.makedirs(self._root, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create pack directory {self._root}: {e}") from e

    async def list_files(self) -> List[str]:
        try:
            names = await aiofiles.os.listdir(self._root)
            files: List[str] = []
            for name in names:
                if name.endswith(PARTIAL_SUFFIX):
                    continue
                if await aiofiles.os.path.isfile(self._root / name):
                    files.append(name)
        except OSError as e:
            raise StorageError(f"Could not list pack directory {self._root}: {e}") from e
        return sorted(files)

    async def read_text(self, filename: str) -> str:
        path = self.path_for(filename)
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except FileNotFoundError as e:
            raise PackNotFoundError(f"Pack file {filename} does not exist") from e
        except OSError as e:
            raise StorageError(f"Could not read pack file {filename}: {e}") from e
        # Decoding errors are left to the caller: undecodable bytes are corrupt content, not I/O.
        return data.decode("utf-8-sig")

    async def write_stream(self, filename: str, chunks: AsyncIterator[bytes]) -> int:
        target = self.path_for(filename)
        tmp_path = target.with_name(target.name + PARTIAL_SUFFIX)
        written = 0
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                async for chunk in chunks:
                    await f.write(chunk)
                    written += len(chunk)
            await aiofiles.os.replace(tmp_path, target)
        except BaseException as e:
            await self._discard(tmp_path)
            if isinstance(e, OSError):
                raise StorageError(f"Could not write pack file {filename}: {e}") from e
            raise
        logger.debug(f"Wrote {written} bytes to {target}")
        return written

    async def delete(self, filename: str) -> None:
        path = self.path_for(filename)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise PackNotFoundError(f"Pack file {filename} does not exist") from e
        except OSError as e:
            raise StorageError(f"Could not delete pack file {filename}: {e}") from e

    async def _discard(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial file {path}: {e}")

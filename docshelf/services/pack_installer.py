"""
Download and removal of overlay language packs, plus the remote store index.

Downloads are written verbatim; their content is only checked on the next
catalog load, which deletes the file if it does not parse.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from docshelf.domain.models import FailureKind, PackOperationResult, StoreEntry
from docshelf.storage.errors import InvalidFilenameError, PackNotFoundError, StorageError
from docshelf.storage.pack_directory import PackDirectory, validate_filename

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0


class StoreIndexError(Exception):
    """The remote store index could not be fetched or did not have the expected shape."""


class PackInstaller:
    """
    Installs (create/update) and removes overlay pack files.

    Both operations are best-effort and report their outcome as a
    PackOperationResult instead of raising. No retries are attempted;
    the caller decides whether to try again.
    """

    def __init__(
        self,
        directory: PackDirectory,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        store_index_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.directory = directory
        self.timeout = timeout
        self.store_index_url = store_index_url
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(follow_redirects=True, timeout=self.timeout, transport=self._transport)

    async def install_pack(self, url: str, filename: str) -> PackOperationResult:
        """
        Download `url` into `filename` inside the pack directory.

        Succeeds only on HTTP 200 with a complete transfer. On any failure no
        file is left under `filename` by this call (an existing file with that
        name is kept as it was).
        """
        try:
            validate_filename(filename)
            await self.directory.ensure_exists()
        except InvalidFilenameError as e:
            return PackOperationResult.failed(FailureKind.INVALID_FILENAME, str(e))
        except StorageError as e:
            logger.error(f"Pack directory unavailable, cannot install {filename}: {e}")
            return PackOperationResult.failed(FailureKind.IO, str(e))

        logger.debug(f"Downloading pack from {url} to {filename}")
        try:
            async with self._client() as client:
                async with client.stream("GET", url) as response:
                    if response.status_code != 200:
                        logger.warning(f"Download of {url} failed with HTTP {response.status_code}")
                        return PackOperationResult.failed(
                            FailureKind.HTTP_STATUS, f"HTTP {response.status_code}"
                        )
                    written = await self.directory.write_stream(filename, response.aiter_bytes())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Download of {url} failed: {e}")
            return PackOperationResult.failed(FailureKind.NETWORK, str(e))
        except StorageError as e:
            logger.error(f"Could not store downloaded pack {filename}: {e}")
            return PackOperationResult.failed(FailureKind.IO, str(e))

        logger.info(f"Installed pack {filename} ({written} bytes) from {url}")
        return PackOperationResult.ok()

    async def remove_pack(self, filename: str) -> PackOperationResult:
        """
        Delete one overlay pack file. A missing file is reported as NOT_FOUND.
        """
        try:
            await self.directory.delete(filename)
        except InvalidFilenameError as e:
            return PackOperationResult.failed(FailureKind.INVALID_FILENAME, str(e))
        except PackNotFoundError as e:
            logger.info(f"Pack {filename} was already gone")
            return PackOperationResult.failed(FailureKind.NOT_FOUND, str(e))
        except StorageError as e:
            logger.error(f"Could not remove pack {filename}: {e}")
            return PackOperationResult.failed(FailureKind.IO, str(e))

        logger.info(f"Removed pack {filename}")
        return PackOperationResult.ok()

    async def installed_filenames(self) -> List[str]:
        try:
            return await self.directory.list_files()
        except StorageError as e:
            logger.warning(f"Could not list installed packs: {e}")
            return []

    async def fetch_store_index(self, url: Optional[str] = None) -> List[StoreEntry]:
        """
        Fetch the list of downloadable packs.

        Entries that do not validate are skipped. Raises StoreIndexError when
        the index itself cannot be fetched or is not a JSON list.
        """
        index_url = url or self.store_index_url
        if not index_url:
            raise StoreIndexError("No store index URL configured")

        try:
            async with self._client() as client:
                response = await client.get(index_url)
                response.raise_for_status()
                raw = response.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise StoreIndexError(f"Could not fetch store index from {index_url}: {e}") from e
        except (ValueError, RecursionError) as e:
            raise StoreIndexError(f"Store index at {index_url} is not valid JSON") from e

        if not isinstance(raw, list):
            raise StoreIndexError(f"Store index at {index_url} is not a list")

        entries: List[StoreEntry] = []
        for item in raw:
            try:
                entries.append(StoreEntry.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping malformed store index entry: {e.error_count()} invalid field(s)")
        return entries

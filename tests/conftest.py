"""Shared fixtures: in-memory stand-ins for the key-value store and the pack directory."""

from __future__ import annotations

import json
from typing import AsyncIterator, Dict, List, Optional

import pytest

from docshelf.domain.models import LanguagePack
from docshelf.storage.errors import PackNotFoundError, StorageError
from docshelf.storage.kv_store import KeyValueStore
from docshelf.storage.pack_directory import PackDirectory, validate_filename


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError("store offline")
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("store read-only")
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)


class MemoryPackDirectory(PackDirectory):
    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files: Dict[str, bytes] = dict(files or {})
        self.exists = False
        self.fail_listing = False
        self.fail_deletes = False

    def put_json(self, filename: str, document) -> None:
        self.files[filename] = json.dumps(document).encode("utf-8")

    async def ensure_exists(self) -> None:
        self.exists = True

    async def list_files(self) -> List[str]:
        if self.fail_listing:
            raise StorageError("directory unreachable")
        return sorted(self.files)

    async def read_text(self, filename: str) -> str:
        if filename not in self.files:
            raise PackNotFoundError(filename)
        return self.files[filename].decode("utf-8-sig")

    async def write_stream(self, filename: str, chunks: AsyncIterator[bytes]) -> int:
        validate_filename(filename)
        data = b""
        async for chunk in chunks:
            data += chunk
        self.files[filename] = data
        return len(data)

    async def delete(self, filename: str) -> None:
        validate_filename(filename)
        if self.fail_deletes:
            raise StorageError("read-only directory")
        if filename not in self.files:
            raise PackNotFoundError(filename)
        del self.files[filename]


def make_pack(pack_id: str, topic_ids: List[str], **fields) -> dict:
    """Pack document as it would appear in a JSON file."""
    doc = {
        "id": pack_id,
        "name": fields.pop("name", pack_id.title()),
        "icon": "*",
        "color": "#123456",
        "topics": [
            {
                "id": topic_id,
                "title": f"Title {topic_id}",
                "description": f"Description of {topic_id}",
                "code": f"code({topic_id})",
            }
            for topic_id in topic_ids
        ],
    }
    doc.update(fields)
    return doc


BASELINE_DOCS = [
    make_pack("python", ["py-1", "py-2", "py-3"], name="Python", category="Backend"),
    make_pack("javascript", ["js-1", "js-2"], name="JavaScript", category="Frontend"),
]


def baseline_loader() -> List[LanguagePack]:
    return [LanguagePack.model_validate(doc) for doc in BASELINE_DOCS]


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def pack_dir() -> MemoryPackDirectory:
    return MemoryPackDirectory()

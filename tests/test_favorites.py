import json

import pytest

from docshelf.data.pack_repository import PackRepository
from docshelf.services.favorites import FAVORITES_KEY, FavoritesStore
from docshelf.services.pack_installer import PackInstaller

from conftest import MemoryKeyValueStore, MemoryPackDirectory, baseline_loader, make_pack


@pytest.mark.asyncio
async def test_toggle_twice_restores_previous_set(kv_store: MemoryKeyValueStore) -> None:
    favorites = FavoritesStore(kv_store)
    await favorites.toggle("py-1")
    before = set(await favorites.favorite_ids())

    added = await favorites.toggle("js-1")
    assert await favorites.is_favorite("js-1") is True
    assert set(added) == before | {"js-1"}

    removed = await favorites.toggle("js-1")
    assert await favorites.is_favorite("js-1") is False
    assert set(removed) == before


@pytest.mark.asyncio
async def test_set_is_persisted_as_json_list(kv_store: MemoryKeyValueStore) -> None:
    favorites = FavoritesStore(kv_store)
    await favorites.toggle("a")
    await favorites.toggle("b")
    assert json.loads(kv_store.data[FAVORITES_KEY]) == ["a", "b"]
    assert await FavoritesStore(kv_store).favorite_ids() == ["a", "b"]


@pytest.mark.asyncio
@pytest.mark.parametrize("stored", ["not json", '{"a": 1}'])
async def test_malformed_value_reads_as_empty(stored: str) -> None:
    favorites = FavoritesStore(MemoryKeyValueStore({FAVORITES_KEY: stored}))
    assert await favorites.favorite_ids() == []
    assert await favorites.toggle("x") == ["x"]


@pytest.mark.asyncio
async def test_failed_write_returns_previous_list(kv_store: MemoryKeyValueStore) -> None:
    favorites = FavoritesStore(kv_store)
    await favorites.toggle("a")
    kv_store.fail_writes = True
    assert await favorites.toggle("b") == ["a"]
    assert await favorites.is_favorite("b") is False


@pytest.mark.asyncio
async def test_list_favorites_resolves_topics(kv_store: MemoryKeyValueStore, pack_dir: MemoryPackDirectory) -> None:
    repo = PackRepository(pack_dir, baseline_loader=baseline_loader)
    favorites = FavoritesStore(kv_store)
    await favorites.toggle("js-2")
    await favorites.toggle("py-1")

    topics = await favorites.list_favorites(await repo.load_catalog())
    assert [(t.id, t.language_name) for t in topics] == [("js-2", "JavaScript"), ("py-1", "Python")]


@pytest.mark.asyncio
async def test_favorite_of_deleted_pack_disappears(kv_store: MemoryKeyValueStore, pack_dir: MemoryPackDirectory) -> None:
    pack_dir.put_json("rust.json", make_pack("rust", ["rs-ownership", "rs-traits"], name="Rust"))
    repo = PackRepository(pack_dir, baseline_loader=baseline_loader)
    installer = PackInstaller(pack_dir)
    favorites = FavoritesStore(kv_store)

    await favorites.toggle("rs-ownership")
    await favorites.toggle("py-2")
    assert [t.id for t in await favorites.list_favorites(await repo.load_catalog())] == ["rs-ownership", "py-2"]

    assert await installer.remove_pack("rust.json")

    topics = await favorites.list_favorites(await repo.load_catalog())
    assert [t.id for t in topics] == ["py-2"]
    # The stale id stays stored; it is only hidden from the view.
    assert await favorites.is_favorite("rs-ownership") is True

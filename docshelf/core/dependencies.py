from pathlib import Path
from typing import Optional
import os

from docshelf.core.config import load_library_config
from docshelf.data.pack_repository import PackRepository
from docshelf.domain.models import LibraryConfig
from docshelf.services.favorites import FavoritesStore
from docshelf.services.pack_installer import PackInstaller
from docshelf.services.streak import StreakTracker
from docshelf.storage.kv_store import JsonKeyValueStore, KeyValueStore
from docshelf.storage.pack_directory import LocalPackDirectory, PackDirectory

DATA_ROOT_ENV_VAR = "DOCSHELF_DATA_DIR"
_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _REPO_ROOT / "data"
KV_STORE_FILENAME = "kv_store.json"

_config: Optional[LibraryConfig] = None
_kv_store: Optional[KeyValueStore] = None
_pack_directory: Optional[PackDirectory] = None
_pack_repository: Optional[PackRepository] = None
_pack_installer: Optional[PackInstaller] = None
_favorites_store: Optional[FavoritesStore] = None
_streak_tracker: Optional[StreakTracker] = None

def get_data_dir() -> Path:
    env_path = os.environ.get(DATA_ROOT_ENV_VAR)
    if env_path:
        d = Path(env_path).expanduser()
    else:
        d = _DEFAULT_DATA_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d

def get_config() -> LibraryConfig:
    global _config
    if _config is None:
        _config = load_library_config(get_data_dir())
    return _config

def get_kv_store() -> KeyValueStore:
    global _kv_store
    if _kv_store is None:
        _kv_store = JsonKeyValueStore(get_data_dir() / KV_STORE_FILENAME)
    return _kv_store

def get_pack_directory() -> PackDirectory:
    global _pack_directory
    if _pack_directory is None:
        _pack_directory = LocalPackDirectory(get_data_dir() / get_config().overlay_dir_name)
    return _pack_directory

def get_pack_repository() -> PackRepository:
    global _pack_repository
    if _pack_repository is None:
        _pack_repository = PackRepository(get_pack_directory())
    return _pack_repository

def get_pack_installer() -> PackInstaller:
    global _pack_installer
    if _pack_installer is None:
        config = get_config()
        _pack_installer = PackInstaller(
            get_pack_directory(),
            timeout=config.download_timeout_seconds,
            store_index_url=config.store_index_url,
        )
    return _pack_installer

def get_favorites_store() -> FavoritesStore:
    global _favorites_store
    if _favorites_store is None:
        _favorites_store = FavoritesStore(get_kv_store())
    return _favorites_store

def get_streak_tracker() -> StreakTracker:
    global _streak_tracker
    if _streak_tracker is None:
        _streak_tracker = StreakTracker(get_kv_store())
    return _streak_tracker

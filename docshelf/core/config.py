from __future__ import annotations

import json
import logging
from pathlib import Path

from docshelf.domain.models import LibraryConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "library.json"


def load_library_config(data_dir: Path) -> LibraryConfig:
    """
    Load library.json, merging with defaults for any missing fields,
    and write it back so any new fields are persisted.
    """
    path = data_dir / CONFIG_FILENAME
    if path.exists():
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            config = LibraryConfig(**raw)
        except Exception as e:
            # If parsing fails, fall back to defaults and overwrite file.
            logger.warning(f"Invalid {path}, using defaults: {e}")
            config = LibraryConfig()
    else:
        config = LibraryConfig()

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    return config

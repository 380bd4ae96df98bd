"""
The read-only set of language packs bundled with the application.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from docshelf.domain.models import BaselineDocument, LanguagePack

BUNDLED_PACKS_PATH = Path(__file__).resolve().parent / "bundled" / "languages.json"


def load_baseline(path: Optional[Path] = None) -> List[LanguagePack]:
    """
    Parse the bundled `{"languages": [...]}` document into fresh pack objects.

    Every call returns new objects, so merging overlays can never alter the
    baseline seen by a later call. A broken bundled file is a packaging bug
    and is allowed to raise.
    """
    source = path or BUNDLED_PACKS_PATH
    raw = json.loads(source.read_text(encoding="utf-8"))
    return list(BaselineDocument(**raw).languages)

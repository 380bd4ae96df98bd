from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from docshelf.data.baseline import load_baseline
from docshelf.domain.models import CatalogLoadReport, LanguagePack
from docshelf.storage.errors import StorageError
from docshelf.storage.pack_directory import PackDirectory

logger = logging.getLogger(__name__)


class PackRepository:
    """
    Stateless projector over the bundled baseline and the overlay directory.

    Nothing is cached between calls: every load reads the baseline and every
    overlay file again. Loading never fails because of overlay storage or
    overlay content; it falls back to whatever subset can be trusted.
    """

    def __init__(
        self,
        directory: PackDirectory,
        baseline_loader: Callable[[], List[LanguagePack]] = load_baseline,
    ):
        self.directory = directory
        self._baseline_loader = baseline_loader

    async def load_catalog(self) -> List[LanguagePack]:
        """Return the merged catalog: baseline packs, then overlay packs in file-name order."""
        report = await self.load_catalog_report()
        return report.packs

    async def load_catalog_report(self) -> CatalogLoadReport:
        """
        Build the merged catalog and describe what happened to the overlay files.

        For each overlay file, in listing order:
        * valid document: replaces any pack with the same id already in the
          result (baseline or earlier overlay) and is appended at the end;
        * parses but lacks `id`/`topics`: skipped and left on disk so a later
          update can fix it;
        * does not parse: deleted on the spot so it cannot break later loads.

        If the directory cannot be created or listed, the baseline alone is
        returned.
        """
        packs = list(self._baseline_loader())
        overlay_ids: List[str] = []
        skipped: List[str] = []
        quarantined: List[str] = []

        try:
            await self.directory.ensure_exists()
            filenames = await self.directory.list_files()
        except StorageError as e:
            logger.warning(f"Overlay directory unavailable, using bundled packs only: {e}")
            return CatalogLoadReport(packs=packs, overlay_error=str(e))

        for filename in filenames:
            try:
                content = await self.directory.read_text(filename)
                raw = json.loads(content)
            except StorageError as e:
                logger.warning(f"Could not read overlay pack {filename}, skipping: {e}")
                continue
            except (ValueError, RecursionError) as e:
                # Bad JSON, bad UTF-8, or nesting too deep for the decoder.
                logger.warning(f"Corrupt overlay pack {filename}, deleting: {e}")
                if await self._quarantine(filename):
                    quarantined.append(filename)
                continue

            pack = _pack_from_document(filename, raw)
            if pack is None:
                skipped.append(filename)
                continue

            packs = [existing for existing in packs if existing.id != pack.id]
            packs.append(pack)
            if pack.id not in overlay_ids:
                overlay_ids.append(pack.id)

        return CatalogLoadReport(
            packs=packs,
            overlay_ids=overlay_ids,
            skipped_files=skipped,
            quarantined_files=quarantined,
        )

    async def _quarantine(self, filename: str) -> bool:
        try:
            await self.directory.delete(filename)
        except StorageError as e:
            logger.error(f"Could not delete corrupt overlay pack {filename}: {e}")
            return False
        return True


def _pack_from_document(filename: str, raw: Any) -> Optional[LanguagePack]:
    """
    Validate a parsed overlay document. Returns None when it is incomplete.
    """
    if not isinstance(raw, dict):
        logger.info(f"Skipping overlay pack {filename}: document is not an object")
        return None

    pack_id = raw.get("id")
    if not isinstance(pack_id, str) or not pack_id:
        logger.info(f"Skipping overlay pack {filename}: missing 'id'")
        return None
    if not isinstance(raw.get("topics"), list):
        logger.info(f"Skipping overlay pack {filename}: 'topics' is missing or not a list")
        return None

    try:
        return LanguagePack.model_validate(raw)
    except ValidationError as e:
        logger.info(f"Skipping overlay pack {filename}: {e.error_count()} invalid field(s)")
        return None

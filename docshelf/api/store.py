"""
Doc Store endpoints: browse the remote index, install and remove packs.

Install and remove always answer 200 with the operation result; a failed
download is a normal outcome for the caller to report, not a server error.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from docshelf.core.dependencies import get_pack_installer
from docshelf.domain.catalog_views import filter_store_entries
from docshelf.domain.models import InstallRequest, PackOperationResult, StoreListing
from docshelf.services.pack_installer import PackInstaller, StoreIndexError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[StoreListing])
async def list_store(
    q: Optional[str] = Query(default=None, description="Filter on pack name or category."),
    installer: PackInstaller = Depends(get_pack_installer),
) -> List[StoreListing]:
    """
    Downloadable packs from the remote index, flagged when their file is already installed.
    """
    try:
        entries = await installer.fetch_store_index()
    except StoreIndexError as e:
        logger.warning(f"Store index unavailable: {e}")
        raise HTTPException(status_code=502, detail="Could not connect to the store")

    installed = set(await installer.installed_filenames())
    return [
        StoreListing(**entry.model_dump(), installed=entry.filename in installed)
        for entry in filter_store_entries(entries, q)
    ]


@router.post("/install", response_model=PackOperationResult)
async def install_pack(
    body: InstallRequest,
    installer: PackInstaller = Depends(get_pack_installer),
) -> PackOperationResult:
    return await installer.install_pack(body.url, body.filename)


@router.delete("/packs/{filename}", response_model=PackOperationResult)
async def remove_pack(
    filename: str,
    installer: PackInstaller = Depends(get_pack_installer),
) -> PackOperationResult:
    return await installer.remove_pack(filename)

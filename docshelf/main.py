import logging

from fastapi import FastAPI

from docshelf import __version__
from docshelf.api.library import router as library_router
from docshelf.api.store import router as store_router
from docshelf.core.dependencies import get_config, get_pack_directory
from docshelf.storage.errors import StorageError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Docshelf",
    version=__version__,
    description="Offline reference-document library: bundled and downloaded language packs, quiz, streak and favorites.",
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Load library.json (writing defaults for missing fields), apply the
    configured log level and make sure the pack directory exists.
    """
    config = get_config()
    logging.getLogger().setLevel(config.log_level.upper())

    try:
        await get_pack_directory().ensure_exists()
    except StorageError as e:
        # The catalog still loads from the bundled packs alone.
        logger.error(f"Pack directory unavailable: {e}")


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(library_router, prefix="/library", tags=["library"])
app.include_router(store_router, prefix="/store", tags=["store"])


if __name__ == "__main__":
    """
    Allow running `python -m docshelf.main` to start the Uvicorn development server.
    """
    import uvicorn

    uvicorn.run(
        "docshelf.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )

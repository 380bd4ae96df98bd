"""
Read endpoints over the merged catalog, plus the streak and favorites writes.

Every request loads the catalog again from the bundled packs and the overlay
directory; nothing is cached between requests.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from docshelf.core.dependencies import (
    get_favorites_store,
    get_pack_repository,
    get_streak_tracker,
)
from docshelf.data.pack_repository import PackRepository
from docshelf.domain.catalog_views import (
    categorize,
    find_language,
    find_topic,
    group_topics,
    topics_of,
)
from docshelf.domain.models import (
    CatalogSection,
    EnrichedTopic,
    LanguagePack,
    Quiz,
    StreakStatus,
    Topic,
    TopicSection,
)
from docshelf.domain.quiz import generate_quiz
from docshelf.services.favorites import FavoritesStore
from docshelf.services.streak import StreakTracker

router = APIRouter()


# ---------------------------------------------------------------------------
# Languages and topics
# ---------------------------------------------------------------------------

@router.get("/languages", response_model=List[CatalogSection])
async def list_languages(repo: PackRepository = Depends(get_pack_repository)) -> List[CatalogSection]:
    """
    All packs grouped by category, in the order categories first appear.
    """
    return categorize(await repo.load_catalog())


@router.get("/languages/{language_id}", response_model=LanguagePack)
async def get_language(language_id: str, repo: PackRepository = Depends(get_pack_repository)) -> LanguagePack:
    pack = find_language(await repo.load_catalog(), language_id)
    if not pack:
        raise HTTPException(status_code=404, detail="Language not found")
    return pack


@router.get("/languages/{language_id}/topics", response_model=List[Topic])
async def list_topics(language_id: str, repo: PackRepository = Depends(get_pack_repository)) -> List[Topic]:
    """
    Topics of one language. Unknown languages have no topics.
    """
    return topics_of(await repo.load_catalog(), language_id)


@router.get("/languages/{language_id}/sections", response_model=List[TopicSection])
async def list_topic_sections(
    language_id: str, repo: PackRepository = Depends(get_pack_repository)
) -> List[TopicSection]:
    """
    Topics of one language grouped into sections, as the language screen shows them.
    """
    return group_topics(topics_of(await repo.load_catalog(), language_id))


@router.get("/topics/{topic_id}", response_model=EnrichedTopic)
async def get_topic(topic_id: str, repo: PackRepository = Depends(get_pack_repository)) -> EnrichedTopic:
    topic = find_topic(await repo.load_catalog(), topic_id)
    if not topic:
        raise HTTPException(status_code=404, detail="Topic not found")
    return topic


# ---------------------------------------------------------------------------
# Daily quiz and streak
# ---------------------------------------------------------------------------

@router.get("/quiz", response_model=Quiz)
async def get_quiz(repo: PackRepository = Depends(get_pack_repository)):
    """
    A new random question. 204 No Content when the catalog is too small for one.
    """
    quiz = generate_quiz(await repo.load_catalog())
    if quiz is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return quiz


@router.get("/streak", response_model=StreakStatus)
async def get_streak(tracker: StreakTracker = Depends(get_streak_tracker)) -> StreakStatus:
    return await tracker.get_streak()


@router.post("/streak/complete", response_model=StreakStatus)
async def complete_daily_task(tracker: StreakTracker = Depends(get_streak_tracker)) -> StreakStatus:
    return await tracker.complete_daily_task()


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------

@router.get("/favorites", response_model=List[EnrichedTopic])
async def list_favorites(
    repo: PackRepository = Depends(get_pack_repository),
    favorites: FavoritesStore = Depends(get_favorites_store),
) -> List[EnrichedTopic]:
    return await favorites.list_favorites(await repo.load_catalog())


@router.get("/favorites/{topic_id}")
async def get_favorite(topic_id: str, favorites: FavoritesStore = Depends(get_favorites_store)) -> dict:
    return {"topic_id": topic_id, "favorite": await favorites.is_favorite(topic_id)}


@router.post("/favorites/{topic_id}/toggle")
async def toggle_favorite(topic_id: str, favorites: FavoritesStore = Depends(get_favorites_store)) -> dict:
    ids = await favorites.toggle(topic_id)
    return {"topic_id": topic_id, "favorite": topic_id in ids, "favorites": ids}

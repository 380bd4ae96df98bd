"""
Pure read views derived from a loaded catalog.

All lookups scan the catalog in order and take the first match, so when the
same topic id appears in more than one pack the earlier pack wins.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from docshelf.domain.models import (
    CatalogSection,
    EnrichedTopic,
    LanguagePack,
    StoreEntry,
    Topic,
    TopicSection,
)


def categorize(catalog: Iterable[LanguagePack]) -> List[CatalogSection]:
    """
    Group packs by category, sections in order of first appearance.
    """
    sections: Dict[str, CatalogSection] = {}
    for pack in catalog:
        section = sections.get(pack.category)
        if section is None:
            section = sections[pack.category] = CatalogSection(title=pack.category)
        section.packs.append(pack)
    return list(sections.values())


def group_topics(topics: Iterable[Topic]) -> List[TopicSection]:
    """
    Split a language's topics into sections by `group`, sections in order of
    first appearance. Topics without a group land in "General".
    """
    sections: Dict[str, TopicSection] = {}
    for topic in topics:
        section = sections.get(topic.group)
        if section is None:
            section = sections[topic.group] = TopicSection(title=topic.group)
        section.topics.append(topic)
    return list(sections.values())


def find_language(catalog: Iterable[LanguagePack], language_id: str) -> Optional[LanguagePack]:
    for pack in catalog:
        if pack.id == language_id:
            return pack
    return None


def topics_of(catalog: Iterable[LanguagePack], language_id: str) -> List[Topic]:
    pack = find_language(catalog, language_id)
    return list(pack.topics) if pack else []


def find_topic(catalog: Iterable[LanguagePack], topic_id: str) -> Optional[EnrichedTopic]:
    """
    Return the first topic with this id, with its pack's display metadata attached.
    """
    for pack in catalog:
        for topic in pack.topics:
            if topic.id == topic_id:
                return EnrichedTopic.from_pack(topic, pack)
    return None


def enrich_favorites(catalog: Iterable[LanguagePack], favorite_ids: Iterable[str]) -> List[EnrichedTopic]:
    """
    Resolve favorite topic ids against the catalog, keeping favorites order.

    Ids that no longer resolve (their pack was deleted or replaced) are left
    out of the result.
    """
    packs = list(catalog)
    found: List[EnrichedTopic] = []
    for topic_id in favorite_ids:
        topic = find_topic(packs, topic_id)
        if topic is not None:
            found.append(topic)
    return found


def filter_store_entries(entries: Iterable[StoreEntry], query: Optional[str]) -> List[StoreEntry]:
    """
    Case-insensitive substring match on name or category. An empty query keeps everything.
    """
    q = (query or "").strip().casefold()
    if not q:
        return list(entries)
    return [e for e in entries if q in e.name.casefold() or q in e.category.casefold()]

"""
Multiple-choice quiz built from every topic in the catalog.
"""
from __future__ import annotations

import random
from typing import Iterable, List, Optional

from docshelf.domain.models import EnrichedTopic, LanguagePack, Quiz, QuizOption

OPTION_COUNT = 4


def _topic_pool(catalog: Iterable[LanguagePack]) -> List[EnrichedTopic]:
    return [EnrichedTopic.from_pack(topic, pack) for pack in catalog for topic in pack.topics]


def _option(topic: EnrichedTopic) -> QuizOption:
    return QuizOption(
        id=topic.id,
        title=topic.title,
        language_name=topic.language_name,
        language_color=topic.language_color,
    )


def generate_quiz(catalog: Iterable[LanguagePack], rng: Optional[random.Random] = None) -> Optional[Quiz]:
    """
    Pick a random topic and ask which concept its description belongs to.

    The correct topic is drawn uniformly from all topics. The three wrong
    answers are the first topics of a shuffled copy of the pool whose ids
    differ from the correct one and from each other, then the four options
    are shuffled into display order.

    Returns None when the catalog holds fewer than four topics, or when
    duplicate topic ids across packs leave fewer than three distinct wrong
    answers.

    Pass a seeded `random.Random` as `rng` for reproducible quizzes.
    """
    rng = rng or random.Random()
    pool = _topic_pool(catalog)
    if len(pool) < OPTION_COUNT:
        return None

    correct = pool[rng.randrange(len(pool))]

    candidates = list(pool)
    rng.shuffle(candidates)
    chosen = [correct]
    seen_ids = {correct.id}
    for topic in candidates:
        if len(chosen) == OPTION_COUNT:
            break
        if topic.id in seen_ids:
            continue
        seen_ids.add(topic.id)
        chosen.append(topic)

    if len(chosen) < OPTION_COUNT:
        return None

    options = [_option(topic) for topic in chosen]
    rng.shuffle(options)

    return Quiz(
        snippet=correct.description,
        language=correct.language_name,
        options=options,
        correct_option_id=correct.id,
    )

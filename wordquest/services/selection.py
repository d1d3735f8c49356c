"""Build a practice queue from a child's word (or sentence) pool.

The queue mixes three kinds of items, by default 60% words the child still
needs to practise, 20% words kept warm for maintenance and 20% brand new
words. Fully mastered items are never offered. If a category cannot fill
its share, any other eligible items fill the gap.
"""

from __future__ import annotations

import logging
import random
from typing import Protocol, Sequence, TypeVar

from wordquest.config import Settings, settings
from wordquest.models import MasteryStage, PracticeItem
from wordquest.services.mastery import mastery_level
from wordquest.validation import require_non_negative

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Shuffler(Protocol):
    def shuffle(self, x: list) -> None: ...


def _shuffled(items: Sequence[T], rng: Shuffler) -> list[T]:
    copy = list(items)
    rng.shuffle(copy)
    return copy


def _ceil_share(count: int, pct: int) -> int:
    return -(-count * pct // 100)


def categorise(
    pool: Sequence[PracticeItem],
    config: Settings = settings,
) -> tuple[list[PracticeItem], list[PracticeItem], list[PracticeItem]]:
    """Split *pool* into (needs_practice, maintenance, new); mastered items are dropped."""
    needs_practice: list[PracticeItem] = []
    maintenance: list[PracticeItem] = []
    new: list[PracticeItem] = []

    for item in pool:
        if item.is_new:
            new.append(item)
            continue
        if item.current_stage == MasteryStage.MASTERED:
            continue
        level = mastery_level(item.times_practiced, item.times_correct, config)
        if level < config.maintenance_min_level:
            needs_practice.append(item)
        elif level < config.max_mastery_level:
            maintenance.append(item)
        # Level 5 words are fully mastered

    return needs_practice, maintenance, new


def quotas(count: int, config: Settings = settings) -> tuple[int, int, int]:
    """Per-category counts: needs and maintenance round up, new gets the rest."""
    needs = _ceil_share(count, config.needs_practice_pct)
    maintenance = _ceil_share(count, config.maintenance_pct)
    new = max(count - needs - maintenance, 0)
    return needs, maintenance, new


def select_practice_items(
    pool: Sequence[PracticeItem],
    count: int,
    rng: Shuffler | None = None,
    config: Settings = settings,
) -> list[PracticeItem]:
    """Return up to *count* items to practise, in presentation order.

    *rng* only needs a ``shuffle`` method; pass a seeded ``random.Random``
    for reproducible queues.
    """
    require_non_negative("count", count)
    if count == 0:
        return []
    rng = rng or random.Random()

    needs_practice, maintenance, new = categorise(pool, config)
    needs_quota, maintenance_quota, new_quota = quotas(count, config)

    result: list[PracticeItem] = []
    result.extend(_shuffled(needs_practice, rng)[:needs_quota])
    result.extend(_shuffled(maintenance, rng)[:maintenance_quota])
    result.extend(_shuffled(new, rng)[:new_quota])

    # --- Backfill from whatever is left ---
    if len(result) < count:
        chosen = {item.id for item in result}
        remaining = []
        for item in needs_practice + maintenance + new:
            if item.id not in chosen:
                chosen.add(item.id)
                remaining.append(item)
        result.extend(_shuffled(remaining, rng)[: count - len(result)])

    queue = _shuffled(result, rng)[:count]

    logger.debug(
        "Selected %d/%d items (pool: %d needs, %d maintenance, %d new)",
        len(queue),
        count,
        len(needs_practice),
        len(maintenance),
        len(new),
    )
    return queue

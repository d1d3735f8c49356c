"""Mastery tracking for practice words.

Stage is always derived from a word's counters; it is never stored as an
independent fact. Two scales exist:

  - a five-level scale (0-5) from the accuracy ratio, used for selecting
    words to practise;
  - the four word stages (seedling -> growing -> blooming -> mastered)
    shown to the child, which collapse the levels and add a best-accuracy
    bar before a word counts as mastered.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging

from wordquest.config import Settings, settings
from wordquest.models import MasteryStage, PracticeItem, StageUpdate
from wordquest.validation import (
    require_correct_within_attempts,
    require_non_negative,
    require_percentage,
)

logger = logging.getLogger(__name__)

_LEVEL_STAGES = {
    0: MasteryStage.SEEDLING,
    1: MasteryStage.GROWING,
    2: MasteryStage.GROWING,
    3: MasteryStage.BLOOMING,
    4: MasteryStage.BLOOMING,
    5: MasteryStage.BLOOMING,  # promoted to MASTERED only past the best-accuracy bar
}


def _check_counters(times_practiced: int, times_correct: int) -> None:
    require_non_negative("times_practiced", times_practiced)
    require_non_negative("times_correct", times_correct)
    require_correct_within_attempts(times_correct, times_practiced)


def mastery_level(times_practiced: int, times_correct: int, config: Settings = settings) -> int:
    """Five-level mastery from the accuracy ratio.

    Below the minimum attempt count (including zero attempts) the level is 0.
    """
    _check_counters(times_practiced, times_correct)
    if times_practiced < config.mastery_min_attempts or times_practiced == 0:
        return 0

    ratio = times_correct / times_practiced
    for min_ratio, level in config.mastery_level_bands:
        if ratio >= min_ratio:
            return level
    return 0


def classify_stage(
    times_practiced: int,
    times_correct: int,
    best_accuracy: float | None,
    config: Settings = settings,
) -> MasteryStage:
    """Map counters to a word stage, ignoring any stored stage."""
    require_percentage("best_accuracy", best_accuracy)
    level = mastery_level(times_practiced, times_correct, config)
    if (
        level >= config.max_mastery_level
        and best_accuracy is not None
        and best_accuracy >= config.mastered_best_accuracy
    ):
        return MasteryStage.MASTERED
    return _LEVEL_STAGES.get(level, MasteryStage.BLOOMING)


def update_stage(
    times_practiced: int,
    times_correct: int,
    best_accuracy: float | None,
    previous_stage: MasteryStage | str | None = None,
    config: Settings = settings,
) -> StageUpdate:
    """Recompute a word's stage after an attempt.

    Stages never move backwards here; the stage is the higher of the stored
    one and the freshly classified one, so recomputing from the same counters
    (and feeding the result back in) always gives the same answer.
    """
    if previous_stage is not None:
        previous_stage = MasteryStage(previous_stage)

    classified = classify_stage(times_practiced, times_correct, best_accuracy, config)
    stage = classified
    if previous_stage is not None and previous_stage > classified:
        stage = previous_stage

    just_advanced = previous_stage is not None and stage > previous_stage
    if just_advanced:
        logger.debug(
            "Stage advanced %s -> %s (%d/%d correct, best %s)",
            previous_stage.value,
            stage.value,
            times_correct,
            times_practiced,
            best_accuracy,
        )

    return StageUpdate(
        stage=stage,
        previous_stage=previous_stage,
        just_advanced=just_advanced,
        level=mastery_level(times_practiced, times_correct, config),
    )


def record_attempt(
    item: PracticeItem,
    correct: bool,
    accuracy: float | None = None,
    at: dt.datetime | None = None,
    config: Settings = settings,
) -> tuple[PracticeItem, StageUpdate]:
    """Apply one attempt to *item* and return its next version.

    *accuracy* is the attempt's percentage score (sentence attempts); a word
    attempt without one scores 100 when correct and 0 otherwise. The caller
    persists the returned item, ideally checking that the stored version is
    still ``item.version``.
    """
    if accuracy is None:
        accuracy = 100.0 if correct else 0.0
    require_percentage("accuracy", accuracy)

    times_practiced = item.times_practiced + 1
    times_correct = item.times_correct + (1 if correct else 0)
    best_accuracy = accuracy if item.best_accuracy is None else max(item.best_accuracy, accuracy)

    update = update_stage(
        times_practiced,
        times_correct,
        best_accuracy,
        previous_stage=item.current_stage,
        config=config,
    )

    updated = dataclasses.replace(
        item,
        times_practiced=times_practiced,
        times_correct=times_correct,
        best_accuracy=best_accuracy,
        last_practiced_at=at or dt.datetime.now(dt.timezone.utc),
        current_stage=update.stage if item.current_stage is not None else None,
        version=item.version + 1,
    )
    return updated, update

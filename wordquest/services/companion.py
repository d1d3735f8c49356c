"""Companion (pet) happiness and mood.

Only happiness, streak and the last practice date are ever stored. Decay
and mood are recomputed from those facts every time the companion is
read, so nothing drifts in the background.
"""

from __future__ import annotations

import datetime as dt
import logging

from wordquest.config import Settings, settings
from wordquest.models import CompanionState, CompanionView, Mood
from wordquest.validation import PracticeValidationError, parse_date

logger = logging.getLogger(__name__)


def days_between(earlier: dt.date | None, later: dt.date) -> int | None:
    """Whole calendar days from *earlier* to *later*; None if never practised."""
    if earlier is None:
        return None
    gap = (later - earlier).days
    if gap < 0:
        raise PracticeValidationError(
            f"last practice date {earlier.isoformat()} is after {later.isoformat()}"
        )
    return gap


def decayed_happiness(happiness: int, days_since: int | None, config: Settings = settings) -> int:
    """Happiness after inactivity: a grace day, then a fixed loss per day, capped."""
    if days_since is None:
        return happiness
    idle_days = max(days_since - config.happiness_decay_grace_days, 0)
    decay = min(idle_days * config.happiness_decay_per_day, config.happiness_max_decay)
    return max(happiness - decay, 0)


def boosted_happiness(happiness: int, config: Settings = settings) -> int:
    return min(happiness + config.session_happiness_boost, config.max_happiness)


def is_hot_streak(streak_days: int, config: Settings = settings) -> bool:
    return streak_days >= config.hot_streak_days


def classify_mood(
    happiness: int,
    days_since: int | None,
    hot_streak: bool,
    config: Settings = settings,
) -> Mood:
    if days_since is not None and days_since >= config.lonely_after_days:
        return Mood.LONELY
    for min_happiness, plain, streaking in config.mood_bands:
        if happiness >= min_happiness:
            return Mood(streaking if hot_streak else plain)
    return Mood.SAD


def read_companion(
    state: CompanionState,
    today: dt.date | None = None,
    config: Settings = settings,
) -> CompanionView:
    """Derive the companion's current view from its stored facts."""
    today = parse_date("today", today) or dt.date.today()
    days_since = days_between(parse_date("last_practice_date", state.last_practice_date), today)
    happiness = decayed_happiness(state.happiness, days_since, config)
    hot = is_hot_streak(state.streak_days, config)
    mood = classify_mood(happiness, days_since, hot, config)

    logger.debug(
        "Companion read: happiness %d -> %d after %s idle day(s), mood %s",
        state.happiness,
        happiness,
        days_since,
        mood.value,
    )
    return CompanionView(
        effective_happiness=happiness,
        mood=mood,
        days_since_last_practice=days_since,
        streak_days=state.streak_days,
        hot_streak=hot,
    )

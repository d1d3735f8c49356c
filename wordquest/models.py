"""Value records consumed and produced by the practice engine."""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, field
from typing import Optional

from wordquest.config import settings
from wordquest.validation import (
    PracticeValidationError,
    require_correct_within_attempts,
    require_non_negative,
    require_percentage,
)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MasteryStage(str, enum.Enum):
    SEEDLING = "seedling"
    GROWING = "growing"
    BLOOMING = "blooming"
    MASTERED = "mastered"

    @property
    def rank(self) -> int:
        return _STAGE_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, MasteryStage):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, MasteryStage):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, MasteryStage):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, MasteryStage):
            return NotImplemented
        return self.rank >= other.rank


_STAGE_ORDER = (
    MasteryStage.SEEDLING,
    MasteryStage.GROWING,
    MasteryStage.BLOOMING,
    MasteryStage.MASTERED,
)


class Mood(str, enum.Enum):
    EXCITED = "excited"
    HAPPY = "happy"
    PROUD = "proud"
    CONTENT = "content"
    SLEEPY = "sleepy"
    SAD = "sad"
    LONELY = "lonely"


class ReactionType(str, enum.Enum):
    DAILY_FIRST = "daily_first"
    COMEBACK = "comeback"
    PERFECT_SESSION = "perfect_session"
    STREAK_MILESTONE = "streak_milestone"
    WORD_MASTERY = "word_mastery"
    SESSION_COMPLETE = "session_complete"


# ---------------------------------------------------------------------------
# Practice items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PracticeItem:
    """A word or sentence with its running practice statistics.

    ``current_stage`` is only meaningful for words and is always derived from
    the counters by the mastery tracker. ``version`` is bumped on every
    recorded attempt so the caller can do an optimistic check when writing
    the record back.
    """

    id: str
    text: str
    times_practiced: int = 0
    times_correct: int = 0
    best_accuracy: Optional[float] = None
    last_practiced_at: Optional[dt.datetime] = None
    current_stage: Optional[MasteryStage] = MasteryStage.SEEDLING
    version: int = 0

    def __post_init__(self):
        require_non_negative("times_practiced", self.times_practiced)
        require_non_negative("times_correct", self.times_correct)
        require_correct_within_attempts(self.times_correct, self.times_practiced)
        require_percentage("best_accuracy", self.best_accuracy)
        require_non_negative("version", self.version)
        if self.current_stage is not None and not isinstance(self.current_stage, MasteryStage):
            object.__setattr__(self, "current_stage", MasteryStage(self.current_stage))
        # Counters below the minimum attempt count only ever classify as seedling
        if (
            self.current_stage is not None
            and self.current_stage is not MasteryStage.SEEDLING
            and self.times_practiced < settings.mastery_min_attempts
        ):
            raise PracticeValidationError(
                f"current_stage {self.current_stage.value!r} needs at least "
                f"{settings.mastery_min_attempts} attempts, got {self.times_practiced}"
            )

    @property
    def is_new(self) -> bool:
        return self.times_practiced == 0


@dataclass(frozen=True)
class MatchVerdict:
    is_match: bool
    rule: Optional[str] = None  # exact | token | distance | token_distance | phonetic
    distance: Optional[int] = None
    spoken_normalized: str = ""
    target_normalized: str = ""

    def __bool__(self) -> bool:
        return self.is_match


@dataclass(frozen=True)
class StageUpdate:
    stage: MasteryStage
    previous_stage: Optional[MasteryStage]
    just_advanced: bool
    level: int


# ---------------------------------------------------------------------------
# Sentences
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WordResult:
    word: str
    spoken: Optional[str]
    correct: bool
    position: int


@dataclass(frozen=True)
class SentenceScore:
    accuracy: int
    word_results: list[WordResult] = field(default_factory=list)

    @property
    def words_correct(self) -> int:
        return sum(1 for r in self.word_results if r.correct)


# ---------------------------------------------------------------------------
# Sessions, rewards & companion
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionOutcome:
    items_attempted: int
    items_correct: int
    items_practiced: int
    elapsed_seconds: float = 0.0
    full_set_completed: bool = False
    words_mastered: int = 0

    def __post_init__(self):
        require_non_negative("items_attempted", self.items_attempted)
        require_non_negative("items_correct", self.items_correct)
        require_non_negative("items_practiced", self.items_practiced)
        require_non_negative("words_mastered", self.words_mastered)
        require_correct_within_attempts(self.items_correct, self.items_attempted)
        if self.elapsed_seconds < 0:
            raise PracticeValidationError(
                f"elapsed_seconds must be non-negative, got {self.elapsed_seconds}"
            )


@dataclass(frozen=True)
class CompanionState:
    """What gets stored for a companion. Mood is never stored."""

    happiness: int = 100
    streak_days: int = 0
    last_practice_date: Optional[dt.date] = None

    def __post_init__(self):
        require_non_negative("streak_days", self.streak_days)
        require_percentage("happiness", self.happiness)


@dataclass(frozen=True)
class CompanionView:
    effective_happiness: int
    mood: Mood
    days_since_last_practice: Optional[int]
    streak_days: int
    hot_streak: bool


@dataclass(frozen=True)
class Reaction:
    type: ReactionType
    mood: Mood
    message: str
    xp_bonus: int = 0


@dataclass(frozen=True)
class AttemptReward:
    """Coins, gems and cash for one Word Rescue attempt."""

    correct: bool
    coins: int
    gems: int
    cash: float
    stage: Optional[MasteryStage]
    previous_stage: Optional[MasteryStage]
    stage_advanced: bool
    newly_mastered: bool


@dataclass(frozen=True)
class RewardResult:
    total_xp: int
    base_xp: int
    bonuses: list[tuple[str, int]]
    accuracy_percent: int
    streak_days: int
    happiness: int
    mood: Mood
    reactions: list[Reaction] = field(default_factory=list)
    encouragement: str = ""

    @property
    def bonus_reasons(self) -> list[str]:
        return [reason for reason, _ in self.bonuses]

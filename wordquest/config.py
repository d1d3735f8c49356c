"""Engine configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from wordquest.validation import PracticeValidationError

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise PracticeValidationError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise PracticeValidationError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    # --- Fuzzy matching ---
    short_word_length: int = 3  # targets this long or shorter get the tight tolerance
    short_word_max_distance: int = 1
    long_word_max_distance: int = 2
    phonetic_max_distance: int = 1

    # --- Mastery ---
    mastery_min_attempts: int = _env_int("WORDQUEST_MASTERY_MIN_ATTEMPTS", 3)
    # (minimum accuracy ratio, level), highest first
    mastery_level_bands: tuple[tuple[float, int], ...] = (
        (0.9, 5),
        (0.8, 4),
        (0.7, 3),
        (0.5, 2),
        (0.3, 1),
    )
    max_mastery_level: int = 5
    mastered_best_accuracy: float = _env_float("WORDQUEST_MASTERED_BEST_ACCURACY", 95.0)

    # --- Practice selection (percent of the queue) ---
    needs_practice_pct: int = _env_int("WORDQUEST_NEEDS_PRACTICE_PCT", 60)
    maintenance_pct: int = _env_int("WORDQUEST_MAINTENANCE_PCT", 20)
    maintenance_min_level: int = 3  # levels below this need practice

    # --- XP rewards ---
    xp_per_item: int = _env_int("WORDQUEST_XP_PER_ITEM", 10)
    # (minimum accuracy percent, bonus), highest first; only one tier applies
    accuracy_bonus_tiers: tuple[tuple[int, int], ...] = (
        (100, 25),
        (95, 15),
        (90, 10),
    )
    completion_bonus: int = 20
    # (streak days, bonus); the highest milestone reached that day applies
    streak_milestone_bonuses: tuple[tuple[int, int], ...] = (
        (3, 15),
        (7, 30),
        (14, 50),
        (30, 100),
    )
    comeback_bonus: int = 20
    comeback_after_days: int = 3
    perfect_session_bonus: int = 25
    perfect_session_min_items: int = 5

    # --- Word Rescue (per attempt on a struggling word) ---
    rescue_coins_per_correct: int = _env_int("WORDQUEST_RESCUE_COINS_PER_CORRECT", 5)
    rescue_coins_without_coach: int = 3
    rescue_coins_per_stage_advance: int = 10
    rescue_gems_per_mastery: int = 1
    rescue_cash_per_mastered_word: float = _env_float("WORDQUEST_RESCUE_CASH_PER_MASTERED_WORD", 0.10)

    # --- Companion ---
    max_happiness: int = 100
    session_happiness_boost: int = 10
    happiness_decay_grace_days: int = 1
    happiness_decay_per_day: int = _env_int("WORDQUEST_HAPPINESS_DECAY_PER_DAY", 10)
    happiness_max_decay: int = 50
    lonely_after_days: int = 3
    hot_streak_days: int = 3
    # (minimum happiness, mood without streak, mood with a hot streak), highest first
    mood_bands: tuple[tuple[int, str, str], ...] = (
        (80, "happy", "excited"),
        (60, "content", "proud"),
        (40, "content", "content"),
        (20, "sleepy", "sleepy"),
        (0, "sad", "sad"),
    )

    # --- Sentence scoring ---
    sentence_lookahead: int = 3
    sentence_skip_ahead: int = 2
    filler_words: frozenset[str] = frozenset({
        "um", "uh", "umm", "uhh", "erm", "er", "ah", "ahh",
        "like", "so", "well", "okay", "ok",
        "hmm", "hm", "mm", "mmm",
        "oh", "ooh",
    })

    def validate(self) -> "Settings":
        """Reject settings the algorithms cannot work with."""
        if self.mastery_min_attempts < 1:
            raise PracticeValidationError("mastery_min_attempts must be at least 1")
        if not 0 <= self.mastered_best_accuracy <= 100:
            raise PracticeValidationError("mastered_best_accuracy must be within 0-100")
        if self.needs_practice_pct < 0 or self.maintenance_pct < 0:
            raise PracticeValidationError("practice mix percentages must be non-negative")
        if self.needs_practice_pct + self.maintenance_pct > 100:
            raise PracticeValidationError(
                "needs_practice_pct + maintenance_pct must not exceed 100"
            )
        for name in ("short_word_max_distance", "long_word_max_distance",
                     "phonetic_max_distance", "happiness_decay_per_day",
                     "happiness_max_decay", "xp_per_item",
                     "rescue_coins_per_correct", "rescue_coins_without_coach",
                     "rescue_coins_per_stage_advance", "rescue_gems_per_mastery",
                     "rescue_cash_per_mastered_word"):
            if getattr(self, name) < 0:
                raise PracticeValidationError(f"{name} must be non-negative")
        if not 0 < self.max_happiness:
            raise PracticeValidationError("max_happiness must be positive")
        return self


settings = Settings().validate()

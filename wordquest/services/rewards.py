"""Session rewards: XP, bonuses, streak and the companion's reaction.

The calculation is pure. It reads the session counters and the child's
previous streak state and returns what the caller should store and show;
it never writes anything itself.

XP breakdown:
  - base: a fixed amount per item practised
  - accuracy: one flat bonus for the highest tier reached (100/95/90%)
  - completion: every item in the material practised this session
  - streak milestone: the first session of a day the streak hits 3/7/14/30
  - comeback: three or more days since the last practice
  - perfect session: every attempt correct, with enough attempts to count

Word Rescue pays per attempt instead: coins for a correct word, more when
the Word Coach was not opened, more again when the word moves up a stage,
and gems (plus optional cash) when the word becomes mastered.
"""

from __future__ import annotations

import datetime as dt
import logging

from wordquest.config import Settings, settings
from wordquest.models import (
    AttemptReward,
    MasteryStage,
    Mood,
    Reaction,
    ReactionType,
    RewardResult,
    SessionOutcome,
    StageUpdate,
)
from wordquest.services.companion import (
    boosted_happiness,
    classify_mood,
    days_between,
    is_hot_streak,
)
from wordquest.services.scoring import accuracy_percent, meets_percent, pick_encouragement
from wordquest.validation import (
    PracticeValidationError,
    parse_date,
    require_non_negative,
    require_percentage,
)

logger = logging.getLogger(__name__)


def next_streak(prior_streak_days: int, gap_days: int | None) -> int:
    """Streak after practising today, given the gap since the last practice day."""
    if gap_days == 0:
        return prior_streak_days
    if gap_days == 1:
        return prior_streak_days + 1
    return 1


def accuracy_bonus(outcome: SessionOutcome, config: Settings = settings) -> tuple[str, int] | None:
    for threshold, bonus in config.accuracy_bonus_tiers:
        if meets_percent(outcome.items_correct, outcome.items_attempted, threshold):
            return f"accuracy_{threshold}", bonus
    return None


def streak_milestone_bonus(new_streak: int, config: Settings = settings) -> tuple[str, int] | None:
    reached = [
        (days, bonus) for days, bonus in config.streak_milestone_bonuses if days == new_streak
    ]
    if not reached:
        return None
    days, bonus = max(reached)
    return f"streak_milestone_{days}", bonus


def is_perfect_session(outcome: SessionOutcome, config: Settings = settings) -> bool:
    return (
        outcome.items_attempted >= config.perfect_session_min_items
        and outcome.items_correct == outcome.items_attempted
    )


def reaction_message(reaction: ReactionType, mood: Mood, **details) -> str:
    if reaction is ReactionType.COMEBACK:
        return "I missed you so much! I'm so happy you're back to read with me! 💛"
    if reaction is ReactionType.PERFECT_SESSION:
        return "Every single word was right! You're amazing! 🌟"
    if reaction is ReactionType.STREAK_MILESTONE:
        return f"{details.get('days', 0)} days in a row! What a reading streak! 🔥"
    if reaction is ReactionType.WORD_MASTERY:
        return "You mastered a new word! It bloomed into a flower! 🌸"
    if reaction is ReactionType.DAILY_FIRST:
        return "Yay, our first reading of the day! 📖"
    if mood is Mood.EXCITED or mood is Mood.PROUD:
        return "I'm so proud of you! Let's read again soon! 🎉"
    if mood is Mood.LONELY or mood is Mood.SAD:
        return "Thank you for reading with me. I feel better already! 🤗"
    return "Great reading today! I had so much fun! 😊"


def compute_attempt_reward(
    correct: bool,
    stage_update: StageUpdate,
    used_coach: bool = False,
    cash_enabled: bool = False,
    cash_per_mastered_word: float | None = None,
    config: Settings = settings,
) -> AttemptReward:
    """Reward one Word Rescue attempt from its verdict and stage update.

    A stage only counts as advanced on a correct attempt. Cash is paid once,
    when the word first reaches mastered, and only if the parent turned
    cash rewards on; *cash_per_mastered_word* overrides the default amount.
    """
    if cash_per_mastered_word is None:
        cash_per_mastered_word = config.rescue_cash_per_mastered_word
    if cash_per_mastered_word < 0:
        raise PracticeValidationError(
            f"cash_per_mastered_word must be non-negative, got {cash_per_mastered_word}"
        )

    stage_advanced = correct and stage_update.just_advanced
    newly_mastered = (
        stage_update.stage is MasteryStage.MASTERED
        and stage_update.previous_stage is not MasteryStage.MASTERED
    )

    coins = 0
    if correct:
        coins = config.rescue_coins_per_correct
        if not used_coach:
            coins += config.rescue_coins_without_coach
        if stage_advanced:
            coins += config.rescue_coins_per_stage_advance

    gems = config.rescue_gems_per_mastery if newly_mastered else 0
    cash = cash_per_mastered_word if newly_mastered and cash_enabled else 0.0

    logger.debug(
        "Rescue attempt: correct=%s coach=%s stage %s -> %s, %d coins, %d gems, %.2f cash",
        correct,
        used_coach,
        stage_update.previous_stage.value if stage_update.previous_stage else None,
        stage_update.stage.value,
        coins,
        gems,
        cash,
    )

    return AttemptReward(
        correct=correct,
        coins=coins,
        gems=gems,
        cash=cash,
        stage=stage_update.stage,
        previous_stage=stage_update.previous_stage,
        stage_advanced=stage_advanced,
        newly_mastered=newly_mastered,
    )


def compute_reward(
    outcome: SessionOutcome,
    prior_streak_days: int,
    last_practice_date: dt.date | str | None,
    session_date: dt.date | str | None = None,
    happiness: int | None = None,
    config: Settings = settings,
) -> RewardResult:
    """Turn a finished session into XP, bonuses, a streak and a companion mood."""
    require_non_negative("prior_streak_days", prior_streak_days)
    last_practice_date = parse_date("last_practice_date", last_practice_date)
    session_date = parse_date("session_date", session_date) or dt.date.today()
    if happiness is None:
        happiness = config.max_happiness
    require_percentage("happiness", happiness)

    gap_days = days_between(last_practice_date, session_date)
    is_new_day = gap_days != 0
    new_streak = next_streak(prior_streak_days, gap_days)
    accuracy = accuracy_percent(outcome.items_correct, outcome.items_attempted)

    # --- XP ---
    base_xp = outcome.items_practiced * config.xp_per_item
    bonuses: list[tuple[str, int]] = []

    tier = accuracy_bonus(outcome, config)
    if tier:
        bonuses.append(tier)

    if outcome.full_set_completed:
        bonuses.append(("completion", config.completion_bonus))

    milestone = streak_milestone_bonus(new_streak, config) if is_new_day else None
    if milestone:
        bonuses.append(milestone)

    is_comeback = gap_days is not None and gap_days >= config.comeback_after_days
    if is_comeback:
        bonuses.append(("comeback", config.comeback_bonus))

    perfect = is_perfect_session(outcome, config)
    if perfect:
        bonuses.append(("perfect_session", config.perfect_session_bonus))

    total_xp = base_xp + sum(amount for _, amount in bonuses)

    # --- Companion ---
    new_happiness = boosted_happiness(int(happiness), config)
    mood = classify_mood(new_happiness, gap_days, is_hot_streak(new_streak, config), config)

    # --- Reactions ---
    reactions: list[Reaction] = []
    if is_new_day:
        reactions.append(Reaction(
            ReactionType.DAILY_FIRST, mood, reaction_message(ReactionType.DAILY_FIRST, mood)
        ))
    if is_comeback:
        reactions.append(Reaction(
            ReactionType.COMEBACK,
            Mood.LONELY,
            reaction_message(ReactionType.COMEBACK, Mood.LONELY),
            config.comeback_bonus,
        ))
    if perfect:
        reactions.append(Reaction(
            ReactionType.PERFECT_SESSION,
            Mood.EXCITED,
            reaction_message(ReactionType.PERFECT_SESSION, Mood.EXCITED),
            config.perfect_session_bonus,
        ))
    if milestone:
        reactions.append(Reaction(
            ReactionType.STREAK_MILESTONE,
            Mood.EXCITED,
            reaction_message(ReactionType.STREAK_MILESTONE, Mood.EXCITED, days=new_streak),
            milestone[1],
        ))
    if outcome.words_mastered > 0:
        reactions.append(Reaction(
            ReactionType.WORD_MASTERY, mood, reaction_message(ReactionType.WORD_MASTERY, mood)
        ))
    if all(r.type is ReactionType.DAILY_FIRST for r in reactions):
        reactions.append(Reaction(
            ReactionType.SESSION_COMPLETE, mood, reaction_message(ReactionType.SESSION_COMPLETE, mood)
        ))

    logger.debug(
        "Session reward: %d XP (base %d, bonuses %s), accuracy %d%%, streak %d -> %d, mood %s",
        total_xp,
        base_xp,
        [reason for reason, _ in bonuses] or "none",
        accuracy,
        prior_streak_days,
        new_streak,
        mood.value,
    )

    return RewardResult(
        total_xp=total_xp,
        base_xp=base_xp,
        bonuses=bonuses,
        accuracy_percent=accuracy,
        streak_days=new_streak,
        happiness=new_happiness,
        mood=mood,
        reactions=reactions,
        encouragement=pick_encouragement(accuracy, outcome.full_set_completed),
    )

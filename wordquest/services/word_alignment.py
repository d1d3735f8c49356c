"""Word alignment between a target sentence and recognised speech.

Children repeat words ("the the dog"), skip words, and fill pauses with
"um" and "uh". The aligner drops fillers, then walks the target words
with a small lookahead into the spoken words. A spoken word that fits one
of the next couple of target words is left for that word instead of being
spent on the current one, so a single skipped word does not shift every
later word out of place.
"""

from __future__ import annotations

import logging
import re

from wordquest.config import Settings, settings
from wordquest.models import SentenceScore, WordResult
from wordquest.services.scoring import accuracy_percent
from wordquest.services.word_match import is_word_match

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s']")  # apostrophes stay for contractions
_WHITESPACE = re.compile(r"\s+")


def normalise_sentence(text: str) -> list[str]:
    """Lower-case, strip punctuation, split into words."""
    text = _PUNCTUATION.sub("", (text or "").lower())
    text = _WHITESPACE.sub(" ", text).strip()
    return text.split() if text else []


def filter_fillers(words: list[str], config: Settings = settings) -> list[str]:
    return [w for w in words if w not in config.filler_words]


def align_words(
    target: list[str],
    spoken: list[str],
    config: Settings = settings,
) -> list[str | None]:
    """Align spoken words to target positions.

    Returns one entry per target word: the spoken word assigned to it, or
    None when the child skipped it (or ran out of words).
    """
    result: list[str | None] = [None] * len(target)
    spoken_idx = 0

    for i, expected in enumerate(target):
        if spoken_idx >= len(spoken):
            break

        # --- 1. Look ahead a few spoken words for this target ---
        found = False
        for offset in range(min(config.sentence_lookahead, len(spoken) - spoken_idx)):
            candidate = spoken[spoken_idx + offset]
            if is_word_match(candidate, expected, config):
                result[i] = candidate
                spoken_idx += offset + 1
                found = True
                break
        if found:
            continue

        # --- 2. Keep the current spoken word if it belongs to a later target ---
        current = spoken[spoken_idx]
        belongs_later = any(
            is_word_match(current, target[k], config)
            for k in range(i + 1, min(i + 1 + config.sentence_skip_ahead, len(target)))
        )
        if not belongs_later:
            # Assign it anyway; the match check decides if it counts
            result[i] = current
            spoken_idx += 1

    return result


def score_sentence(spoken: str, target: str, config: Settings = settings) -> SentenceScore:
    """Score a spoken sentence word by word against the target sentence."""
    target_words = normalise_sentence(target)
    if not target_words:
        return SentenceScore(accuracy=0, word_results=[])

    spoken_words = filter_fillers(normalise_sentence(spoken), config)
    alignment = align_words(target_words, spoken_words, config)

    results = []
    for position, (expected, heard) in enumerate(zip(target_words, alignment)):
        correct = heard is not None and is_word_match(heard, expected, config)
        results.append(WordResult(word=expected, spoken=heard, correct=correct, position=position))

    correct_count = sum(1 for r in results if r.correct)
    accuracy = accuracy_percent(correct_count, len(target_words))

    logger.debug(
        "Sentence score: %d/%d words correct (%d%%) from %d spoken tokens",
        correct_count,
        len(target_words),
        accuracy,
        len(spoken_words),
    )
    return SentenceScore(accuracy=accuracy, word_results=results)

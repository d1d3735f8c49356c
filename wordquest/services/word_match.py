"""Fuzzy matching of a spoken attempt against a single target word.

Tuned for young readers. It is better to give a child credit for a
close-enough pronunciation than to mark them wrong because the
speech-to-text model misheard them, so the checks get progressively
more lenient:

  1. exact match (case and surrounding whitespace ignored)
  2. the target is one of the spoken words ("the word is cat")
  3. edit distance of the whole utterance within tolerance
  4. edit distance of any single spoken word within tolerance
  5. equal (or one edit apart) after phonetic normalisation

Tolerance is 1 edit for targets of three letters or fewer and 2 edits
otherwise; one substitution already turns a short word into a different
word.
"""

from __future__ import annotations

import logging

from wordquest.config import Settings, settings
from wordquest.models import MatchVerdict
from wordquest.services.phonetics import phonetic_normalise
from wordquest.validation import require_target_word

logger = logging.getLogger(__name__)


def edit_distance(a: str, b: str) -> int:
    """Simple Levenshtein distance."""
    if len(a) < len(b):
        return edit_distance(b, a)
    if len(b) == 0:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a):
        curr = [i + 1]
        for j, cb in enumerate(b):
            cost = 0 if ca == cb else 1
            curr.append(min(curr[j] + 1, prev[j + 1] + 1, prev[j] + cost))
        prev = curr
    return prev[len(b)]


def max_distance_for(target: str, config: Settings = settings) -> int:
    """Edit-distance tolerance for a (normalised) target word."""
    if len(target) <= config.short_word_length:
        return config.short_word_max_distance
    return config.long_word_max_distance


def match_word(spoken: str, target: str, config: Settings = settings) -> MatchVerdict:
    """Decide whether *spoken* counts as a correct reading of *target*.

    Returns a :class:`MatchVerdict`; the distance it carries is evidence for
    diagnostics only.
    """
    require_target_word(target)
    clean_spoken = (spoken or "").lower().strip()
    clean_target = target.lower().strip()

    if not clean_spoken:
        return MatchVerdict(False, spoken_normalized="", target_normalized=clean_target)

    # 1. Exact
    if clean_spoken == clean_target:
        return MatchVerdict(True, "exact", 0, clean_spoken, clean_target)

    # 2. Target embedded in a phrase
    tokens = clean_spoken.split()
    if clean_target in tokens:
        return MatchVerdict(True, "token", 0, clean_spoken, clean_target)

    # 3. Whole utterance close enough
    max_distance = max_distance_for(clean_target, config)
    distance = edit_distance(clean_spoken, clean_target)
    if distance <= max_distance:
        return MatchVerdict(True, "distance", distance, clean_spoken, clean_target)

    # 4. Any single spoken word close enough
    best = distance
    for token in tokens:
        token_distance = edit_distance(token, clean_target)
        best = min(best, token_distance)
        if token_distance <= max_distance:
            return MatchVerdict(True, "token_distance", token_distance, clean_spoken, clean_target)

    # 5. Phonetic normalisation
    phon_spoken = phonetic_normalise(clean_spoken)
    phon_target = phonetic_normalise(clean_target)
    phon_distance = edit_distance(phon_spoken, phon_target)
    if phon_distance <= config.phonetic_max_distance:
        logger.debug(
            "Phonetic match %r ~ %r (%r vs %r, distance %d)",
            clean_spoken, clean_target, phon_spoken, phon_target, phon_distance,
        )
        return MatchVerdict(True, "phonetic", phon_distance, phon_spoken, phon_target)

    return MatchVerdict(False, None, best, clean_spoken, clean_target)


def is_word_match(spoken: str, target: str, config: Settings = settings) -> bool:
    """Boolean shortcut for :func:`match_word`."""
    return match_word(spoken, target, config).is_match

"""Phonetic normalisation and pronunciation hints for young readers.

The substitution table collapses sounds that children (and speech-to-text
models listening to children) commonly swap, so that "wabbit" and "rabbit"
normalise to the same string. The table is applied top to bottom in a single
pass: later patterns see text already rewritten by earlier ones, so the order
is part of the behaviour.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Ordered substitution table
# ---------------------------------------------------------------------------

PHONETIC_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern), replacement)
    for pattern, replacement in (
        # "th" is swapped for f/d/v/s/t; only the first rewrite ever fires
        (r"th", "f"),  # three -> free
        (r"th", "d"),  # this -> dis
        (r"th", "v"),  # father -> faver
        (r"th", "s"),  # think -> sink
        (r"th", "t"),  # three -> tree
        (r"wh", "w"),  # what -> wat
        (r"w", "v"),  # water -> vater
        (r"r", "w"),  # rabbit -> wabbit
        (r"er$", "a"),  # water -> wata
        (r"or$", "a"),  # doctor -> docta
        (r"l", "w"),  # little -> wittle
        (r"l", "y"),  # love -> yove
        (r"ph", "f"),  # phone -> fone
        (r"ck", "k"),  # back -> bak
        (r"ght", "t"),  # night -> nit
        (r"tion", "shun"),  # action -> akshun
        (r"sion", "zhun"),  # vision -> vizhun
        (r"sh", "s"),  # ship -> sip
        (r"s", "th"),  # sun -> thun
        (r"ch", "sh"),  # chip -> ship
        (r"ch", "t"),  # chip -> tip
        (r"ing$", "in"),  # running -> runnin
        (r"ed$", "d"),  # walked -> walkd
        (r"ed$", "t"),  # jumped -> jumpt
        (r"ll", "l"),  # ball -> bal
        (r"ss", "s"),  # miss -> mis
        (r"tt", "t"),  # butter -> buter
        (r"ff", "f"),  # stuff -> stuf
        (r"kn", "n"),  # know -> now
        (r"wr", "r"),  # write -> rite
        (r"gn", "n"),  # gnome -> nome
        (r"mb$", "m"),  # climb -> clim
    )
)


def phonetic_normalise(text: str) -> str:
    """Run *text* through the substitution table once, in order."""
    for pattern, replacement in PHONETIC_SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text


# ---------------------------------------------------------------------------
# Pattern-based rules for common tricky spellings.
# If a word matches any rule, we can give the child a hint.
# ---------------------------------------------------------------------------

# Words where a trailing 'e' is silent and changes the vowel sound
_SILENT_E_PATTERN = re.compile(
    r"^[a-z]*[bcdfghjklmnpqrstvwxyz][aeiou][bcdfghjklmnpqrstvwxyz]e$", re.I
)
_GH_PATTERN = re.compile(r"gh", re.I)
_PH_PATTERN = re.compile(r"ph", re.I)
_KN_PATTERN = re.compile(r"^kn", re.I)
_WR_PATTERN = re.compile(r"^wr", re.I)
_TION_PATTERN = re.compile(r"tion$", re.I)
_LE_ENDING = re.compile(r"[bcdfgkptz]le$", re.I)

# Common early-reader words that never need a hint
_SIMPLE_WORDS = frozenset({
    "a", "an", "i", "is", "it", "in", "on", "up", "to", "go", "no",
    "so", "do", "he", "she", "we", "be", "me", "my", "at", "am",
    "the", "and", "but", "not", "you", "was", "are", "his", "her",
    "had", "has", "can", "ran", "big", "red", "see", "saw", "run",
    "fun", "sun", "cat", "dog", "hat", "bat", "sit", "hit", "got",
    "hot", "lot", "let", "get", "set", "put", "cut", "cup", "bus",
})


def phonetic_hint(word: str) -> str | None:
    """Return a short, child-friendly pronunciation hint, or None if simple."""
    clean = word.lower().strip(".,!?;:'\"()-")
    if len(clean) <= 2 or clean in _SIMPLE_WORDS:
        return None

    hints = []

    if _GH_PATTERN.search(clean):
        if clean.endswith("ght"):
            hints.append('The "gh" is silent!')
        elif clean.endswith("ough"):
            hints.append('"ough" is a tricky sound, listen carefully!')
        elif clean.endswith("ugh"):
            hints.append('The "gh" sounds like "f"!')
        else:
            hints.append('The "gh" has a special sound, listen carefully!')

    if _SILENT_E_PATTERN.match(clean):
        hints.append('The "e" at the end is silent. It makes the vowel say its name!')

    if _PH_PATTERN.search(clean):
        hints.append('"ph" sounds like "f"!')

    if _KN_PATTERN.match(clean):
        hints.append('The "k" is silent, just say the "n"!')

    if _WR_PATTERN.match(clean):
        hints.append('The "w" is silent, just say the "r"!')

    if _TION_PATTERN.search(clean):
        hints.append('"-tion" sounds like "shun"!')

    if _LE_ENDING.search(clean):
        hints.append('The "le" at the end sounds like "ul"!')

    if not hints:
        return None

    logger.debug("Phonetic hint for %r: %d rule(s)", clean, len(hints))
    return " ".join(hints)

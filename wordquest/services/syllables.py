"""Syllable splitting for the Word Coach.

Plain English rules, good enough to show a struggling reader a word in
chunks ("but • ter • fly"). Not a dictionary hyphenator.
"""

from __future__ import annotations

_VOWELS = frozenset("aeiouy")

# Consonant groups that stay together at the start of a syllable
_CONSONANT_BLENDS = frozenset({
    "bl", "br", "ch", "cl", "cr", "dr", "fl", "fr", "gl", "gr",
    "pl", "pr", "sc", "sh", "sk", "sl", "sm", "sn", "sp", "st",
    "sw", "th", "tr", "tw", "wh", "wr", "sch", "scr", "shr", "spl",
    "spr", "squ", "str", "thr", "ck", "ng", "nk", "ph", "gh",
})

# Vowel pairs that make one sound
_VOWEL_DIGRAPHS = frozenset({
    "ai", "au", "aw", "ay", "ea", "ee", "ei", "eu", "ew",
    "ey", "ie", "oa", "oe", "oi", "oo", "ou", "ow", "oy", "ue", "ui",
})


def _is_vowel(ch: str) -> bool:
    return ch in _VOWELS


def _is_consonant(ch: str) -> bool:
    return "a" <= ch <= "z" and ch not in _VOWELS


def _has_vowel(chunk: str) -> bool:
    return any(_is_vowel(ch) for ch in chunk)


def _merge_short(syllables: list[str]) -> list[str]:
    # A chunk without a vowel cannot be said on its own
    if len(syllables) <= 1:
        return syllables

    pending = list(syllables)
    merged: list[str] = []
    for i, chunk in enumerate(pending):
        if _has_vowel(chunk):
            merged.append(chunk)
        elif merged:
            merged[-1] += chunk
        elif i < len(pending) - 1:
            pending[i + 1] = chunk + pending[i + 1]
        else:
            merged.append(chunk)
    return merged


def syllabify(word: str) -> list[str]:
    """Split *word* into syllables, lower-cased.

    Words of three letters or fewer, and words with a single vowel, come
    back whole.
    """
    text = word.lower().strip()
    if len(text) <= 3 or sum(1 for ch in text if _is_vowel(ch)) <= 1:
        return [text]

    syllables: list[str] = []
    current = ""
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        after = text[i + 2] if i + 2 < n else ""
        current += ch

        if _is_vowel(ch) and i < n - 1:
            if ch + nxt in _VOWEL_DIGRAPHS:
                current += nxt
                i += 2
                continue

            if nxt and _is_consonant(nxt):
                pair = nxt + after
                triple = pair + (text[i + 3] if i + 3 < n else "")

                if after and _is_vowel(after):
                    # V-CV: the consonant starts the next syllable
                    if len(current) >= 2:
                        syllables.append(current)
                        current = ""
                elif after and _is_consonant(after):
                    if pair in _CONSONANT_BLENDS or triple in _CONSONANT_BLENDS:
                        if len(current) >= 2:
                            syllables.append(current)
                            current = ""
                    else:
                        # VC-CV: split between the consonants
                        current += nxt
                        i += 1
                        if len(current) >= 2:
                            syllables.append(current)
                            current = ""
        i += 1

    if current:
        if syllables and len(current) <= 2 and not _has_vowel(current):
            syllables[-1] += current
        else:
            syllables.append(current)

    return _merge_short(syllables) or [text]


def format_syllables(syllables: list[str], separator: str = " • ") -> str:
    return separator.join(syllables)

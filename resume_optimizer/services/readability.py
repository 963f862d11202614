"""Flesch Reading Ease and syllable counts backed by textstat."""

import textstat

EMPTY_TEXT_SCORE = 50.0


def count_syllables(word: str) -> int:
    """Syllables in a single word, never less than one."""
    return max(1, int(textstat.syllable_count(word)))


def flesch_reading_ease(text: str) -> float:
    """Flesch Reading Ease clamped to [0, 100]; blank text scores neutral."""
    if not text.split():
        return EMPTY_TEXT_SCORE
    score = float(textstat.flesch_reading_ease(text))
    return max(0.0, min(100.0, score))

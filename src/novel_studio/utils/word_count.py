"""
Word and character counting for the editor and the sidebar totals
"""
import math
import re


_WHITESPACE = re.compile(r"\s+")

DEFAULT_WORDS_PER_MINUTE = 200


def count_words(text: str) -> int:
    """
    Whitespace-delimited word count
    - leading/trailing whitespace is ignored
    - empty or whitespace-only text counts as 0
    """
    stripped = (text or "").strip()
    if not stripped:
        return 0
    return len(_WHITESPACE.split(stripped))


def count_characters(text: str) -> int:
    """Character count of the trimmed text (what the editor footer shows)."""
    return len((text or "").strip())


def reading_time(words: int, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Minutes to read, rounded up; any non-empty text takes at least one minute."""
    if words <= 0:
        return 0
    return math.ceil(words / max(1, words_per_minute))


def count_words_detail(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> dict:
    """
    Detailed counts
    """
    words = count_words(text)
    return {
        'words': words,
        'characters': count_characters(text),
        'reading_minutes': reading_time(words, words_per_minute),
    }

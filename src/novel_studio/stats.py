"""
Stats aggregator

Stateless counters derived from a document store on demand.
"""
from typing import Optional

from novel_studio.config import config
from novel_studio.document_store import DocumentStore
from novel_studio.schema import Chapter, EditorStats, ProjectStats
from novel_studio.utils.word_count import count_characters, count_words, reading_time


def chapter_word_count(chapter: Chapter) -> int:
    return count_words(chapter.content)


def total_words(store: DocumentStore) -> int:
    return sum(chapter_word_count(c) for c in store.chapters.values())


def compute_stats(store: DocumentStore) -> ProjectStats:
    """Sidebar totals: chapters, characters, plot points and words."""
    return ProjectStats(
        chapter_count=len(store.chapters),
        character_count=len(store.characters),
        plot_point_count=len(store.plot_points),
        total_words=total_words(store),
    )


def editor_stats(text: str, words_per_minute: Optional[int] = None) -> EditorStats:
    """Footer counters for an editor buffer or a single chapter."""
    words = count_words(text)
    return EditorStats(
        words=words,
        characters=count_characters(text),
        reading_minutes=reading_time(words, words_per_minute or config.words_per_minute),
    )

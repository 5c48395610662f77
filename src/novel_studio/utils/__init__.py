"""Utils module"""
from .word_count import count_characters, count_words, count_words_detail, reading_time

__all__ = ['count_characters', 'count_words', 'count_words_detail', 'reading_time']

"""
Text Statistics
===============
Word frequency, reading time and accuracy figures for a document, built on
the same tokenizer the checker uses.
"""

from collections import Counter
from typing import Dict, List, Optional, Tuple

from .languages import Language
from .tokenizer import tokenize

READING_WORDS_PER_MINUTE = 200


def extract_words(text: str, language: Optional[Language] = None) -> List[str]:
    """Lowercased words of ``text`` (folded when a language is given)."""
    if language is not None:
        return [language.fold(t.text) for t in tokenize(text).words()]
    return [t.text.lower() for t in tokenize(text).words()]


def word_frequency(text: str, language: Optional[Language] = None) -> Counter:
    """Count how often each word occurs."""
    return Counter(extract_words(text, language))


def most_common_words(freq: Dict[str, int], n: int) -> List[Tuple[str, int]]:
    """Top ``n`` words by count, ties in alphabetical order."""
    ranked = sorted(freq.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:max(n, 0)]


def reading_time(text: str, words_per_minute: int = READING_WORDS_PER_MINUTE) -> Tuple[int, int]:
    """Estimated reading time as (minutes, seconds)."""
    words = sum(1 for _ in tokenize(text).words())
    minutes = words // words_per_minute
    seconds = ((words % words_per_minute) * 60) // words_per_minute
    return minutes, seconds


def calculate_accuracy(correct: int, total: int) -> float:
    """Percentage of correct words, rounded; 100.0 for an empty text."""
    if total == 0:
        return 100.0
    return float(round(correct / total * 100.0))


def build_word_list(text: str, min_length: int = 1,
                    language: Optional[Language] = None) -> List[Tuple[str, int]]:
    """
    Frequency list for seeding a new dictionary from a corpus.

    Words shorter than ``min_length`` and words without a letter are
    dropped; the result is ordered by descending count, then alphabetically.
    """
    freq = word_frequency(text, language)
    kept = {word: count for word, count in freq.items()
            if len(word) >= min_length and any(ch.isalpha() for ch in word)}
    return most_common_words(kept, len(kept))


def document_stats(text: str) -> Dict[str, object]:
    """Summary figures for a document."""
    freq = word_frequency(text)
    minutes, seconds = reading_time(text)
    return {
        'characters': len(text),
        'words': sum(freq.values()),
        'unique_words': len(freq),
        'lines': text.count('\n') + 1 if text else 0,
        'reading_time': {'minutes': minutes, 'seconds': seconds},
    }

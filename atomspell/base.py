"""
AtomSpell Base Classes
======================
Value types shared by every engine component, plus the common component
interface.

All value types are frozen dataclasses: a CheckReport handed to a caller
cannot be altered by anything the engine does afterwards.
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import List, Dict, Tuple, Any, Mapping, Optional, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from .languages import Language

__version__ = "1.0.0"


class TokenKind(Enum):
    WORD = "word"
    NUMBER = "number"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class Token:
    """A contiguous span ``text[start:end]`` of the original input."""
    start: int
    end: int
    text: str
    kind: TokenKind

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': self.start,
            'end': self.end,
            'text': self.text,
            'kind': self.kind.value,
        }


@dataclass(frozen=True)
class Suggestion:
    """
    A correction candidate.

    Suggestions sort ascending by score, then by descending frequency,
    then lexicographically.
    """
    word: str
    distance: int
    score: float
    frequency: int = 0

    def sort_key(self) -> Tuple[float, int, str]:
        return (self.score, -self.frequency, self.word)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'word': self.word,
            'distance': self.distance,
            'score': self.score,
            'frequency': self.frequency,
        }


@dataclass(frozen=True)
class Misspelling:
    """A word token unknown to the active language, with its suggestions."""
    token: Token
    suggestions: Tuple[Suggestion, ...] = ()
    line: int = 1
    column: int = 1

    @property
    def word(self) -> str:
        return self.token.text

    @property
    def start(self) -> int:
        return self.token.start

    @property
    def end(self) -> int:
        return self.token.end

    @property
    def best_suggestion(self) -> Optional[str]:
        return self.suggestions[0].word if self.suggestions else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'word': self.word,
            'start': self.start,
            'end': self.end,
            'line': self.line,
            'column': self.column,
            'suggestions': [s.to_dict() for s in self.suggestions],
        }


@dataclass(frozen=True)
class DetectionScore:
    """How well one language's dictionary covers a text sample."""
    language: 'Language'
    hits: int
    total: int

    @property
    def ratio(self) -> float:
        return self.hits / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'language': self.language.code,
            'hits': self.hits,
            'total': self.total,
            'ratio': round(self.ratio, 4),
        }


@dataclass(frozen=True)
class CheckReport:
    """Result of checking one document."""
    language: 'Language'
    misspellings: Tuple[Misspelling, ...] = ()
    total_tokens: int = 0
    word_count: int = 0
    detected: bool = False
    dictionary_loaded: bool = True
    lines_checked: int = 0
    duration_ms: float = 0.0
    likely_code: bool = False
    file_type: Optional[str] = None
    metrics: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Read-only view over a private copy
        object.__setattr__(self, 'metrics', MappingProxyType(dict(self.metrics)))

    @property
    def misspelled_count(self) -> int:
        return len(self.misspellings)

    @property
    def suggestions_count(self) -> int:
        return sum(len(m.suggestions) for m in self.misspellings)

    @property
    def accuracy(self) -> float:
        """Percentage of correctly spelled words, rounded to an integer value."""
        if self.word_count == 0:
            return 100.0
        correct = self.word_count - self.misspelled_count
        return float(round(correct / self.word_count * 100.0))

    @property
    def is_clean(self) -> bool:
        return not self.misspellings

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for JSON output."""
        return {
            'language': self.language.code,
            'language_name': self.language.name,
            'detected': self.detected,
            'dictionary_loaded': self.dictionary_loaded,
            'total_tokens': self.total_tokens,
            'word_count': self.word_count,
            'misspelled_count': self.misspelled_count,
            'suggestions_count': self.suggestions_count,
            'accuracy': self.accuracy,
            'lines_checked': self.lines_checked,
            'likely_code': self.likely_code,
            'file_type': self.file_type,
            'duration_ms': round(self.duration_ms, 2),
            'misspellings': [m.to_dict() for m in self.misspellings],
            'metrics': dict(self.metrics),
        }


class EngineComponent(ABC):
    """
    Abstract base class for engine components.

    Components are stateless apart from the store and configuration they
    were built with, so one instance may serve concurrent requests.
    """

    COMPONENT_NAME: str = "Engine Component"
    COMPONENT_VERSION: str = "1.0.0"

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """Get detailed status of the component."""
        pass

    def _base_status(self) -> Dict[str, Any]:
        return {
            'component': self.COMPONENT_NAME,
            'version': self.COMPONENT_VERSION,
        }


def sort_suggestions(suggestions: List[Suggestion]) -> List[Suggestion]:
    """Order suggestions by score, then frequency (desc), then word."""
    return sorted(suggestions, key=Suggestion.sort_key)

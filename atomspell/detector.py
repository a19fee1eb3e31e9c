"""
Language Detector
=================
Picks the language whose dictionary recognizes the largest share of a
text's words.

Ties go to the language listed first in ``detection.priority``; languages
missing from that list come after it, ordered by code.
"""

from typing import Any, Dict, Iterable, List, Optional

from .base import DetectionScore, EngineComponent
from .config import EngineConfig, get_config
from .config_logging import InsufficientSampleError, NoLanguageAvailableError, get_logger
from .dictionary import DictionaryStore
from .languages import Language, LanguageRef
from .tokenizer import tokenize

__version__ = "1.0.0"

_logger = get_logger('detector')


class LanguageDetector(EngineComponent):
    """Dictionary hit-ratio language detection."""

    COMPONENT_NAME = "Language Detector"
    COMPONENT_VERSION = "1.0.0"

    def __init__(self, store: DictionaryStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or store.config or get_config()

    def min_sample_for(self, language: Language) -> int:
        override = language.profile.min_sample_tokens
        return override if override is not None else self.config.detection.min_sample_tokens

    def _priority_key(self, language: Language):
        priority = self.config.detection.priority
        if language.code in priority:
            return (0, priority.index(language.code), language.code)
        return (1, 0, language.code)

    def _candidates(self, candidates: Optional[Iterable[LanguageRef]]) -> List[Language]:
        if candidates is None:
            return self.store.loaded_languages()
        resolved: List[Language] = []
        for ref in candidates:
            language = self.store.resolve(ref)
            if language not in resolved:
                resolved.append(language)
        return resolved

    def _sample(self, text: str) -> List[str]:
        limit = self.config.detection.max_sample_tokens
        words: List[str] = []
        for token in tokenize(text).words():
            words.append(token.text)
            if limit and len(words) >= limit:
                break
        return words

    def rank(self, text: str,
             candidates: Optional[Iterable[LanguageRef]] = None) -> List[DetectionScore]:
        """
        Score every candidate against ``text``, best first.

        Languages whose profile accepts a smaller sample (CJK) are scored on
        short texts, but only a hit makes them a verdict: when some
        candidates were ruled out for sample size and no remaining one
        recognizes a word, the sample counts as insufficient.

        Raises:
            InsufficientSampleError: too few word tokens for a verdict
            NoLanguageAvailableError: there is no candidate to score
            UnknownLanguageError: a candidate was never registered
        """
        languages = self._candidates(candidates)
        if not languages:
            raise NoLanguageAvailableError("No candidate languages with a dictionary loaded")
        words = self._sample(text)

        eligible = [lang for lang in languages if len(words) >= self.min_sample_for(lang)]
        excluded = [lang for lang in languages if lang not in eligible]
        if not eligible:
            raise InsufficientSampleError(len(words), self._required(excluded))

        scores = []
        for language in eligible:
            hits = sum(1 for word in words if self.store.contains(language, word))
            scores.append(DetectionScore(language=language, hits=hits, total=len(words)))

        scores.sort(key=lambda s: (-s.ratio, self._priority_key(s.language)))
        if excluded and scores[0].hits == 0:
            raise InsufficientSampleError(len(words), self._required(excluded))
        return scores

    def _required(self, languages: List[Language]) -> int:
        return min((self.min_sample_for(lang) for lang in languages),
                   default=self.config.detection.min_sample_tokens)

    def detect(self, text: str,
               candidates: Optional[Iterable[LanguageRef]] = None) -> Language:
        """
        Detect the language of ``text``.

        Args:
            text: Text sample
            candidates: Languages to consider (default: every language with
                a dictionary loaded)

        Returns:
            The Language with the highest dictionary hit ratio.
        """
        scores = self.rank(text, candidates)
        best = scores[0]
        _logger.debug(
            f"Detected {best.language.name}",
            language=best.language.code,
            ratio=round(best.ratio, 4),
            scores={s.language.code: round(s.ratio, 4) for s in scores},
        )
        return best.language

    def get_status(self) -> Dict[str, Any]:
        status = self._base_status()
        status['min_sample_tokens'] = self.config.detection.min_sample_tokens
        status['max_sample_tokens'] = self.config.detection.max_sample_tokens
        status['priority'] = list(self.config.detection.priority)
        return status

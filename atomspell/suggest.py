"""
Suggestion Engine
=================
Ranked correction candidates for an unknown word.

Features:
- Damerau-Levenshtein (optimal string alignment) distance via symspellpy,
  abandoning a comparison once it passes the threshold
- Length pruning before any distance work: entries are bucketed by key
  length, so only buckets within ``max_distance`` are visited
- Deterministic ranking: distance, then frequency (higher first), then word
- Case carried over from the misspelled token

Requires: pip install symspellpy
"""

from typing import Any, Dict, List, Optional

from symspellpy.editdistance import DistanceAlgorithm, EditDistance

from .base import EngineComponent, Suggestion, sort_suggestions
from .config import EngineConfig, get_config
from .config_logging import get_logger
from .dictionary import DictionaryStore
from .languages import LanguageRef

__version__ = "1.0.0"

_logger = get_logger('suggest')


def apply_case(template: str, word: str) -> str:
    """
    Give ``word`` the casing style of ``template``.

    ALL-CAPS (two or more cased letters) -> upper case, Capitalized ->
    first letter upper, anything else -> lower case.
    """
    cased = [ch for ch in template if ch.isupper() or ch.islower()]
    if len(cased) > 1 and all(ch.isupper() for ch in cased):
        return word.upper()
    if cased and cased[0].isupper():
        return word[:1].upper() + word[1:]
    return word.lower()


class SuggestionEngine(EngineComponent):
    """
    Bounded edit-distance search over one language's dictionary.

    Scans the dictionary directly rather than building a SymSpell delete
    index, so custom words are suggestible the moment they are added.
    """

    COMPONENT_NAME = "Suggestion Engine"
    COMPONENT_VERSION = "1.0.0"

    DISTANCE_ALGORITHM = DistanceAlgorithm.DAMERAU_OSA

    def __init__(self, store: DictionaryStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or store.config or get_config()

    @property
    def max_edit_distance(self) -> int:
        return self.config.suggestion.max_edit_distance

    @property
    def max_suggestions(self) -> int:
        return self.config.suggestion.max_suggestions

    def suggest(
        self,
        word: str,
        language: LanguageRef,
        max_results: Optional[int] = None,
        max_distance: Optional[int] = None
    ) -> List[Suggestion]:
        """
        Get ranked corrections for ``word``.

        Args:
            word: The (misspelled) word
            language: Registered language or code
            max_results: Cap on returned suggestions (default from config)
            max_distance: Largest edit distance considered (default from config)

        Returns:
            Up to ``max_results`` suggestions, best first. Empty when no
            dictionary is loaded for the language or nothing is close enough.

        Raises:
            UnknownLanguageError: ``language`` was never registered
        """
        resolved = self.store.resolve(language)
        if max_results is None:
            max_results = self.max_suggestions
        if max_distance is None:
            max_distance = self.max_edit_distance
        if max_distance < 0:
            raise ValueError(f"max_distance must be >= 0, got {max_distance}")

        word = word.strip()
        if max_results <= 0 or not word:
            return []

        dictionary = self.store.get_dictionary(resolved)
        if dictionary is None:
            _logger.debug("No dictionary loaded, no suggestions", language=resolved.code)
            return []

        key = resolved.fold(word)
        # One comparer per call: symspellpy comparers keep scratch buffers
        comparer = EditDistance(self.DISTANCE_ALGORITHM)
        best: Dict[str, Suggestion] = {}

        for entry in dictionary.candidates(len(key) - max_distance, len(key) + max_distance):
            if entry.key == key:
                distance = 0
            else:
                distance = comparer.compare(key, entry.key, max_distance)
                if distance < 0:
                    continue

            candidate = apply_case(word, entry.word)
            if candidate == word:
                continue

            suggestion = Suggestion(
                word=candidate,
                distance=distance,
                score=float(distance),
                frequency=entry.frequency,
            )
            existing = best.get(candidate)
            if existing is None or suggestion.sort_key() < existing.sort_key():
                best[candidate] = suggestion

        return sort_suggestions(list(best.values()))[:max_results]

    def best(self, word: str, language: LanguageRef) -> Optional[str]:
        """The top suggestion for ``word``, or None."""
        suggestions = self.suggest(word, language, max_results=1)
        return suggestions[0].word if suggestions else None

    def get_status(self) -> Dict[str, Any]:
        status = self._base_status()
        status['algorithm'] = self.DISTANCE_ALGORITHM.name
        status['max_edit_distance'] = self.max_edit_distance
        status['max_suggestions'] = self.max_suggestions
        return status

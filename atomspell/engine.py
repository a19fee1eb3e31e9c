"""
Spell Engine
============
The single entry point editors and tools talk to.

Wraps one DictionaryStore and the components built on it:

    engine = SpellEngine()
    engine.load_dictionary("eng", word_list_bytes)
    report = engine.check("Helo wrold", "eng")
    engine.add_custom_word("eng", "atomspell")

The engine does no file I/O. Reading word lists and persisting custom words
is left to the caller (see ``atomspell.files`` for ready-made helpers).
"""

from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .base import CheckReport, DetectionScore, EngineComponent, Suggestion
from .config import EngineConfig, get_config
from .detector import LanguageDetector
from .dictionary import Dictionary, DictionaryStore, WordListSource
from .languages import AUTO_DETECT, Language, LanguageRef, LanguageRegistry
from .lookup import LookupEngine
from .session import CheckSession
from .suggest import SuggestionEngine

__version__ = "1.0.0"


class SpellEngine(EngineComponent):
    """Facade over the dictionary store, detector, lookup, suggestions and checks."""

    COMPONENT_NAME = "AtomSpell Engine"
    COMPONENT_VERSION = __version__

    def __init__(
        self,
        store: Optional[DictionaryStore] = None,
        config: Optional[EngineConfig] = None,
        registry: Optional[LanguageRegistry] = None
    ):
        self.config = config or (store.config if store is not None else get_config())
        self.store = store or DictionaryStore(registry=registry, config=self.config)
        self.detector = LanguageDetector(self.store, self.config)
        self.lookup = LookupEngine(self.store, self.config)
        self.suggester = SuggestionEngine(self.store, self.config)
        self.session = CheckSession(
            self.store, self.config,
            detector=self.detector, lookup=self.lookup, suggester=self.suggester,
        )

    # -- dictionaries ----------------------------------------------------------

    def load_dictionary(self, language: LanguageRef, word_list: WordListSource,
                        frequencies: Optional[Mapping[str, int]] = None) -> Dictionary:
        return self.store.load(language, word_list, frequencies)

    def add_custom_word(self, language: LanguageRef, word: str) -> bool:
        return self.store.add_custom_word(language, word)

    def remove_custom_word(self, language: LanguageRef, word: str) -> bool:
        return self.store.remove_custom_word(language, word)

    def custom_words(self, language: LanguageRef) -> List[str]:
        return self.store.custom_words(language)

    def import_custom_words(self, language: LanguageRef, words: Iterable[str]) -> int:
        return self.store.import_custom_words(language, words)

    def languages(self) -> List[Language]:
        return self.store.languages()

    def loaded_languages(self) -> List[Language]:
        return self.store.loaded_languages()

    # -- checking --------------------------------------------------------------

    def is_known(self, word: str, language: LanguageRef) -> bool:
        return self.lookup.is_known(word, language)

    def check(
        self,
        text: str,
        language: LanguageRef = AUTO_DETECT,
        default_language: Optional[LanguageRef] = None,
        ignore: Optional[Iterable[str]] = None,
        filename: Optional[Union[str, PurePath]] = None
    ) -> CheckReport:
        """
        Check ``text`` in ``language`` (or ``"auto"``).

        ``default_language`` falls back to the configured
        ``default_language`` when not given. ``filename`` lets a source
        file's extension mark the text as code.
        """
        if default_language is None:
            default_language = self.config.default_language
        return self.session.check(text, language, default_language=default_language,
                                  ignore=ignore, filename=filename)

    def suggest(self, word: str, language: LanguageRef,
                max_results: Optional[int] = None) -> List[Suggestion]:
        return self.suggester.suggest(word, language, max_results=max_results)

    def detect_language(self, text: str,
                        candidates: Optional[Iterable[LanguageRef]] = None) -> Language:
        return self.detector.detect(text, candidates)

    def rank_languages(self, text: str,
                       candidates: Optional[Iterable[LanguageRef]] = None) -> List[DetectionScore]:
        return self.detector.rank(text, candidates)

    def get_status(self) -> Dict[str, Any]:
        status = self._base_status()
        status['store'] = self.store.get_status()
        status['session'] = self.session.get_status()
        return status

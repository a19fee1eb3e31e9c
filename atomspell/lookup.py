"""
Lookup Engine
=============
Answers "is this token a known word?" for one language.

Only WORD tokens are ever looked up. Punctuation, whitespace and bare
numbers are always known. Alphanumeric tokens such as ``mp3`` or ``3rd``
are words and go through the dictionary like any other.

With ``lookup.code_aware`` set, listed acronyms (API, JSON, ...) are known
too. Identifiers inside source code are handled by the session, which
sees the whole text.
"""

from typing import Any, Dict, Optional, Union

from .base import EngineComponent, Token, TokenKind
from .code import is_acronym
from .config import EngineConfig, get_config
from .dictionary import DictionaryStore
from .languages import LanguageRef


class LookupEngine(EngineComponent):
    """Dictionary membership for tokens, with the configured skip rules."""

    COMPONENT_NAME = "Lookup Engine"
    COMPONENT_VERSION = "1.0.0"

    def __init__(self, store: DictionaryStore, config: Optional[EngineConfig] = None):
        self.store = store
        self.config = config or store.config or get_config()

    def is_skipped(self, word: str) -> bool:
        """Words the configuration says never to flag."""
        lookup = self.config.lookup
        if len(word) < lookup.min_word_length:
            return True
        if lookup.ignore_uppercase and len(word) > 1 and word.isupper():
            return True
        if lookup.code_aware and is_acronym(word, lookup.acronyms):
            return True
        return False

    def is_known(self, token: Union[Token, str], language: LanguageRef) -> bool:
        """
        Check a token (or a bare word) against ``language``.

        Raises:
            UnknownLanguageError: ``language`` was never registered
        """
        if isinstance(token, Token):
            if token.kind is not TokenKind.WORD:
                self.store.resolve(language)
                return True
            word = token.text
        else:
            word = token

        if self.is_skipped(word):
            self.store.resolve(language)
            return True

        return self.store.contains(language, word)

    def get_status(self) -> Dict[str, Any]:
        status = self._base_status()
        status['min_word_length'] = self.config.lookup.min_word_length
        status['ignore_uppercase'] = self.config.lookup.ignore_uppercase
        status['code_aware'] = self.config.lookup.code_aware
        return status

"""
Tests for the Lookup Engine
===========================
"""

import pytest

from atomspell.base import Token, TokenKind
from atomspell.config_logging import UnknownLanguageError
from atomspell.languages import Language
from atomspell.lookup import LookupEngine


@pytest.fixture
def lookup(store, config):
    return LookupEngine(store, config)


class TestLookupEngine:
    """Tests for LookupEngine.is_known."""

    def test_known_and_unknown_words(self, lookup):
        assert lookup.is_known("hello", "eng")
        assert lookup.is_known("World", "eng")
        assert not lookup.is_known("Helo", "eng")

    def test_typographic_apostrophe(self, lookup):
        """Curly apostrophes match the straight form in the word list."""
        assert lookup.is_known("Don’t", "eng")

    def test_non_word_tokens_always_known(self, lookup):
        """Punctuation, whitespace and numbers are never looked up."""
        for kind, text in [(TokenKind.PUNCTUATION, "?!"),
                           (TokenKind.WHITESPACE, "  "),
                           (TokenKind.NUMBER, "1999")]:
            assert lookup.is_known(Token(0, len(text), text, kind), "eng")

    def test_word_token(self, lookup):
        assert not lookup.is_known(Token(0, 4, "wrld", TokenKind.WORD), "eng")

    def test_unknown_language_raises_for_every_token(self, lookup):
        """An unregistered language is an error even for punctuation."""
        with pytest.raises(UnknownLanguageError):
            lookup.is_known(Token(0, 1, ",", TokenKind.PUNCTUATION), "xx")
        with pytest.raises(UnknownLanguageError):
            lookup.is_known("hello", "xx")

    def test_min_word_length(self, lookup, config):
        """Words shorter than the configured minimum are skipped."""
        config.lookup.min_word_length = 3
        assert lookup.is_known("xq", "eng")
        assert not lookup.is_known("xqz", "eng")

    def test_ignore_uppercase(self, lookup, config):
        """ALL-CAPS words are treated as acronyms when configured."""
        assert not lookup.is_known("NASA", "eng")
        config.lookup.ignore_uppercase = True
        assert lookup.is_known("NASA", "eng")
        assert not lookup.is_known("Nasa", "eng")

    def test_idempotent(self, config):
        """Repeated lookups of the same word give the same answer."""
        from atomspell.dictionary import DictionaryStore
        store = DictionaryStore(config=config)
        store.load(Language("tst", "Test"), "rat\nhat\nmat\ncat\nbat\nsat\n")
        lookup = LookupEngine(store, config)
        for word in ["cat", "Cat", "xat", "bat", "zat"]:
            answers = {lookup.is_known(word, "tst") for _ in range(5)}
            assert len(answers) == 1
        assert lookup.is_known("cat", "tst")
        assert not lookup.is_known("xat", "tst")

    def test_status(self, lookup):
        status = lookup.get_status()
        assert status["component"] == "Lookup Engine"
        assert status["min_word_length"] == 1

"""
Shared fixtures for the AtomSpell test suite.

Run all tests: python3 -m pytest tests/ -v
"""

import pytest

from atomspell.config import EngineConfig
from atomspell.dictionary import DictionaryStore
from atomspell.engine import SpellEngine

ENGLISH_WORDS = "\n".join([
    "the\t1000",
    "a\t950",
    "is\t900",
    "world\t800",
    "hello\t500",
    "would\t400",
    "word\t350",
    "spelling\t300",
    "help\t200",
    "test\t100",
    "Paris\t60",
    "held\t50",
    "hero\t40",
    "café\t20",
    "sperling\t5",
    "don't",
    "well-known",
]) + "\n"

FRENCH_WORDS = "\n".join([
    "le\t1000",
    "la\t900",
    "et\t800",
    "monde\t300",
    "bonjour\t100",
    "café\t50",
]) + "\n"


@pytest.fixture
def english_words() -> str:
    return ENGLISH_WORDS


@pytest.fixture
def french_words() -> str:
    return FRENCH_WORDS


@pytest.fixture
def config() -> EngineConfig:
    """Default configuration, independent of environment and config files."""
    return EngineConfig()


@pytest.fixture
def store(config) -> DictionaryStore:
    """Store with English and French dictionaries loaded."""
    store = DictionaryStore(config=config)
    store.load("eng", ENGLISH_WORDS)
    store.load("fra", FRENCH_WORDS)
    return store


@pytest.fixture
def engine(store, config) -> SpellEngine:
    """Engine wrapping the populated store."""
    return SpellEngine(store=store, config=config)

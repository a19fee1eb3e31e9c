"""
AtomSpell Spell-Checking Engine
===============================
Version: 1.0.0

Multilingual spell checking over plain word-list dictionaries:
- Tokenizer: exact partition of text into word/number/punctuation/whitespace
- Dictionary Store: per-language words, frequencies and custom words
- Language Detector: dictionary hit-ratio auto-detection
- Lookup + Suggestion engines: bounded Damerau-Levenshtein candidates
- Check Session: one-call document checks with positions and suggestions

Heavier pieces (engine, CLI, file helpers) load on first access.
"""

__version__ = "1.0.0"
__author__ = "AtomSpell"

from .config_logging import (  # noqa: E402
    AtomSpellError,
    DictionaryFileError,
    DictionaryLoadError,
    InsufficientSampleError,
    NoLanguageAvailableError,
    UnknownLanguageError,
)
from .languages import AUTO_DETECT, Language, LanguageProfile, LanguageRegistry  # noqa: E402
from .base import CheckReport, Misspelling, Suggestion, Token, TokenKind  # noqa: E402
from .tokenizer import tokenize  # noqa: E402

# Lazy loading implementation
_ATTRIBUTES = {
    'SpellEngine': ('atomspell.engine', 'SpellEngine'),
    'DictionaryStore': ('atomspell.dictionary', 'DictionaryStore'),
    'LanguageDetector': ('atomspell.detector', 'LanguageDetector'),
    'LookupEngine': ('atomspell.lookup', 'LookupEngine'),
    'SuggestionEngine': ('atomspell.suggest', 'SuggestionEngine'),
    'CheckSession': ('atomspell.session', 'CheckSession'),
}

_MODULES = {
    'engine': 'atomspell.engine',
    'dictionary': 'atomspell.dictionary',
    'detector': 'atomspell.detector',
    'lookup': 'atomspell.lookup',
    'suggest': 'atomspell.suggest',
    'session': 'atomspell.session',
    'files': 'atomspell.files',
    'stats': 'atomspell.stats',
    'code': 'atomspell.code',
    'cli': 'atomspell.cli',
}

_loaded = {}


def __getattr__(name):
    """Lazy load submodules and engine classes on first access."""
    import importlib
    if name in _ATTRIBUTES:
        if name not in _loaded:
            module_name, attr = _ATTRIBUTES[name]
            _loaded[name] = getattr(importlib.import_module(module_name), attr)
        return _loaded[name]
    if name in _MODULES:
        if name not in _loaded:
            _loaded[name] = importlib.import_module(_MODULES[name])
        return _loaded[name]
    raise AttributeError(f"module 'atomspell' has no attribute '{name}'")


def __dir__():
    return sorted(list(globals()) + list(_ATTRIBUTES) + list(_MODULES))


def create_engine(load_bundled: bool = True, dict_dirs=None):
    """
    Build a SpellEngine, optionally loading the bundled dictionaries.

    Args:
        load_bundled: Load dictionaries shipped in ``atomspell/dictionaries``
        dict_dirs: Extra directories searched before the bundled one
    """
    from .engine import SpellEngine
    from .files import BUNDLED_DICT_DIR, load_dictionaries

    engine = SpellEngine()
    dirs = list(dict_dirs or [])
    if load_bundled:
        dirs.append(BUNDLED_DICT_DIR)
    if dirs:
        load_dictionaries(engine.store, dirs)
    return engine


def get_status():
    """Versions and availability of the engine's pieces."""
    status = {'version': __version__, 'modules': {}}
    for name in _MODULES:
        module_status = {'available': False, 'version': None, 'error': None}
        try:
            mod = __getattr__(name)
            module_status['available'] = True
            module_status['version'] = getattr(mod, '__version__', __version__)
        except ImportError as e:
            module_status['error'] = str(e)
        status['modules'][name] = module_status
    return status

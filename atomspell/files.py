"""
Dictionary Files
================
File-system helpers for callers of the engine: discovering bundled and
user dictionaries, and persisting the custom-word layer.

Dictionary files are named ``dictionary(<code>).txt``, e.g.
``dictionary(eng).txt``. Custom word files hold one word per line, UTF-8.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .config_logging import DictionaryFileError, get_logger, handle_errors
from .dictionary import DictionaryStore
from .languages import LanguageRef

_logger = get_logger('files')

# Dictionaries shipped with the package
BUNDLED_DICT_DIR = Path(__file__).parent / "dictionaries"

DICTIONARY_FILE_PATTERN = re.compile(r'^dictionary\((?P<code>[^()]+)\)\.txt$')

PathLike = Union[str, Path]


def dictionary_filename(code: str) -> str:
    return f"dictionary({code}).txt"


def scan_dictionaries(dirs: Optional[Iterable[PathLike]] = None) -> Dict[str, Path]:
    """
    Map language codes to dictionary files found in ``dirs``.

    Directories are searched in order; the first file for a code wins.
    Defaults to the bundled dictionary directory.
    """
    found: Dict[str, Path] = {}
    for directory in (dirs if dirs is not None else [BUNDLED_DICT_DIR]):
        directory = Path(directory)
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            match = DICTIONARY_FILE_PATTERN.match(path.name)
            if match and path.is_file():
                found.setdefault(match.group('code').lower(), path)
    return found


@handle_errors()
def read_word_list(path: PathLike) -> bytes:
    """Raw bytes of a word list; decoding is the store's job so errors carry line numbers."""
    return Path(path).read_bytes()


def load_dictionaries(store: DictionaryStore,
                      dirs: Optional[Iterable[PathLike]] = None,
                      codes: Optional[Iterable[str]] = None) -> List[str]:
    """
    Load every discovered dictionary whose code the store knows.

    Files for unregistered codes are skipped with a warning. Returns the
    codes that were loaded.
    """
    wanted = {c.lower() for c in codes} if codes is not None else None
    loaded: List[str] = []
    for code, path in scan_dictionaries(dirs).items():
        if wanted is not None and code not in wanted:
            continue
        language = store.registry.find(code)
        if language is None:
            _logger.warning("Skipping dictionary for unregistered language",
                            code=code, path=str(path))
            continue
        store.load(language, read_word_list(path))
        loaded.append(language.code)
    return loaded


def load_dictionary_file(store: DictionaryStore, language: LanguageRef, path: PathLike):
    """Load a single word list file for ``language``."""
    return store.load(language, read_word_list(path))


@handle_errors()
def export_custom_words(store: DictionaryStore, language: LanguageRef, path: PathLike) -> int:
    """Write the custom words of ``language`` to ``path``; returns the count."""
    words = store.custom_words(language)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(''.join(f"{word}\n" for word in words), encoding='utf-8')
    return len(words)


@handle_errors()
def import_custom_words(store: DictionaryStore, language: LanguageRef, path: PathLike) -> int:
    """Re-add custom words saved by ``export_custom_words``; safe to repeat."""
    try:
        content = Path(path).read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise DictionaryFileError(f"Custom word file is not valid UTF-8: {path}",
                                  filename=str(path)) from e
    return store.import_custom_words(language, content.splitlines())

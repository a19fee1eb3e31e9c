"""
Dictionary Store
================
Per-language word sets with optional frequency weights and a separately
tracked layer of user-added custom words.

Word list format (one entry per line, UTF-8)::

    word
    word<TAB>frequency

Matching goes through the language's fold (lowercase plus diacritic folding
where the language allows it); stored words keep the spelling they were
loaded with.

Locking: each Dictionary has its own readers-writer lock, so checks against
one language never wait on a custom-word edit in another.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union, Any

from .base import EngineComponent
from .config import EngineConfig, get_config
from .config_logging import DictionaryLoadError, get_logger
from .languages import Language, LanguageRef, LanguageRegistry

__version__ = "1.0.0"

_logger = get_logger('dictionary')

WordListSource = Union[bytes, str, Iterable[Union[str, bytes]]]


class ReadWriteLock:
    """
    Many readers or one writer.

    Writers are preferred: once a writer is waiting, new readers queue
    behind it so a stream of checks cannot starve a custom-word edit.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


@dataclass(frozen=True)
class DictionaryEntry:
    """A stored word, its matching key and its frequency weight."""
    word: str
    key: str
    frequency: int


# =============================================================================
# WORD LIST PARSING
# =============================================================================

def _iter_raw_lines(source: WordListSource) -> Iterator[Union[str, bytes]]:
    if isinstance(source, bytes):
        yield from source.splitlines()
    elif isinstance(source, str):
        yield from source.splitlines()
    else:
        for item in source:
            if isinstance(item, (bytes, str)):
                yield item.rstrip(b'\r\n') if isinstance(item, bytes) else item.rstrip('\r\n')
            else:
                raise DictionaryLoadError(
                    f"word list items must be str or bytes, got {type(item).__name__}")


def parse_word_list(source: WordListSource,
                    language: Optional[str] = None) -> List[Tuple[str, Optional[int]]]:
    """
    Parse a word list into ``(word, frequency)`` pairs, frequency None when absent.

    Raises:
        DictionaryLoadError: undecodable bytes, blank line before the end,
            bad frequency column, or no words at all.
    """
    lines = list(_iter_raw_lines(source))
    parsed: List[Tuple[str, Optional[int]]] = []
    last = len(lines)

    for line_number, raw in enumerate(lines, start=1):
        if isinstance(raw, bytes):
            try:
                line = raw.decode('utf-8')
            except UnicodeDecodeError as e:
                raise DictionaryLoadError(
                    f"not valid UTF-8 ({e.reason})",
                    line_number=line_number, language=language) from e
        else:
            line = raw

        if line_number == 1:
            line = line.lstrip('\ufeff')

        if not line.strip():
            if line_number == last:
                continue
            raise DictionaryLoadError("empty line", line_number=line_number, language=language)

        columns = line.rstrip('\r\n').split('\t')
        if len(columns) > 2:
            raise DictionaryLoadError(
                f"expected 'word' or 'word<TAB>frequency', got {len(columns)} columns",
                line_number=line_number, language=language)

        word = columns[0].strip()
        if not word:
            raise DictionaryLoadError("missing word", line_number=line_number, language=language)

        frequency: Optional[int] = None
        if len(columns) == 2:
            try:
                frequency = int(columns[1].strip())
            except ValueError:
                raise DictionaryLoadError(
                    f"frequency must be an integer, got {columns[1].strip()!r}",
                    line_number=line_number, language=language) from None
            if frequency < 0:
                raise DictionaryLoadError(
                    f"frequency must not be negative, got {frequency}",
                    line_number=line_number, language=language)

        parsed.append((word, frequency))

    if not parsed:
        raise DictionaryLoadError("word list is empty", language=language)

    return parsed


# =============================================================================
# DICTIONARY
# =============================================================================

class WordListView:
    """
    Re-iterable view over a dictionary's words: base words, then custom
    words that are not base words.

    Each iteration takes its own snapshot, so iterating has no side
    effects and a concurrent edit never breaks an iteration in progress.
    """

    def __init__(self, dictionary: 'Dictionary'):
        self._dictionary = dictionary

    def __iter__(self) -> Iterator[str]:
        base, base_keys, custom = self._dictionary._snapshot()
        for entry in base:
            yield entry.word
        for entry in custom:
            if entry.key not in base_keys:
                yield entry.word

    def __len__(self) -> int:
        return self._dictionary.word_count()

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self._dictionary.contains(word)


class Dictionary:
    """
    Words known for one Language.

    Base entries are replaced only by ``replace_base`` (a reload); custom
    entries are added and removed one at a time and exported on their own.
    """

    def __init__(self, language: Language, entries: Iterable[DictionaryEntry] = ()):
        self.language = language
        self._lock = ReadWriteLock()
        self._custom: Dict[str, DictionaryEntry] = {}
        self._set_base(tuple(entries))

    def _set_base(self, entries: Tuple[DictionaryEntry, ...]):
        by_length: Dict[int, List[DictionaryEntry]] = {}
        for entry in entries:
            by_length.setdefault(len(entry.key), []).append(entry)
        self._base: Tuple[DictionaryEntry, ...] = entries
        self._base_keys = frozenset(entry.key for entry in entries)
        self._by_length: Dict[int, Tuple[DictionaryEntry, ...]] = {
            length: tuple(bucket) for length, bucket in by_length.items()
        }

    # -- reads -----------------------------------------------------------------

    def contains(self, word: str) -> bool:
        key = self.language.fold(word)
        with self._lock.read_locked():
            return key in self._base_keys or key in self._custom

    def contains_key(self, key: str) -> bool:
        with self._lock.read_locked():
            return key in self._base_keys or key in self._custom

    def is_custom(self, word: str) -> bool:
        key = self.language.fold(word)
        with self._lock.read_locked():
            return key in self._custom

    def word_count(self) -> int:
        with self._lock.read_locked():
            extra = sum(1 for key in self._custom if key not in self._base_keys)
            return len(self._base) + extra

    @property
    def base_size(self) -> int:
        return len(self._base)

    def custom_words(self) -> List[str]:
        with self._lock.read_locked():
            return [entry.word for entry in self._custom.values()]

    def words(self) -> WordListView:
        return WordListView(self)

    def candidates(self, min_length: int, max_length: int) -> List[DictionaryEntry]:
        """Entries whose key length lies in ``[min_length, max_length]``."""
        with self._lock.read_locked():
            found: List[DictionaryEntry] = []
            for length in range(max(min_length, 0), max_length + 1):
                found.extend(self._by_length.get(length, ()))
            found.extend(entry for entry in self._custom.values()
                         if min_length <= len(entry.key) <= max_length
                         and entry.key not in self._base_keys)
            return found

    def _snapshot(self) -> Tuple[Tuple[DictionaryEntry, ...], frozenset,
                                 Tuple[DictionaryEntry, ...]]:
        with self._lock.read_locked():
            return self._base, self._base_keys, tuple(self._custom.values())

    # -- writes ----------------------------------------------------------------

    def replace_base(self, entries: Iterable[DictionaryEntry]):
        entries = tuple(entries)
        with self._lock.write_locked():
            self._set_base(entries)

    def add_custom(self, word: str, frequency: int) -> bool:
        """Add a custom word; False when a word with the same key is already custom."""
        key = self.language.fold(word)
        with self._lock.write_locked():
            if key in self._custom:
                return False
            self._custom[key] = DictionaryEntry(word, key, frequency)
            return True

    def remove_custom(self, word: str) -> bool:
        key = self.language.fold(word)
        with self._lock.write_locked():
            return self._custom.pop(key, None) is not None

    def __repr__(self) -> str:
        return (f"Dictionary(language={self.language.code!r}, "
                f"base={len(self._base)}, custom={len(self._custom)})")


# =============================================================================
# DICTIONARY STORE
# =============================================================================

class DictionaryStore(EngineComponent):
    """
    Owns every Dictionary, keyed by language code.

    Pass one store explicitly to the components that need it; nothing in
    the engine keeps a process-wide store.
    """

    COMPONENT_NAME = "Dictionary Store"
    COMPONENT_VERSION = "1.0.0"

    def __init__(self, registry: Optional[LanguageRegistry] = None,
                 config: Optional[EngineConfig] = None):
        self.registry = registry if registry is not None else LanguageRegistry.builtin()
        self.config = config or get_config()
        self._dictionaries: Dict[str, Dictionary] = {}
        self._lock = threading.Lock()

    # -- languages -------------------------------------------------------------

    def register_language(self, language: Language) -> Language:
        return self.registry.register(language)

    def resolve(self, language: LanguageRef) -> Language:
        """Registered Language for ``language``; UnknownLanguageError otherwise."""
        return self.registry.resolve(language)

    def languages(self) -> List[Language]:
        return list(self.registry)

    def loaded_languages(self) -> List[Language]:
        with self._lock:
            codes = set(self._dictionaries)
        return [language for language in self.registry if language.code in codes]

    def fold(self, language: LanguageRef, word: str) -> str:
        return self.resolve(language).fold(word)

    # -- dictionaries ----------------------------------------------------------

    def get_dictionary(self, language: LanguageRef) -> Optional[Dictionary]:
        """Dictionary for a registered language, or None if none is loaded."""
        resolved = self.resolve(language)
        with self._lock:
            return self._dictionaries.get(resolved.code)

    def has_dictionary(self, language: LanguageRef) -> bool:
        return self.get_dictionary(language) is not None

    def _get_or_create(self, language: Language) -> Dictionary:
        with self._lock:
            dictionary = self._dictionaries.get(language.code)
            if dictionary is None:
                dictionary = Dictionary(language)
                self._dictionaries[language.code] = dictionary
            return dictionary

    def load(self, language: LanguageRef, word_list: WordListSource,
             frequencies: Optional[Mapping[str, int]] = None) -> Dictionary:
        """
        Register or replace the base word list of ``language``.

        Args:
            language: A Language (registered on the fly) or a registered code/alias
            word_list: Raw bytes, text, or an iterable of lines
            frequencies: Optional word -> weight mapping, overriding the list's
                frequency column

        Returns:
            The language's Dictionary. Custom words survive a reload.
        """
        if isinstance(language, Language):
            resolved = self.registry.register(language)
        else:
            resolved = self.resolve(language)

        parsed = parse_word_list(word_list, language=resolved.code)
        default_frequency = self.config.suggestion.default_frequency
        overrides = dict(frequencies or {})

        entries: List[DictionaryEntry] = []
        seen: Dict[str, int] = {}
        for word, frequency in parsed:
            if word in overrides:
                frequency = overrides[word]
            if frequency is None:
                frequency = default_frequency
            frequency = int(frequency)
            if word in seen:
                # Duplicate line: keep the larger weight
                index = seen[word]
                if frequency > entries[index].frequency:
                    entries[index] = DictionaryEntry(word, entries[index].key, frequency)
                continue
            seen[word] = len(entries)
            entries.append(DictionaryEntry(word, resolved.fold(word), frequency))

        with self._lock:
            dictionary = self._dictionaries.get(resolved.code)
            reload = dictionary is not None
            if not reload:
                dictionary = Dictionary(resolved, entries)
                self._dictionaries[resolved.code] = dictionary
        if reload:
            dictionary.replace_base(entries)

        _logger.info(f"Loaded dictionary for {resolved.name}",
                     language=resolved.code, words=len(entries))
        return dictionary

    # -- custom words ----------------------------------------------------------

    def add_custom_word(self, language: LanguageRef, word: str,
                        frequency: Optional[int] = None) -> bool:
        """
        Add ``word`` to the custom layer of ``language``.

        Idempotent: adding a word that is already there succeeds and
        changes nothing. Returns True when the word was newly added.
        """
        resolved = self.resolve(language)
        word = word.strip()
        if not word:
            raise ValueError("custom word must not be empty")
        if frequency is None:
            frequency = self.config.suggestion.default_frequency
        added = self._get_or_create(resolved).add_custom(word, frequency)
        if added:
            _logger.debug("Custom word added", language=resolved.code, word=word)
        return added

    def remove_custom_word(self, language: LanguageRef, word: str) -> bool:
        """Remove ``word`` from the custom layer; no-op when absent."""
        resolved = self.resolve(language)
        dictionary = self.get_dictionary(resolved)
        if dictionary is None:
            return False
        removed = dictionary.remove_custom(word.strip())
        if removed:
            _logger.debug("Custom word removed", language=resolved.code, word=word)
        return removed

    def custom_words(self, language: LanguageRef) -> List[str]:
        """The custom layer as a flat list, in insertion order (for export)."""
        dictionary = self.get_dictionary(language)
        return dictionary.custom_words() if dictionary is not None else []

    def import_custom_words(self, language: LanguageRef, words: Iterable[str]) -> int:
        """Re-add exported custom words; safe to repeat. Returns the number newly added."""
        resolved = self.resolve(language)
        added = 0
        for word in words:
            if word and word.strip() and self.add_custom_word(resolved, word):
                added += 1
        return added

    # -- lookups ---------------------------------------------------------------

    def contains(self, language: LanguageRef, word: str) -> bool:
        """True when ``word`` is a base or custom word of ``language``."""
        dictionary = self.get_dictionary(language)
        if dictionary is None:
            return False
        return dictionary.contains(word)

    def list_words(self, language: LanguageRef) -> Iterable[str]:
        """Lazy, re-iterable sequence of every word (base then custom)."""
        dictionary = self.get_dictionary(language)
        if dictionary is None:
            return ()
        return dictionary.words()

    def word_count(self, language: LanguageRef) -> int:
        dictionary = self.get_dictionary(language)
        return dictionary.word_count() if dictionary is not None else 0

    def get_status(self) -> Dict[str, Any]:
        status = self._base_status()
        status['registered_languages'] = self.registry.codes()
        status['dictionaries'] = {
            language.code: {
                'words': self.word_count(language),
                'custom_words': len(self.custom_words(language)),
            }
            for language in self.loaded_languages()
        }
        return status

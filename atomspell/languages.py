"""
Languages
=========
Language identifiers, their per-language matching rules, and the registry
the dictionary store resolves codes against.

Languages differ only in data: a LanguageProfile says how words are folded
for matching and whether detection needs a larger sample. No language gets
its own subclass.
"""

import threading
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .config_logging import UnknownLanguageError

AUTO_DETECT = "auto"
AUTO_DETECT_ALIASES = frozenset({"auto", "autodetect", "auto-detect"})

# Folds applied for every language: typographic apostrophes and hyphens
COMMON_FOLDS: Dict[str, str] = {
    "’": "'",   # right single quotation mark
    "‘": "'",   # left single quotation mark
    "ʼ": "'",   # modifier letter apostrophe
    "‐": "-",   # hyphen
    "‑": "-",   # non-breaking hyphen
}


@dataclass(frozen=True)
class LanguageProfile:
    """Matching rules for one language."""
    fold_diacritics: bool = True
    char_folds: Tuple[Tuple[str, str], ...] = ()
    min_sample_tokens: Optional[int] = None
    case_insensitive: bool = True

    def _table(self) -> Dict[int, str]:
        table = {ord(k): v for k, v in COMMON_FOLDS.items()}
        table.update({ord(k): v for k, v in self.char_folds})
        return table

    def fold(self, word: str) -> str:
        """Matching key for ``word``; the stored word is never changed."""
        key = unicodedata.normalize('NFC', word)
        if self.case_insensitive:
            key = key.lower()
        key = key.translate(_fold_table(self))
        if self.fold_diacritics:
            decomposed = unicodedata.normalize('NFD', key)
            key = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
        return unicodedata.normalize('NFC', key)


_fold_tables: Dict[LanguageProfile, Dict[int, str]] = {}


def _fold_table(profile: LanguageProfile) -> Dict[int, str]:
    table = _fold_tables.get(profile)
    if table is None:
        table = _fold_tables.setdefault(profile, profile._table())
    return table


DEFAULT_PROFILE = LanguageProfile()


@dataclass(frozen=True)
class Language:
    """A registered language."""
    code: str
    name: str
    aliases: Tuple[str, ...] = ()
    flag: str = ""
    profile: LanguageProfile = field(default=DEFAULT_PROFILE)

    def fold(self, word: str) -> str:
        return self.profile.fold(word)

    def matches(self, identifier: str) -> bool:
        ident = identifier.strip().lower()
        return ident == self.code or ident in self.aliases

    def __str__(self) -> str:
        return self.code


ENGLISH = Language("eng", "English", ("en", "english"), "\U0001F1EC\U0001F1E7")
AFRIKAANS = Language("afr", "Afrikaans", ("af", "afrikaans"), "\U0001F1FF\U0001F1E6")
FRENCH = Language(
    "fra", "French", ("fr", "fre", "french"), "\U0001F1EB\U0001F1F7",
    LanguageProfile(char_folds=(("œ", "oe"), ("æ", "ae"))),
)
SPANISH = Language("spa", "Spanish", ("es", "spanish"), "\U0001F1EA\U0001F1F8")
GERMAN = Language(
    "deu", "German", ("de", "ger", "german"), "\U0001F1E9\U0001F1EA",
    LanguageProfile(char_folds=(("ß", "ss"),)),
)
CHINESE = Language(
    "zho", "Chinese", ("zh", "chi", "chinese"), "\U0001F1E8\U0001F1F3",
    LanguageProfile(fold_diacritics=False, min_sample_tokens=1),
)
ITALIAN = Language("ita", "Italian", ("it", "italian"), "\U0001F1EE\U0001F1F9")
PORTUGUESE = Language("por", "Portuguese", ("pt", "portuguese"), "\U0001F1F5\U0001F1F9")
RUSSIAN = Language(
    "rus", "Russian", ("ru", "russian"), "\U0001F1F7\U0001F1FA",
    # Stripping marks would turn й into и; only ё is folded
    LanguageProfile(fold_diacritics=False, char_folds=(("ё", "е"),)),
)
JAPANESE = Language(
    "jpn", "Japanese", ("ja", "japanese"), "\U0001F1EF\U0001F1F5",
    LanguageProfile(fold_diacritics=False, min_sample_tokens=1),
)
KOREAN = Language(
    "kor", "Korean", ("ko", "korean"), "\U0001F1F0\U0001F1F7",
    # NFD would split Hangul syllables into jamo
    LanguageProfile(fold_diacritics=False, min_sample_tokens=1),
)

BUILTIN_LANGUAGES: Tuple[Language, ...] = (
    ENGLISH, AFRIKAANS, FRENCH, SPANISH, GERMAN, CHINESE,
    ITALIAN, PORTUGUESE, RUSSIAN, JAPANESE, KOREAN,
)

LanguageRef = Union[Language, str]


def is_auto_detect(value: object) -> bool:
    """True when ``value`` asks for auto-detection instead of naming a language."""
    return isinstance(value, str) and value.strip().lower() in AUTO_DETECT_ALIASES


class LanguageRegistry:
    """
    Registered languages, in registration order.

    Registration is the only mutation; a Language is never removed.
    """

    def __init__(self, languages: Optional[List[Language]] = None):
        self._languages: Dict[str, Language] = {}
        self._lock = threading.Lock()
        for language in languages or ():
            self.register(language)

    @classmethod
    def builtin(cls) -> 'LanguageRegistry':
        return cls(list(BUILTIN_LANGUAGES))

    def register(self, language: Language) -> Language:
        """Register ``language``; a second registration of the same code keeps the first."""
        if is_auto_detect(language.code):
            raise ValueError(f"'{language.code}' is reserved for auto-detection")
        with self._lock:
            return self._languages.setdefault(language.code, language)

    def find(self, ref: LanguageRef) -> Optional[Language]:
        if isinstance(ref, Language):
            return self._languages.get(ref.code)
        ident = str(ref).strip().lower()
        language = self._languages.get(ident)
        if language is not None:
            return language
        for language in list(self._languages.values()):
            if language.matches(ident):
                return language
        return None

    def resolve(self, ref: LanguageRef) -> Language:
        """Return the registered Language for a Language, code, or alias."""
        language = self.find(ref)
        if language is None:
            raise UnknownLanguageError(ref.code if isinstance(ref, Language) else ref)
        return language

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, (Language, str)):
            return False
        return self.find(ref) is not None

    def __iter__(self) -> Iterator[Language]:
        return iter(list(self._languages.values()))

    def __len__(self) -> int:
        return len(self._languages)

    def codes(self) -> List[str]:
        return list(self._languages)

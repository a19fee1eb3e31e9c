"""
Check Session
=============
Checks one document: resolve the language, tokenize, look up every word,
attach suggestions to the unknown ones, and return a CheckReport.

A session holds no per-request state, so one instance may run many checks
at once against the same DictionaryStore.
"""

import bisect
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .base import CheckReport, EngineComponent, Misspelling, Suggestion, Token, TokenKind
from .code import CodeSpans, file_extension, is_code_file, is_likely_code
from .config import EngineConfig, get_config
from .config_logging import (
    InsufficientSampleError,
    NoLanguageAvailableError,
    StructuredLogger,
    get_logger,
)
from .detector import LanguageDetector
from .dictionary import DictionaryStore
from .languages import AUTO_DETECT, Language, LanguageRef, is_auto_detect
from .lookup import LookupEngine
from .suggest import SuggestionEngine
from .tokenizer import tokenize

__version__ = "1.0.0"

_logger = get_logger('session')


class _LineIndex:
    """Maps character offsets to 1-based (line, column)."""

    def __init__(self, text: str):
        self._starts = [0]
        for i, ch in enumerate(text):
            if ch == '\n':
                self._starts.append(i + 1)

    @property
    def line_count(self) -> int:
        return len(self._starts)

    def position(self, offset: int) -> Tuple[int, int]:
        line = bisect.bisect_right(self._starts, offset) - 1
        return line + 1, offset - self._starts[line] + 1


class CheckSession(EngineComponent):
    """Orchestrates tokenizer, detector, lookup and suggestions for one request."""

    COMPONENT_NAME = "Check Session"
    COMPONENT_VERSION = "1.0.0"

    def __init__(
        self,
        store: DictionaryStore,
        config: Optional[EngineConfig] = None,
        detector: Optional[LanguageDetector] = None,
        lookup: Optional[LookupEngine] = None,
        suggester: Optional[SuggestionEngine] = None
    ):
        self.store = store
        self.config = config or store.config or get_config()
        self.detector = detector or LanguageDetector(store, self.config)
        self.lookup = lookup or LookupEngine(store, self.config)
        self.suggester = suggester or SuggestionEngine(store, self.config)

    # -- language resolution ---------------------------------------------------

    def resolve_language(
        self,
        text: str,
        language: LanguageRef = AUTO_DETECT,
        default_language: Optional[LanguageRef] = None
    ) -> Tuple[Language, bool]:
        """
        Active language for ``text`` and whether it was auto-detected.

        Raises:
            NoLanguageAvailableError: detection had too little text and no
                default was given
            UnknownLanguageError: a named language was never registered
        """
        if not is_auto_detect(language):
            return self.store.resolve(language), False

        try:
            return self.detector.detect(text, self.store.loaded_languages()), True
        except InsufficientSampleError as e:
            if default_language is None:
                raise NoLanguageAvailableError(
                    f"Language detection failed ({e.message}) and no default language was given",
                    word_count=e.word_count, required=e.required) from e
            fallback = self.store.resolve(default_language)
            _logger.debug("Sample too small for detection, using default",
                          language=fallback.code, word_count=e.word_count)
            return fallback, False

    # -- checking --------------------------------------------------------------

    def _check_words(
        self,
        words: Sequence[Token],
        language: Language,
        ignored: Set[str],
        max_suggestions: Optional[int],
        code_spans: Optional[CodeSpans] = None
    ) -> List[Tuple[Token, Tuple[Suggestion, ...]]]:
        """Unknown words of one chunk with their suggestions, in input order."""
        found: List[Tuple[Token, Tuple[Suggestion, ...]]] = []
        memo: Dict[str, Tuple[Suggestion, ...]] = {}
        for token in words:
            if ignored and language.fold(token.text) in ignored:
                continue
            if code_spans and code_spans.covers(token):
                continue
            if self.lookup.is_known(token, language):
                continue
            suggestions = memo.get(token.text)
            if suggestions is None:
                suggestions = tuple(self.suggester.suggest(
                    token.text, language, max_results=max_suggestions))
                memo[token.text] = suggestions
            found.append((token, suggestions))
        return found

    def _chunks(self, words: List[Token]) -> List[List[Token]]:
        size = max(1, self.config.session.chunk_size)
        return [words[i:i + size] for i in range(0, len(words), size)]

    def check(
        self,
        text: str,
        language: LanguageRef = AUTO_DETECT,
        default_language: Optional[LanguageRef] = None,
        ignore: Optional[Iterable[str]] = None,
        max_suggestions: Optional[int] = None,
        filename: Optional[Union[str, PurePath]] = None
    ) -> CheckReport:
        """
        Check ``text`` and report its misspellings.

        Args:
            text: Document text
            language: Language, code, or ``"auto"`` to detect it
            default_language: Fallback when auto-detection has too little text
            ignore: Words never to flag in this request ("ignore all")
            max_suggestions: Per-misspelling cap (default from config)
            filename: Name of the file the text came from; its extension
                marks source code and sets the report's file_type

        Returns:
            CheckReport with misspellings in document order.
        """
        start_time = time.time()
        StructuredLogger.new_correlation_id()

        with _logger.log_operation('check', characters=len(text)):
            active, detected = self.resolve_language(text, language, default_language)

            tokens = list(tokenize(text))
            words = [t for t in tokens if t.kind is TokenKind.WORD]
            lines = _LineIndex(text)
            metrics: Dict[str, Any] = {'chunks': 1}
            likely_code = is_code_file(filename) or is_likely_code(text)
            file_type = file_extension(filename)

            if not self.store.has_dictionary(active):
                _logger.warning(f"No dictionary loaded for {active.name}; nothing checked",
                                language=active.code)
                return CheckReport(
                    language=active,
                    total_tokens=len(tokens),
                    word_count=len(words),
                    detected=detected,
                    dictionary_loaded=False,
                    lines_checked=lines.line_count if text else 0,
                    likely_code=likely_code,
                    file_type=file_type,
                    duration_ms=(time.time() - start_time) * 1000,
                    metrics={'chunks': 0},
                )

            ignored = {active.fold(w) for w in (ignore or ()) if w and w.strip()}
            session_config = self.config.session
            code_spans = None
            if self.config.lookup.code_aware and likely_code:
                code_spans = CodeSpans(text)
                metrics['code_identifiers'] = len(code_spans)

            if (session_config.parallel_threshold and session_config.max_workers > 1
                    and len(words) > session_config.parallel_threshold):
                chunks = self._chunks(words)
                metrics['chunks'] = len(chunks)
                with ThreadPoolExecutor(max_workers=session_config.max_workers) as pool:
                    results = pool.map(
                        lambda chunk: self._check_words(chunk, active, ignored, max_suggestions,
                                                         code_spans),
                        chunks)
                    unknown = [item for chunk_result in results for item in chunk_result]
                # Restore document order regardless of completion order
                unknown.sort(key=lambda item: item[0].start)
            else:
                unknown = self._check_words(words, active, ignored, max_suggestions, code_spans)

            misspellings = []
            for token, suggestions in unknown:
                line, column = lines.position(token.start)
                misspellings.append(Misspelling(token, suggestions, line, column))

            report = CheckReport(
                language=active,
                misspellings=tuple(misspellings),
                total_tokens=len(tokens),
                word_count=len(words),
                detected=detected,
                dictionary_loaded=True,
                lines_checked=lines.line_count if text else 0,
                likely_code=likely_code,
                file_type=file_type,
                duration_ms=(time.time() - start_time) * 1000,
                metrics=metrics,
            )

        _logger.info("Check finished", language=active.code, words=report.word_count,
                     misspelled=report.misspelled_count)
        return report

    def get_status(self) -> Dict[str, Any]:
        status = self._base_status()
        status['components'] = {
            'detector': self.detector.get_status(),
            'lookup': self.lookup.get_status(),
            'suggester': self.suggester.get_status(),
        }
        status['parallel_threshold'] = self.config.session.parallel_threshold
        return status

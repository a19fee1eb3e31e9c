"""
Tests for the Check Session
===========================
End-to-end document checks: positions, auto-detection, fallbacks,
chunked checking and concurrent use.
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from atomspell.config_logging import NoLanguageAvailableError, UnknownLanguageError
from atomspell.session import CheckSession


@pytest.fixture
def session(store, config):
    return CheckSession(store, config)


class TestCheck:
    """Tests for CheckSession.check."""

    def test_misspellings_with_positions(self, session):
        report = session.check("Helo wrold", "eng")

        assert report.language.code == "eng"
        assert not report.detected
        assert report.word_count == 2
        assert report.total_tokens == 3
        assert [m.word for m in report.misspellings] == ["Helo", "wrold"]
        assert [(m.start, m.end) for m in report.misspellings] == [(0, 4), (5, 10)]
        assert [m.column for m in report.misspellings] == [1, 6]
        assert [m.best_suggestion for m in report.misspellings] == ["Hello", "world"]

    def test_line_and_column(self, session):
        """Positions are 1-based lines and columns."""
        report = session.check("hello\nthe wrold", "eng")
        [misspelling] = report.misspellings
        assert misspelling.start == 10
        assert (misspelling.line, misspelling.column) == (2, 5)
        assert report.lines_checked == 2

    def test_clean_text(self, session):
        """Numbers and punctuation are never flagged."""
        report = session.check("Hello, world! 42 is the test.", "eng")
        assert report.is_clean
        assert report.accuracy == 100.0

    def test_accuracy(self, session):
        report = session.check("Helo world", "eng")
        assert report.misspelled_count == 1
        assert report.accuracy == 50.0
        assert report.suggestions_count == len(report.misspellings[0].suggestions)

    def test_repeated_misspelling_reported_each_time(self, session):
        report = session.check("helo and helo", "eng")
        flagged = [m for m in report.misspellings if m.word == "helo"]
        assert [m.start for m in flagged] == [0, 9]
        assert flagged[0].suggestions == flagged[1].suggestions

    def test_empty_text(self, session):
        report = session.check("", "eng")
        assert report.is_clean
        assert report.word_count == 0
        assert report.total_tokens == 0
        assert report.lines_checked == 0
        assert report.accuracy == 100.0

    def test_ignore_list(self, session):
        """Ignored words are skipped for this request only."""
        report = session.check("Helo wrold", "eng", ignore=["helo"])
        assert [m.word for m in report.misspellings] == ["wrold"]
        assert len(session.check("Helo wrold", "eng").misspellings) == 2

    def test_custom_word_accepted(self, store, session):
        store.add_custom_word("eng", "wrold")
        report = session.check("Helo wrold", "eng")
        assert [m.word for m in report.misspellings] == ["Helo"]

    def test_max_suggestions(self, session):
        report = session.check("Helo", "eng", max_suggestions=1)
        assert len(report.misspellings[0].suggestions) == 1

    def test_unknown_language(self, session):
        with pytest.raises(UnknownLanguageError):
            session.check("Helo", "xx")

    def test_no_dictionary_loaded(self, session):
        """A registered language without a dictionary checks nothing."""
        report = session.check("Hallo Welt", "deu")
        assert report.language.code == "deu"
        assert not report.dictionary_loaded
        assert report.misspellings == ()
        assert report.word_count == 2
        assert report.metrics == {"chunks": 0}

    def test_report_is_immutable(self, session):
        report = session.check("Helo", "eng")
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.word_count = 99

    def test_report_metrics_are_read_only(self, session):
        report = session.check("Helo", "eng")
        with pytest.raises(TypeError):
            report.metrics["chunks"] = 5
        assert report.metrics["chunks"] == 1

    def test_report_to_dict(self, session):
        data = session.check("Helo wrold", "eng").to_dict()
        assert data["language"] == "eng"
        assert data["misspelled_count"] == 2
        assert data["misspellings"][0]["word"] == "Helo"
        assert data["misspellings"][0]["suggestions"][0]["word"] == "Hello"


class TestLanguageResolution:
    """Tests for auto-detection inside a check."""

    def test_auto_detect(self, session):
        report = session.check("Bonjour le monde", "auto")
        assert report.language.code == "fra"
        assert report.detected
        assert report.is_clean

    def test_short_text_uses_default(self, session):
        report = session.check("Helo", "auto", default_language="eng")
        assert report.language.code == "eng"
        assert not report.detected
        assert [m.word for m in report.misspellings] == ["Helo"]

    def test_short_text_without_default(self, session):
        with pytest.raises(NoLanguageAvailableError) as exc:
            session.check("Helo", "auto")
        assert exc.value.code == "NO_LANGUAGE_AVAILABLE"

    def test_short_text_ignores_unmatched_cjk(self, store, session):
        """A loaded CJK dictionary does not claim short text it cannot read."""
        store.load("zho", "你好\n世界\n")
        report = session.check("Helo", "auto", default_language="eng")
        assert report.language.code == "eng"
        assert not report.detected
        with pytest.raises(NoLanguageAvailableError):
            session.check("ok", "auto")

    def test_explicit_language_skips_detection(self, session):
        language, detected = session.resolve_language("Bonjour le monde", "en")
        assert language.code == "eng"
        assert not detected


class TestParallelCheck:
    """Tests for chunked checking of long documents."""

    def test_chunked_matches_sequential(self, session, config):
        """Chunked results are identical and in document order."""
        text = " ".join(["hello", "wrold", "Helo", "world"] * 15)
        sequential = session.check(text, "eng")

        config.session.parallel_threshold = 10
        config.session.chunk_size = 7
        config.session.max_workers = 4
        chunked = session.check(text, "eng")

        assert chunked.metrics["chunks"] == 9
        assert chunked.misspellings == sequential.misspellings
        starts = [m.start for m in chunked.misspellings]
        assert starts == sorted(starts)
        assert chunked.misspelled_count == 30

    def test_concurrent_checks_and_edits(self, store, session):
        """Checks run safely while custom words change."""
        def check(_):
            return session.check("Helo wrold, hello world", "eng").word_count

        def add(i):
            store.add_custom_word("eng", f"term{i}")
            return 4

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(check, i) for i in range(20)]
            futures += [pool.submit(add, i) for i in range(20)]
            results = [f.result() for f in futures]

        assert results == [4] * 40
        assert len(store.custom_words("eng")) == 20

    def test_status(self, session):
        status = session.get_status()
        assert set(status["components"]) == {"detector", "lookup", "suggester"}

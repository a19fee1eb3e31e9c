"""
Tests for Logging & Errors
==========================
"""

import json
import logging

import pytest

from atomspell.config_logging import (
    LOGGER_NAMESPACE,
    AtomSpellError,
    DictionaryFileError,
    DictionaryLoadError,
    InsufficientSampleError,
    JsonFormatter,
    LogConfig,
    StructuredLogger,
    UnknownLanguageError,
    configure_logging,
    get_logger,
    handle_errors,
)


@pytest.fixture
def restore_logging():
    logger = logging.getLogger(LOGGER_NAMESPACE)
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_load_error_carries_line(self):
        error = DictionaryLoadError("bad frequency", line_number=3, language="eng")
        assert isinstance(error, AtomSpellError)
        assert error.message == "line 3: bad frequency"
        assert error.details == {'line_number': 3, 'language': "eng"}

    def test_to_dict(self):
        payload = UnknownLanguageError("xx").to_dict()
        assert payload == {
            'success': False,
            'error': {
                'code': "UNKNOWN_LANGUAGE",
                'message': "Unknown language: xx",
                'details': {'language': "xx"},
            },
        }

    def test_insufficient_sample(self):
        error = InsufficientSampleError(1, 3)
        assert (error.word_count, error.required) == (1, 3)
        assert "3" in str(error)


class TestHandleErrors:
    """Tests for the handle_errors decorator."""

    def test_missing_file(self, tmp_path):
        @handle_errors()
        def read(path):
            return open(path, encoding='utf-8').read()

        with pytest.raises(DictionaryFileError) as exc:
            read(tmp_path / "missing.txt")
        assert exc.value.code == "FILE_ERROR"
        assert str(exc.value.details['filename']).endswith("missing.txt")

    def test_engine_errors_pass_through(self):
        @handle_errors()
        def fail():
            raise UnknownLanguageError("xx")

        with pytest.raises(UnknownLanguageError):
            fail()

    def test_other_errors_propagate(self):
        @handle_errors()
        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            fail()


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_correlation_id(self):
        correlation_id = StructuredLogger.new_correlation_id()
        assert len(correlation_id) == 12
        assert StructuredLogger.get_correlation_id() == correlation_id

    def test_get_logger_is_cached(self):
        assert get_logger('tests') is get_logger('tests')
        assert get_logger('tests').logger.name == "atomspell.tests"

    def test_context_fields(self, caplog):
        caplog.set_level(logging.INFO, logger=LOGGER_NAMESPACE)
        get_logger('tests').info("Loaded", language="eng", words=3)
        record = caplog.records[-1]
        assert record.getMessage() == "Loaded"
        assert record.context == {'language': "eng", 'words': 3}

    def test_log_operation(self, caplog):
        caplog.set_level(logging.DEBUG, logger=LOGGER_NAMESPACE)
        logger = get_logger('tests')
        with logger.log_operation('load', language="eng"):
            pass
        with pytest.raises(RuntimeError):
            with logger.log_operation('load'):
                raise RuntimeError("boom")
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["load started", "load completed", "load started",
                            "load failed: boom"]
        assert caplog.records[1].context['status'] == 'completed'


class TestFormattingAndHandlers:
    """Tests for JsonFormatter and configure_logging."""

    def test_json_formatter(self):
        record = logging.LogRecord("atomspell.tests", logging.INFO, __file__, 1,
                                   "Detected %s", ("French",), None)
        record.correlation_id = "abc123"
        record.context = {'language': "fra"}
        data = json.loads(JsonFormatter().format(record))
        assert data['message'] == "Detected French"
        assert data['level'] == "INFO"
        assert data['correlation_id'] == "abc123"
        assert data['language'] == "fra"

    def test_log_config_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv('ATOMSPELL_LOG_LEVEL', 'DEBUG')
        monkeypatch.setenv('ATOMSPELL_LOG_FORMAT', 'json')
        monkeypatch.setenv('ATOMSPELL_LOG_CONSOLE', 'false')
        monkeypatch.setenv('ATOMSPELL_LOG_FILE', str(tmp_path / "spell.log"))
        config = LogConfig.from_env()
        assert config.level == 'DEBUG'
        assert config.log_format == 'json'
        assert config.log_to_console is False
        assert config.log_file == tmp_path / "spell.log"

    def test_configure_file_logging(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "spell.log"
        configure_logging(LogConfig(level="INFO", log_format="json",
                                    log_to_console=False, log_file=log_file))
        get_logger('tests').info("Check finished", words=2)
        for handler in logging.getLogger(LOGGER_NAMESPACE).handlers:
            handler.flush()

        line = log_file.read_text(encoding='utf-8').strip().splitlines()[-1]
        data = json.loads(line)
        assert data['message'] == "Check finished"
        assert data['words'] == 2

    def test_configure_without_outputs(self, restore_logging):
        root = configure_logging(LogConfig(log_to_console=False))
        assert [type(h) for h in root.handlers] == [logging.NullHandler]

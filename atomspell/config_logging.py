"""
AtomSpell Logging & Errors Module
=================================
Structured logging and the engine's error hierarchy.

The engine itself never decides where log records go: every module logs
through the ``atomspell`` logger namespace, which only carries a
NullHandler until the caller runs ``configure_logging()``.
"""

import os
import sys
import json
import logging
import uuid
import time
import functools
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Callable
from pathlib import Path
from dataclasses import dataclass
from contextlib import contextmanager
import threading

# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================
LOGGER_NAMESPACE = "atomspell"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5MB max per log file
LOG_BACKUP_COUNT = 5                  # Number of log backup files to keep

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_RECORD_KEYS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
))

logging.getLogger(LOGGER_NAMESPACE).addHandler(logging.NullHandler())


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

@dataclass
class LogConfig:
    """Where and how engine log records are written."""

    level: str = "WARNING"
    log_format: str = "text"  # Options: json, text
    log_to_console: bool = True
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> 'LogConfig':
        """Load logging configuration from environment variables."""
        log_file = os.environ.get('ATOMSPELL_LOG_FILE')
        return cls(
            level=os.environ.get('ATOMSPELL_LOG_LEVEL', 'WARNING'),
            log_format=os.environ.get('ATOMSPELL_LOG_FORMAT', 'text'),
            log_to_console=os.environ.get('ATOMSPELL_LOG_CONSOLE', 'true').lower() == 'true',
            log_file=Path(log_file) if log_file else None,
        )


def configure_logging(config: Optional[LogConfig] = None) -> logging.Logger:
    """
    Attach handlers to the ``atomspell`` logger.

    Safe to call more than once: previously attached handlers are replaced.
    """
    config = config or LogConfig.from_env()
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(getattr(logging, config.level.upper(), logging.WARNING))
    root.handlers.clear()

    if config.log_format == 'json':
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s - %(message)s'
        )

    if config.log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if config.log_file:
        from logging.handlers import RotatingFileHandler
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            config.log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    return root


# =============================================================================
# STRUCTURED LOGGING
# =============================================================================

class StructuredLogger:
    """Thread-safe structured logger with correlation IDs."""

    _local = threading.local()

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")

    @classmethod
    def set_correlation_id(cls, correlation_id: Optional[str]):
        """Set correlation ID for current thread."""
        cls._local.correlation_id = correlation_id

    @classmethod
    def get_correlation_id(cls) -> Optional[str]:
        """Get correlation ID for current thread."""
        return getattr(cls._local, 'correlation_id', None)

    @classmethod
    def new_correlation_id(cls) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())[:12]
        cls.set_correlation_id(correlation_id)
        return correlation_id

    def _extra(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {'correlation_id': self.get_correlation_id(), 'context': fields}

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(message, extra=self._extra(kwargs))

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(message, extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(message, extra=self._extra(kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs):
        """Log error message with optional exception info."""
        self.logger.error(message, exc_info=exc_info, extra=self._extra(kwargs))

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback."""
        self.error(message, exc_info=True, **kwargs)

    @contextmanager
    def log_operation(self, operation: str, level: int = logging.DEBUG, **context):
        """Context manager for logging operation start/end with timing."""
        start_time = time.time()
        self.logger.log(level, f"{operation} started",
                        extra=self._extra({'operation': operation, 'status': 'started', **context}))
        try:
            yield
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            self.logger.log(level, f"{operation} failed: {e}",
                            extra=self._extra({'operation': operation, 'status': 'failed',
                                               'duration_ms': round(duration_ms, 2), **context}))
            raise
        duration_ms = (time.time() - start_time) * 1000
        self.logger.log(level, f"{operation} completed",
                        extra=self._extra({'operation': operation, 'status': 'completed',
                                           'duration_ms': round(duration_ms, 2), **context}))


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['traceback'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_KEYS:
                continue
            if key == 'context' and isinstance(value, dict):
                log_data.update(value)
            elif value is not None:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


_loggers: Dict[str, StructuredLogger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance (one per name)."""
    with _loggers_lock:
        if name not in _loggers:
            _loggers[name] = StructuredLogger(name)
        return _loggers[name]


# =============================================================================
# ERROR HANDLING
# =============================================================================

class AtomSpellError(Exception):
    """Base exception for the spell-checking engine."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR",
                 details: Optional[Dict] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a serializable error payload."""
        return {
            'success': False,
            'error': {
                'code': self.code,
                'message': self.message,
                'details': self.details
            }
        }


class DictionaryLoadError(AtomSpellError):
    """Word list is empty or malformed."""
    def __init__(self, message: str, line_number: Optional[int] = None,
                 language: Optional[str] = None, **kwargs):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message, code="DICTIONARY_LOAD_ERROR",
                         details={'line_number': line_number, 'language': language, **kwargs})
        self.line_number = line_number
        self.language = language


class UnknownLanguageError(AtomSpellError):
    """Operation references a language that was never registered."""
    def __init__(self, language: Any, **kwargs):
        super().__init__(f"Unknown language: {language}", code="UNKNOWN_LANGUAGE",
                         details={'language': str(language), **kwargs})
        self.language = language


class InsufficientSampleError(AtomSpellError):
    """Too few word tokens to auto-detect a language."""
    def __init__(self, word_count: int, required: int, **kwargs):
        super().__init__(
            f"Need at least {required} words to detect a language, got {word_count}",
            code="INSUFFICIENT_SAMPLE",
            details={'word_count': word_count, 'required': required, **kwargs})
        self.word_count = word_count
        self.required = required


class NoLanguageAvailableError(AtomSpellError):
    """Auto-detection failed and no fallback language was supplied."""
    def __init__(self, message: str = "Language could not be detected and no default was given",
                 **kwargs):
        super().__init__(message, code="NO_LANGUAGE_AVAILABLE", details=kwargs)


class DictionaryFileError(AtomSpellError):
    """Dictionary or custom word file could not be read or written."""
    def __init__(self, message: str, filename: Optional[str] = None, **kwargs):
        super().__init__(message, code="FILE_ERROR",
                         details={'filename': filename, **kwargs})


def handle_errors(logger: Optional[StructuredLogger] = None):
    """Decorator translating file-system failures into DictionaryFileError."""
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _logger = logger or get_logger(func.__module__.rsplit('.', 1)[-1])
            try:
                return func(*args, **kwargs)
            except AtomSpellError:
                raise
            except FileNotFoundError as e:
                _logger.error(f"File not found: {e}")
                raise DictionaryFileError(f"File not found: {e.filename}",
                                          filename=e.filename) from e
            except PermissionError as e:
                _logger.error(f"Permission denied: {e}")
                raise DictionaryFileError(f"Permission denied: {e.filename}",
                                          filename=e.filename) from e
            except IsADirectoryError as e:
                _logger.error(f"Not a file: {e}")
                raise DictionaryFileError(f"Not a file: {e.filename}",
                                          filename=e.filename) from e
        return wrapper
    return decorator

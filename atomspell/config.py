"""
AtomSpell Configuration Module
==============================
Centralized configuration for the spell-checking engine.

Configuration can be set via:
1. Environment variables (ATOMSPELL_MAX_EDIT_DISTANCE=1)
2. Config file (atomspell_config.json, or ATOMSPELL_CONFIG_FILE)
3. Direct API calls (config.set('suggestion.max_suggestions', 10))

Defaults: Damerau-Levenshtein distance 2, 5 suggestions, 3-word detection sample.
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, asdict

from .config_logging import get_logger

__version__ = "1.0.0"

_logger = get_logger('config')

CONFIG_FILE_NAME = "atomspell_config.json"

# Explicit config path; None means CONFIG_FILE_NAME in the current directory
CONFIG_FILE: Optional[Path] = None

DEFAULT_DETECTION_PRIORITY = [
    'eng', 'fra', 'deu', 'spa', 'ita', 'por', 'afr', 'rus', 'zho', 'jpn', 'kor',
]

DEFAULT_ACRONYMS = [
    'API', 'HTTP', 'HTTPS', 'URL', 'URI', 'HTML', 'CSS', 'JS', 'TS', 'JSON',
    'XML', 'SQL', 'NoSQL', 'CPU', 'GPU', 'RAM', 'ROM', 'USB', 'SSD', 'HDD',
    'LAN', 'WAN', 'VPN', 'DNS', 'IP', 'TCP', 'UDP',
]


@dataclass
class SuggestionConfig:
    """Suggestion engine configuration."""
    max_edit_distance: int = 2
    max_suggestions: int = 5
    default_frequency: int = 1  # Weight for words listed without a frequency


@dataclass
class DetectionConfig:
    """Language auto-detection configuration."""
    min_sample_tokens: int = 3
    max_sample_tokens: int = 200  # 0 = use every word token
    priority: List[str] = field(default_factory=lambda: list(DEFAULT_DETECTION_PRIORITY))


@dataclass
class LookupConfig:
    """Lookup engine configuration."""
    min_word_length: int = 1  # Shorter words are never flagged
    ignore_uppercase: bool = False  # Treat ALL-CAPS words (acronyms) as known
    code_aware: bool = False  # Skip identifiers in source code and listed acronyms
    acronyms: List[str] = field(default_factory=lambda: list(DEFAULT_ACRONYMS))


@dataclass
class SessionConfig:
    """Check session configuration."""
    parallel_threshold: int = 5000  # Word tokens before chunked checking kicks in
    chunk_size: int = 1000
    max_workers: int = 4


@dataclass
class EngineConfig:
    """Master engine configuration."""
    suggestion: SuggestionConfig = field(default_factory=SuggestionConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    default_language: Optional[str] = None


# Global configuration instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _config_path() -> Path:
    override = os.environ.get('ATOMSPELL_CONFIG_FILE')
    if override:
        return Path(override)
    if CONFIG_FILE is not None:
        return CONFIG_FILE
    return Path.cwd() / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None, apply_env: bool = True) -> EngineConfig:
    """Load configuration from file and environment."""
    config = EngineConfig()
    path = Path(path) if path else _config_path()

    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
            _apply_dict_to_config(config, file_config)
        except (json.JSONDecodeError, IOError) as e:
            _logger.warning(f"Could not load config file: {e}", path=str(path))

    if apply_env:
        _apply_env_to_config(config)

    return config


def _apply_dict_to_config(config: EngineConfig, data: Dict[str, Any]):
    """Apply dictionary values to config object."""
    for section_name, section_data in data.items():
        if not hasattr(config, section_name):
            continue
        if isinstance(section_data, dict):
            section = getattr(config, section_name)
            for key, value in section_data.items():
                if hasattr(section, key):
                    setattr(section, key, value)
        else:
            setattr(config, section_name, section_data)


def _parse_bool(value: str) -> bool:
    """Parse boolean from string."""
    return value.lower() in ('true', '1', 'yes', 'on')


def _parse_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(',') if part.strip()]


_ENV_MAPPINGS = {
    'ATOMSPELL_MAX_EDIT_DISTANCE': ('suggestion', 'max_edit_distance', int),
    'ATOMSPELL_MAX_SUGGESTIONS': ('suggestion', 'max_suggestions', int),
    'ATOMSPELL_DEFAULT_FREQUENCY': ('suggestion', 'default_frequency', int),
    'ATOMSPELL_MIN_SAMPLE_TOKENS': ('detection', 'min_sample_tokens', int),
    'ATOMSPELL_MAX_SAMPLE_TOKENS': ('detection', 'max_sample_tokens', int),
    'ATOMSPELL_DETECTION_PRIORITY': ('detection', 'priority', _parse_list),
    'ATOMSPELL_MIN_WORD_LENGTH': ('lookup', 'min_word_length', int),
    'ATOMSPELL_IGNORE_UPPERCASE': ('lookup', 'ignore_uppercase', _parse_bool),
    'ATOMSPELL_CODE_AWARE': ('lookup', 'code_aware', _parse_bool),
    'ATOMSPELL_ACRONYMS': ('lookup', 'acronyms', _parse_list),
    'ATOMSPELL_PARALLEL_THRESHOLD': ('session', 'parallel_threshold', int),
    'ATOMSPELL_CHUNK_SIZE': ('session', 'chunk_size', int),
    'ATOMSPELL_MAX_WORKERS': ('session', 'max_workers', int),
}


def _apply_env_to_config(config: EngineConfig):
    """Apply environment variables to config."""
    for env_var, (section, key, converter) in _ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                section_obj = getattr(config, section)
                setattr(section_obj, key, converter(value))
            except (ValueError, AttributeError) as e:
                _logger.warning(f"Invalid env var {env_var}={value}: {e}")

    default_language = os.environ.get('ATOMSPELL_DEFAULT_LANGUAGE')
    if default_language:
        config.default_language = default_language


def get(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dot-notation key.

    Example: get('suggestion.max_edit_distance') -> 2
    """
    obj = get_config()
    for part in key.split('.'):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            return default

    return obj


def set(key: str, value: Any):
    """
    Set a configuration value by dot-notation key.

    Example: set('suggestion.max_suggestions', 10)
    """
    config = get_config()
    parts = key.split('.')

    if len(parts) == 1:
        if not hasattr(config, key):
            raise ValueError(f"Unknown config key: {key}")
        if isinstance(getattr(config, key), (SuggestionConfig, DetectionConfig,
                                             LookupConfig, SessionConfig)):
            raise ValueError(f"Key must be in format 'section.key': {key}")
        setattr(config, key, value)
        return

    if len(parts) != 2:
        raise ValueError(f"Key must be in format 'section.key': {key}")

    section_name, attr_name = parts
    if hasattr(config, section_name):
        section = getattr(config, section_name)
        if hasattr(section, attr_name):
            setattr(section, attr_name, value)
        else:
            raise ValueError(f"Unknown config key: {attr_name}")
    else:
        raise ValueError(f"Unknown config section: {section_name}")


def save_config(path: Optional[Path] = None):
    """Save current configuration to file."""
    path = Path(path) if path else _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(asdict(get_config()), f, indent=2)


def reset_config():
    """Reset configuration to defaults."""
    global _config
    _config = EngineConfig()

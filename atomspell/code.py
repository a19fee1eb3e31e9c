"""
Source Code Awareness
=====================
Heuristics for checking source files and technical text: recognize text
that is likely code and the identifiers inside it that should never be
spell-checked (``snake_case``, ``camelCase``, dunders, hex literals and
short keywords such as ``fn`` or ``ptr``).

Everything here is opt-in through ``lookup.code_aware``.
"""

import bisect
import re
from pathlib import PurePath
from typing import List, Optional, Tuple, Union

from .base import Token

__version__ = "1.0.0"

CODE_FILE_EXTENSIONS = frozenset([
    'rs', 'py', 'js', 'ts', 'jsx', 'tsx', 'java', 'cpp', 'c', 'cc', 'go', 'rb',
    'php', 'cs', 'swift', 'kt', 'scala', 'hs', 'lua', 'pl', 'r', 'm', 'f',
    'f90', 'f95', 'f03', 'f08', 'v', 'sv', 'vhd', 'vhdl', 'asm', 's', 'sh',
    'bash', 'zsh', 'fish', 'ps1', 'bat', 'cmd', 'yml', 'yaml', 'toml', 'json',
    'xml', 'html', 'htm', 'css', 'scss', 'less', 'md', 'markdown', 'tex', 'bib',
])

# Keywords and abbreviations that read as misspellings in prose
CODE_SYMBOLS = frozenset([
    'var', 'val', 'fn', 'def', 'func', 'cls', 'obj', 'arr', 'vec', 'str',
    'int', 'num', 'bool', 'float', 'double', 'char', 'byte', 'ptr', 'ref',
    'mut', 'const', 'static', 'pub', 'priv', 'prot', 'async', 'await', 'try',
    'catch', 'throw', 'null', 'nil', 'none', 'some', 'ok', 'err', 'true',
    'false', 'self', 'this', 'super', 'new', 'del', 'inc', 'dec',
])

CODE_LINE_MARKERS = (
    '->', '=>', 'fn ', 'def ', 'function ', 'class ', 'import ', 'export ',
    '#include', 'pub ', 'let ', 'const ', 'var ', 'return ',
)

# Lines sampled by is_likely_code, and how many must look like code
SAMPLE_LINES = 10
MIN_CODE_LINES = 2

IDENTIFIER_PATTERN = re.compile(r'\b0[xX][0-9A-Fa-f]+\b|[^\W\d]\w*')


def file_extension(filename: Optional[Union[str, PurePath]]) -> Optional[str]:
    """Lower-case extension without the dot, or None."""
    if not filename:
        return None
    suffix = PurePath(filename).suffix
    return suffix[1:].lower() if suffix else None


def is_code_file(filename: Optional[Union[str, PurePath]]) -> bool:
    """True for source, markup and config file extensions."""
    return file_extension(filename) in CODE_FILE_EXTENSIONS


def _looks_like_code(line: str) -> bool:
    if '{' in line or '}' in line:
        return True
    if ';' in line and not line.startswith('//'):
        return True
    return any(marker in line for marker in CODE_LINE_MARKERS)


def is_likely_code(text: str) -> bool:
    """
    Guess whether ``text`` is source code.

    Needs at least three lines; looks at the first ten and answers yes when
    two or more carry braces, statement semicolons, arrows or declaration
    keywords.
    """
    lines = text.splitlines()
    if len(lines) < 3:
        return False
    matches = sum(1 for line in lines[:SAMPLE_LINES] if _looks_like_code(line.strip()))
    return matches >= MIN_CODE_LINES


def is_acronym(word: str, acronyms) -> bool:
    """Listed acronym, unless written entirely in lower case."""
    if len(word) < 2 or word.islower():
        return False
    lowered = word.lower()
    return any(lowered == acronym.lower() for acronym in acronyms)


def is_code_identifier(name: str) -> bool:
    """Identifier that is never prose: snake_case, camelCase, hex, dunder or keyword."""
    if '_' in name:
        return True
    if name[:2] in ('0x', '0X'):
        return True
    if any(ch.islower() for ch in name) and any(ch.isupper() for ch in name[1:]):
        return True
    return name.lower() in CODE_SYMBOLS


class CodeSpans:
    """Character ranges of the code identifiers in one text."""

    def __init__(self, text: str):
        self._starts: List[int] = []
        self._ends: List[int] = []
        for match in IDENTIFIER_PATTERN.finditer(text):
            if is_code_identifier(match.group()):
                self._starts.append(match.start())
                self._ends.append(match.end())

    def __len__(self) -> int:
        return len(self._starts)

    def spans(self) -> List[Tuple[int, int]]:
        return list(zip(self._starts, self._ends))

    def covers(self, token: Token) -> bool:
        """True when ``token`` lies inside one identifier."""
        index = bisect.bisect_right(self._starts, token.start) - 1
        return index >= 0 and token.end <= self._ends[index]

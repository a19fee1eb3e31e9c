"""
Tokenizer
=========
Splits raw text into word, number, punctuation and whitespace tokens.

The tokens of a text partition it exactly: concatenating ``token.text`` in
order gives back the input, spans are contiguous and no token is empty.
Report positions rely on this.
"""

import unicodedata
from typing import Iterator, List

from .base import Token, TokenKind

# Characters allowed inside a word when a letter sits on both sides
WORD_JOINERS = frozenset("'’-‐")


def _is_letter(ch: str) -> bool:
    return ch.isalpha()


def _is_mark(ch: str) -> bool:
    return unicodedata.category(ch).startswith('M')


def _is_digit(ch: str) -> bool:
    return ch.isdigit()


def _is_word_char(ch: str) -> bool:
    return ch.isalpha() or ch.isdigit() or _is_mark(ch)


def _scan_word(text: str, start: int) -> int:
    """End of the letter/digit run starting at ``start``."""
    n = len(text)
    i = start
    while i < n:
        ch = text[i]
        if _is_word_char(ch):
            i += 1
            continue
        if (ch in WORD_JOINERS and i + 1 < n and _is_letter(text[i + 1])
                and i > start and (_is_letter(text[i - 1]) or _is_mark(text[i - 1]))):
            i += 1
            continue
        break
    return i


def _iter_tokens(text: str) -> Iterator[Token]:
    n = len(text)
    i = 0
    while i < n:
        ch = text[i]
        start = i
        if ch.isspace():
            while i < n and text[i].isspace():
                i += 1
            kind = TokenKind.WHITESPACE
        elif _is_letter(ch) or _is_digit(ch):
            i = _scan_word(text, i)
            run = text[start:i]
            kind = TokenKind.WORD if any(c.isalpha() for c in run) else TokenKind.NUMBER
        else:
            # Punctuation, symbols and stray combining marks
            i += 1
            while i < n:
                nxt = text[i]
                if nxt.isspace() or _is_letter(nxt) or _is_digit(nxt):
                    break
                i += 1
            kind = TokenKind.PUNCTUATION
        yield Token(start, i, text[start:i], kind)


class TokenStream:
    """
    Lazy, re-iterable token sequence over one text.

    Every iteration rescans the text, so iterating twice has no side
    effects and yields equal tokens.
    """

    __slots__ = ('text',)

    def __init__(self, text: str):
        self.text = text

    def __iter__(self) -> Iterator[Token]:
        return _iter_tokens(self.text)

    def words(self) -> Iterator[Token]:
        """Only the WORD tokens, in document order."""
        return (t for t in self if t.kind is TokenKind.WORD)

    def to_list(self) -> List[Token]:
        return list(self)

    def __repr__(self) -> str:
        preview = self.text if len(self.text) <= 30 else self.text[:27] + '...'
        return f"TokenStream({preview!r})"


def tokenize(text: str) -> TokenStream:
    """Tokenize ``text`` into a lazy, re-iterable TokenStream."""
    if not isinstance(text, str):
        raise TypeError(f"tokenize() expects str, got {type(text).__name__}")
    return TokenStream(text)


def word_tokens(text: str) -> List[Token]:
    """Shortcut: the WORD tokens of ``text`` as a list."""
    return list(tokenize(text).words())

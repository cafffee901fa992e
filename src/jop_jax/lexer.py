"""Tokenization for the J-like command notation.

Word formation follows J, restricted to what the operator table uses:
a primitive is one graphic character followed by any run of the
inflections ``.`` and ``:``; a numeric literal is ``_?digits`` where the
leading underscore negates; names are alphanumeric words.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Final


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_WHITESPACE: Final[frozenset[str]] = frozenset(" \t\n\r\f\v")
_INFLECTIONS: Final[frozenset[str]] = frozenset(".:")
_TOKENIZE_CACHE_MAX: Final[int] = max(1, int(os.environ.get("JOP_JAX_TOKENIZE_CACHE_MAX", "256")))


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_name_start(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_name_continue(ch: str) -> bool:
    return ch == "_" or (ch.isascii() and ch.isalnum())


def _scan_while(source: str, start: int, predicate) -> int:
    i = start
    while i < len(source) and predicate(source[i]):
        i += 1
    return i


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0

    while i < len(source):
        ch = source[i]

        if ch in _WHITESPACE:
            i += 1
            continue

        if _is_digit(ch) or (ch == "_" and i + 1 < len(source) and _is_digit(source[i + 1])):
            end = _scan_while(source, i + 1, _is_digit)
            tokens.append(Token("NUMBER", source[i:end], i, end))
            i = end
            continue

        if _is_name_start(ch):
            end = _scan_while(source, i + 1, _is_name_continue)
            tokens.append(Token("NAME", source[i:end], i, end))
            i = end
            continue

        end = _scan_while(source, i + 1, lambda c: c in _INFLECTIONS)
        tokens.append(Token("PRIM", source[i:end], i, end))
        i = end

    return tokens


@lru_cache(maxsize=_TOKENIZE_CACHE_MAX)
def token_texts(source: str) -> tuple[str, ...]:
    """Token strings of ``source`` in left-to-right textual order."""
    return tuple(tok.text for tok in tokenize(source))

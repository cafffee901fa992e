"""Token stream cursor and the numeric-literal convention."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

_NUMERIC_LITERAL_RE: Final = re.compile(r"_?[0-9]+")


def is_numeric_literal(text: str) -> bool:
    return _NUMERIC_LITERAL_RE.fullmatch(text) is not None


def to_numeric(text: str) -> int:
    """Parse ``_?digits``; a leading underscore negates."""
    if not is_numeric_literal(text):
        raise ValueError(f"Invalid numeric literal {text!r}")
    if text.startswith("_"):
        return -int(text[1:])
    return int(text)


class TokenStream:
    """Tokens not yet applied, consumed strictly from the front.

    The stream only ever shrinks, which bounds an evaluation by the
    number of tokens it started with.
    """

    __slots__ = ("_tokens", "_pos")

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens: tuple[str, ...] = tuple(tokens)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._tokens) - self._pos

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __repr__(self) -> str:
        return f"TokenStream({list(self.remaining())!r})"

    def remaining(self) -> tuple[str, ...]:
        return self._tokens[self._pos :]

    def is_empty(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> str | None:
        if self.is_empty():
            return None
        return self._tokens[self._pos]

    def advance(self, n: int = 1) -> None:
        if n < 0:
            raise ValueError("TokenStream cannot advance by a negative amount")
        self._pos = min(len(self._tokens), self._pos + n)

    def next_literal(self) -> int | None:
        token = self.peek()
        if token is None or not is_numeric_literal(token):
            return None
        return to_numeric(token)

    def integer_args(self) -> list[int]:
        """Leading numeric literals, reversed into the order they were written.

        Does not advance; callers advance by ``len(result)`` once used.
        """
        args: list[int] = []
        for token in self.remaining():
            if not is_numeric_literal(token):
                break
            args.append(to_numeric(token))
        args.reverse()
        return args

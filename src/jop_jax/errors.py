"""Structured error types for registry construction and evaluation."""

from __future__ import annotations

from dataclasses import dataclass


class JopError(Exception):
    """Base class for structured jop-jax errors."""


class JopRegistryError(JopError):
    """Operator table is inconsistent (duplicate representations)."""


class JopRuntimeError(JopError):
    """Generic failure while evaluating a command against a noun."""


@dataclass(frozen=True)
class JopMalformedCommandError(JopRuntimeError):
    """A compound operator was not followed by one of its follower tokens."""

    operator: str
    expected: tuple[str, ...] = ()
    found: str | None = None

    def __str__(self) -> str:
        expected = ""
        if self.expected:
            expected = f"; expected {', '.join(repr(e) for e in self.expected)}"
        found = "end of command" if self.found is None else repr(self.found)
        return f"{self.operator!r} is missing its follower{expected}; found {found}"


class JopShapeError(JopRuntimeError):
    """Runtime shape/length compatibility failure."""


class JopTypeError(JopRuntimeError):
    """Noun contains a value kind the evaluator does not support."""

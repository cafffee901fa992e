"""Right-to-left evaluator for J-like commands over nested numeric nouns."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Callable

from .lexer import token_texts
from .operators import Consumption, Operator, lookup, operator_registry
from .tokens import TokenStream, is_numeric_literal
from .values import as_noun

Tokenizer = Callable[[str], Sequence[str]]


def _operands(op: Operator, texts: Sequence[str], start: int) -> int:
    """End index of the operand tokens ``op`` takes from ``texts[start:]``."""
    end = start
    if op.consumes is Consumption.LITERALS:
        while end < len(texts) and is_numeric_literal(texts[end]):
            end += 1
    elif op.consumes is Consumption.LITERAL:
        if end < len(texts) and is_numeric_literal(texts[end]):
            end += 1
    elif op.consumes is Consumption.FOLLOWER:
        if end < len(texts):
            end += 1
    return end


def application_order(texts: Sequence[str], registry: Mapping[str, Operator] | None = None) -> list[str]:
    """Arrange left-to-right token texts into right-to-left application order.

    Every operator keeps the operand tokens written to its right directly
    behind it, numeric literals reversed so ``integer_args`` restores them
    as written. Phrases are then applied last-written first. A numeric
    literal no operator claims is a no-op and is dropped, so it cannot
    become an operand of the phrase applied after it.
    """
    if registry is None:
        registry = operator_registry()

    phrases: list[list[str]] = []
    i = 0
    while i < len(texts):
        head = texts[i]
        op = registry.get(head)
        if op is None:
            if not is_numeric_literal(head):
                phrases.append([head])
            i += 1
            continue
        end = _operands(op, texts, i + 1)
        phrases.append([head, *reversed(texts[i + 1 : end])])
        i = end

    return [text for phrase in reversed(phrases) for text in phrase]


class Interpreter:
    def __init__(self, command: str, *, tokenizer: Tokenizer | None = None) -> None:
        texts = token_texts(command) if tokenizer is None else tuple(tokenizer(command))
        self._stream = TokenStream(application_order(texts))

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._stream.remaining()

    def advance(self, amount: int) -> None:
        self._stream.advance(amount)

    def eval_on(self, noun):
        result = as_noun(noun)
        while not self._stream.is_empty():
            result = self._eval_op(result)
        return result

    def _eval_op(self, noun):
        token = self._stream.peek()
        self._stream.advance(1)
        return lookup(token).run(noun, self._stream)


def evaluate(command: str, noun, *, tokenizer: Tokenizer | None = None):
    """Evaluate ``command`` against ``noun`` and return the resulting noun.

    The caller's noun is copied before evaluation and never mutated.
    """
    return Interpreter(command, tokenizer=tokenizer).eval_on(noun)

"""Operator catalogue and the process-wide operator registry.

Each operator is a stateless entry keyed by its representation string.
An operator receives the current noun and the token stream; it may
advance the stream to consume its own operands and always returns a new
noun.
"""

from __future__ import annotations

import itertools
import math
import operator as pyop
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache, reduce
from types import MappingProxyType
from typing import Callable, Final

import jax.numpy as jnp

from .errors import JopMalformedCommandError, JopRegistryError, JopShapeError
from .kernels import apply_leaf, check_int_range, precision_scope, x64_enabled
from .tokens import TokenStream
from .values import box, deep_map, items, leaves


class Consumption(str, Enum):
    NONE = "none"
    LITERAL = "literal"
    LITERALS = "literals"
    FOLLOWER = "follower"


@dataclass(frozen=True)
class Operator:
    rep: str
    name: str
    consumes: Consumption
    run: Callable[[object, TokenStream], object] = field(repr=False, compare=False)
    followers: tuple[str, ...] = ()


def _deep_monad(op: str) -> Callable[[object, TokenStream], object]:
    def run(noun, _tokens: TokenStream):
        with precision_scope():
            return deep_map(lambda leaf: apply_leaf(op, leaf), noun)

    return run


def _combine(fn, left, right):
    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            raise JopShapeError(f"length error: cannot combine lists of length {len(left)} and {len(right)}")
        return [_combine(fn, l_item, r_item) for l_item, r_item in zip(left, right)]
    if isinstance(left, list):
        return [_combine(fn, l_item, right) for l_item in left]
    if isinstance(right, list):
        return [_combine(fn, left, r_item) for r_item in right]
    return check_int_range(fn(left, right), where=fn.__name__)


def _sort_key(value):
    # Numbers ascending, then NaN, then lists lexicographically.
    if isinstance(value, list):
        return (1, 0, tuple(_sort_key(item) for item in value))
    if math.isnan(value):
        return (0, 1, 0)
    return (0, 0, value)


def _argsort_exact(cells: list) -> bool:
    # A single leaf type keeps jnp.argsort exact; mixed int/float would round ints to float64.
    kinds = {type(cell) for cell in cells}
    return x64_enabled() and (kinds == {int} or kinds == {float})


def _grade_up(cells: list) -> list[int]:
    if not cells:
        return []
    if _argsort_exact(cells):
        with precision_scope():
            return jnp.argsort(jnp.asarray(cells), stable=True).tolist()
    return sorted(range(len(cells)), key=lambda i: _sort_key(cells[i]))


def _padded_take(cells: list, count: int) -> list:
    pad = max(0, count - len(cells))
    return cells[:count] + [0] * pad


def _tally(noun, _tokens: TokenStream):
    return [len(items(noun))]


def _tail(noun, _tokens: TokenStream):
    return items(noun)[-1:]


def _curtail(noun, _tokens: TokenStream):
    return items(noun)[:-1]


def _plus(noun, tokens: TokenStream):
    args = tokens.integer_args()
    tokens.advance(len(args))
    if not args:
        return noun
    return [_combine(pyop.add, x, y) for x, y in zip(items(noun), args)]


def _take(noun, tokens: TokenStream):
    count = tokens.next_literal()
    if count is None:
        count = 1
    else:
        tokens.advance(1)
    cells = items(noun)
    if count >= 0:
        return _padded_take(cells, count)
    return _padded_take(cells[::-1], -count)[::-1]


def _drop(noun, tokens: TokenStream):
    count = tokens.next_literal()
    if count is None:
        count = 1
    else:
        tokens.advance(1)
    cells = items(noun)
    if count >= 0:
        return cells[count:]
    return cells[:count]


def _reverse_rotate(noun, tokens: TokenStream):
    count = tokens.next_literal()
    cells = items(noun)
    if count is None:
        return cells[::-1]
    tokens.advance(1)
    if not cells:
        return []
    n = count % len(cells)
    return cells[n:] + cells[:n]


def _grade_up_op(noun, _tokens: TokenStream):
    return _grade_up(items(noun))


def _grade_down_op(noun, _tokens: TokenStream):
    return _grade_up(items(noun))[::-1]


def _expect_follower(tokens: TokenStream, rep: str, followers: tuple[str, ...]) -> str:
    found = tokens.peek()
    if found not in followers:
        raise JopMalformedCommandError(operator=rep, expected=followers, found=found)
    tokens.advance(1)
    return found


def _tilde(noun, tokens: TokenStream):
    follower = _expect_follower(tokens, "~", _TILDE_FOLLOWERS)
    cells = items(noun)
    ordered = [cells[i] for i in _grade_up(cells)]
    if follower == "\\:":
        ordered.reverse()
    return ordered


def _insert(noun, tokens: TokenStream):
    follower = _expect_follower(tokens, "/", _INSERT_FOLLOWERS)
    fn, identity = _INSERT_VERBS[follower]
    cells = items(noun)
    if not cells:
        return [identity]
    folded = reduce(lambda acc, cell: _combine(fn, cell, acc), reversed(cells[:-1]), cells[-1])
    return box(folded)


def _reshape(noun, tokens: TokenStream):
    dims = tokens.integer_args()
    tokens.advance(len(dims))
    if any(d < 0 for d in dims):
        raise JopShapeError("Reshape dimensions must be non-negative")
    return _fill(dims, itertools.cycle(leaves(noun)))


def _fill(dims: list[int], elements):
    if not dims:
        try:
            return next(elements)
        except StopIteration:
            raise JopShapeError("Cannot reshape an empty noun into a non-empty shape") from None
    return [_fill(dims[1:], elements) for _ in range(dims[0])]


def _noop(noun, _tokens: TokenStream):
    return noun


_TILDE_FOLLOWERS: Final[tuple[str, ...]] = ("/:", "\\:")
_INSERT_VERBS: Final[dict[str, tuple[Callable[[object, object], object], int]]] = {
    "+": (pyop.add, 0),
    "*": (pyop.mul, 1),
}
_INSERT_FOLLOWERS: Final[tuple[str, ...]] = tuple(_INSERT_VERBS)

NOOP: Final[Operator] = Operator("", "NoOp", Consumption.NONE, _noop)

_OPERATORS: Final[tuple[Operator, ...]] = (
    Operator(">.", "Ceil", Consumption.NONE, _deep_monad(">.")),
    Operator("<.", "Floor", Consumption.NONE, _deep_monad("<.")),
    Operator("-.", "Complement", Consumption.NONE, _deep_monad("-.")),
    Operator("<:", "Decrement", Consumption.NONE, _deep_monad("<:")),
    Operator(">:", "Increment", Consumption.NONE, _deep_monad(">:")),
    Operator("+:", "Double", Consumption.NONE, _deep_monad("+:")),
    Operator("-:", "Halve", Consumption.NONE, _deep_monad("-:")),
    Operator("*:", "Square", Consumption.NONE, _deep_monad("*:")),
    Operator("^", "Exp", Consumption.NONE, _deep_monad("^")),
    Operator("%", "Reciprocal", Consumption.NONE, _deep_monad("%")),
    Operator("*", "Sign", Consumption.NONE, _deep_monad("*")),
    Operator("#", "Tally", Consumption.NONE, _tally),
    Operator("{:", "Tail", Consumption.NONE, _tail),
    Operator("}:", "Curtail", Consumption.NONE, _curtail),
    Operator("+", "Plus", Consumption.LITERALS, _plus),
    Operator("{.", "Take", Consumption.LITERAL, _take),
    Operator("}.", "Drop", Consumption.LITERAL, _drop),
    Operator("|.", "ReverseRotate", Consumption.LITERAL, _reverse_rotate),
    Operator("/:", "GradeUp", Consumption.NONE, _grade_up_op),
    Operator("\\:", "GradeDown", Consumption.NONE, _grade_down_op),
    Operator("~", "Tilde", Consumption.FOLLOWER, _tilde, _TILDE_FOLLOWERS),
    Operator("/", "Insert", Consumption.FOLLOWER, _insert, _INSERT_FOLLOWERS),
    Operator("$", "Shape", Consumption.LITERALS, _reshape),
    NOOP,
)


def build_registry(operators: Iterable[Operator]) -> Mapping[str, Operator]:
    table: dict[str, Operator] = {}
    for op in operators:
        existing = table.get(op.rep)
        if existing is not None:
            raise JopRegistryError(f"Duplicate operator representation {op.rep!r}: {existing.name} and {op.name}")
        table[op.rep] = op
    return MappingProxyType(table)


@lru_cache(maxsize=1)
def operator_registry() -> Mapping[str, Operator]:
    return build_registry(_OPERATORS)


def lookup(token: str) -> Operator:
    return operator_registry().get(token, NOOP)

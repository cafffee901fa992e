"""Runtime value model for nouns: recursively nested lists of real numbers."""

from __future__ import annotations

import numbers
from typing import Callable

import jax
import jax.tree_util as jtu

from .errors import JopTypeError
from .kernels import INT64_MAX, INT64_MIN


def is_leaf(value: object) -> bool:
    return not isinstance(value, list)


def as_noun(value: object, *, where: str = "noun"):
    """Validate ``value`` and return a fresh nested-list copy of it."""
    if isinstance(value, jax.Array):
        return as_noun(value.tolist(), where=where)
    if isinstance(value, (list, tuple)):
        return [as_noun(item, where=f"{where}[{idx}]") for idx, item in enumerate(value)]
    if isinstance(value, numbers.Integral):
        value = int(value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise JopTypeError(f"{where} integer {value} is outside the int64 range")
        return value
    if isinstance(value, numbers.Real):
        return float(value)
    raise JopTypeError(f"{where} has unsupported runtime type {type(value).__name__}")


def deep_map(fn: Callable[[object], object], value):
    """Apply a scalar function to every leaf, preserving nesting exactly."""
    return jtu.tree_map(fn, value)


def leaves(value) -> list:
    return jtu.tree_leaves(value)


def items(value) -> list:
    # An atom has a single item, itself.
    if is_leaf(value):
        return [value]
    return value


def box(value) -> list:
    if is_leaf(value):
        return [value]
    return value


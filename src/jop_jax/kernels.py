"""Scalar leaf kernels for the deep monads, compiled with JAX.

Real leaves run through jitted ``jax.numpy`` kernels inside a scoped
64-bit context, so the process-wide JAX configuration is never touched.
Integer leaves of the integer-valued monads are computed exactly and must
stay inside the int64 range.
"""

from __future__ import annotations

import math
import os
from typing import Callable, Final

import jax
import jax.numpy as jnp

try:
    from jax import enable_x64 as _x64_scope
except ImportError:
    from jax.experimental import enable_x64 as _x64_scope

from .errors import JopRuntimeError

_ENABLE_X64: Final[bool] = os.environ.get("JOP_JAX_ENABLE_X64", "1") != "0"
_USE_JITTED_KERNELS: Final[bool] = os.environ.get("JOP_JAX_DISABLE_JITTED_KERNELS", "0") != "1"

INT64_MIN: Final[int] = -(2**63)
INT64_MAX: Final[int] = 2**63 - 1


def precision_scope():
    """Context in which kernels run: 64-bit unless ``JOP_JAX_ENABLE_X64=0``."""
    return _x64_scope(_ENABLE_X64)


def x64_enabled() -> bool:
    return _ENABLE_X64


def check_int_range(value, *, where: str):
    if isinstance(value, int) and not INT64_MIN <= value <= INT64_MAX:
        raise JopRuntimeError(f"integer overflow in {where}: {value} is outside the int64 range")
    return value


def _ceil(x: jnp.ndarray) -> jnp.ndarray:
    return jnp.ceil(x)


def _floor(x: jnp.ndarray) -> jnp.ndarray:
    return jnp.floor(x)


def _half(x: jnp.ndarray) -> jnp.ndarray:
    return jnp.true_divide(x, 2)


def _reciprocal(x: jnp.ndarray) -> jnp.ndarray:
    return jnp.true_divide(1, x)


_LEAF_KERNELS: Final[dict[str, Callable[[jnp.ndarray], jnp.ndarray]]] = {
    ">.": _ceil,
    "<.": _floor,
    "-.": lambda x: 1 - x,
    "<:": lambda x: x - 1,
    ">:": lambda x: x + 1,
    "+:": lambda x: x * 2,
    "-:": _half,
    "*:": jnp.square,
    "^": jnp.exp,
    "%": _reciprocal,
    "*": jnp.sign,
}

# Integer in, integer out: computed on Python ints, then range-checked.
_INT_LEAF_KERNELS: Final[dict[str, Callable[[int], int]]] = {
    ">.": lambda x: x,
    "<.": lambda x: x,
    "-.": lambda x: 1 - x,
    "<:": lambda x: x - 1,
    ">:": lambda x: x + 1,
    "+:": lambda x: x * 2,
    "*:": lambda x: x * x,
    "*": lambda x: (x > 0) - (x < 0),
}

# J defines these results as integers.
_INTEGRAL_KERNELS: Final[frozenset[str]] = frozenset({">.", "<.", "*"})

_JITTED_KERNELS: dict[str, Callable[[jnp.ndarray], jnp.ndarray]] = {}


def _kernel(op: str) -> Callable[[jnp.ndarray], jnp.ndarray]:
    if not _USE_JITTED_KERNELS:
        return _LEAF_KERNELS[op]
    fn = _JITTED_KERNELS.get(op)
    if fn is None:
        fn = jax.jit(_LEAF_KERNELS[op])
        _JITTED_KERNELS[op] = fn
    return fn


def apply_leaf(op: str, leaf):
    """Run the ``op`` kernel on one real leaf and return a Python scalar.

    Call inside ``precision_scope()``.
    """
    if isinstance(leaf, int):
        exact = _INT_LEAF_KERNELS.get(op)
        if exact is not None:
            return check_int_range(exact(leaf), where=op)
        leaf = float(leaf)
    scalar = _kernel(op)(jnp.asarray(leaf)).item()
    if op in _INTEGRAL_KERNELS and isinstance(scalar, float) and math.isfinite(scalar):
        integral = int(scalar)
        if INT64_MIN <= integral <= INT64_MAX:
            return integral
    return scalar

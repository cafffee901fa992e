"""jop-jax public API."""

from .errors import (
    JopError,
    JopMalformedCommandError,
    JopRegistryError,
    JopRuntimeError,
    JopShapeError,
    JopTypeError,
)
from .evaluator import Interpreter, application_order, evaluate
from .lexer import Token, token_texts, tokenize
from .operators import NOOP, Consumption, Operator, build_registry, lookup, operator_registry
from .tokens import TokenStream, is_numeric_literal, to_numeric
from .values import as_noun, deep_map

__all__ = [
    "evaluate",
    "Interpreter",
    "application_order",
    "tokenize",
    "token_texts",
    "Token",
    "TokenStream",
    "is_numeric_literal",
    "to_numeric",
    "Operator",
    "Consumption",
    "NOOP",
    "build_registry",
    "operator_registry",
    "lookup",
    "as_noun",
    "deep_map",
    "JopError",
    "JopRegistryError",
    "JopRuntimeError",
    "JopMalformedCommandError",
    "JopShapeError",
    "JopTypeError",
]

from __future__ import annotations

import importlib.util
import math
import os
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for precision tests")
class ScopedPrecisionTests(unittest.TestCase):
    def test_evaluation_leaves_process_x64_flag_alone(self) -> None:
        import jax.numpy as jnp

        from jop_jax import evaluate

        before = jnp.asarray(1.0).dtype
        if os.environ.get("JAX_ENABLE_X64", "0").lower() in {"0", "false", ""}:
            self.assertEqual(before, jnp.float32)
        out = evaluate("% ^ ~/: >:", [3.0, 1.0, 2])
        self.assertEqual(jnp.asarray(1.0).dtype, before)
        self.assertEqual(len(out), 3)

    def test_kernels_still_run_in_double_precision(self) -> None:
        from jop_jax import evaluate

        self.assertEqual(evaluate("%", [3]), [1 / 3])
        self.assertEqual(evaluate("-:", [2**62 + 1]), [float(2**62 + 1) / 2])


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for integer range tests")
class IntegerRangeTests(unittest.TestCase):
    def test_integer_monads_are_exact_near_int64_limit(self) -> None:
        from jop_jax import evaluate

        self.assertEqual(evaluate("*:", [3037000499]), [3037000499**2])
        self.assertEqual(evaluate("<:", [2**63 - 1]), [2**63 - 2])
        self.assertEqual(evaluate(">:", [-(2**63) + 1]), [-(2**63) + 2])

    def test_integer_overflow_raises_instead_of_wrapping(self) -> None:
        from jop_jax import JopRuntimeError, evaluate

        for command, noun in (
            ("*:", [3037000500]),
            (">:", [2**63 - 1]),
            ("+:", [[2**62]]),
            ("+1", [2**63 - 1]),
            ("/*", [2**62, 4]),
        ):
            with self.subTest(command=command):
                with self.assertRaises(JopRuntimeError) as ctx:
                    evaluate(command, noun)
                self.assertIn("int64", str(ctx.exception))

    def test_out_of_range_input_is_rejected_with_path(self) -> None:
        from jop_jax import JopTypeError, evaluate

        with self.assertRaises(JopTypeError) as ctx:
            evaluate(">:", [1, [2**64]])
        self.assertIn("noun[1][0]", str(ctx.exception))

        with self.assertRaises(JopTypeError):
            evaluate("", [-(2**63) - 1])


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for ordering tests")
class OrderingTests(unittest.TestCase):
    def test_mixed_int_and_float_compare_exactly(self) -> None:
        from jop_jax import evaluate

        self.assertEqual(evaluate("/:", [2**53 + 1, 2.0**53]), [1, 0])
        self.assertEqual(evaluate("/:", [2**53 + 1, 2**53]), [1, 0])
        self.assertEqual(evaluate("~/:", [2**53 + 1, 2.0**53, 1]), [1, 2.0**53, 2**53 + 1])

    def test_nan_sorts_after_numbers_on_every_path(self) -> None:
        from jop_jax import evaluate

        nan = math.nan
        self.assertEqual(evaluate("/:", [nan, 1.0, 0.5]), [2, 1, 0])
        self.assertEqual(evaluate("/:", [nan, 1, 0.5]), [2, 1, 0])
        self.assertEqual(evaluate("/:", [nan, 1, nan]), [1, 0, 2])

    def test_nan_sorts_before_lists(self) -> None:
        from jop_jax import evaluate

        self.assertEqual(evaluate("/:", [[1], math.nan, 2]), [2, 1, 0])
        self.assertEqual(evaluate("\\:", [[1], math.nan, 2]), [0, 1, 2])


if __name__ == "__main__":
    unittest.main()

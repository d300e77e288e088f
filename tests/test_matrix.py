"""
pytest suite for matrix exponentiation and linear recurrences.

Direct iteration is the oracle for every matrix-power result.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from algolessons.matrix import (
    FIBONACCI_MATRIX,
    LinearRecurrence,
    count_tilings_matrix,
    fibonacci,
    identity,
    jump_recurrence,
    mat_mult,
    mat_pow,
)
from algolessons.tiling import count_paths, count_tilings


def _fib_iter(n: int) -> int:
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


# =========================================================================
# Test: Matrix power
# =========================================================================


class TestMatPow:
    """Repeated squaring on square integer matrices."""

    def test_zero_exponent_is_identity(self):
        assert mat_pow(FIBONACCI_MATRIX, 0).tolist() == identity(2).tolist()

    def test_halving_identities(self):
        """M^n = (M^(n/2))^2 for even n and M^(n-1) * M for odd n."""
        for n in range(1, 25):
            power = mat_pow(FIBONACCI_MATRIX, n)
            if n % 2 == 0:
                half = mat_pow(FIBONACCI_MATRIX, n // 2)
                expected = mat_mult(half, half)
            else:
                expected = mat_mult(mat_pow(FIBONACCI_MATRIX, n - 1), FIBONACCI_MATRIX)
            assert power.tolist() == expected.tolist(), f"n={n}"

    def test_matches_repeated_multiplication(self):
        m = [[2, 1, 0], [0, 1, 3], [1, 0, 1]]
        acc = identity(3)
        for n in range(0, 12):
            assert mat_pow(m, n).tolist() == acc.tolist()
            acc = mat_mult(acc, m)

    def test_entries_stay_exact(self):
        power = mat_pow(FIBONACCI_MATRIX, 200)
        assert power[0, 1] == _fib_iter(200)
        assert power.dtype == object

    def test_modulus(self):
        mod = 1_000_000_007
        full = mat_pow(FIBONACCI_MATRIX, 300)
        reduced = mat_pow(FIBONACCI_MATRIX, 300, modulus=mod)
        assert reduced.tolist() == (full % mod).tolist()

    def test_accepts_numpy_input(self):
        m = np.array(FIBONACCI_MATRIX, dtype=np.int64)
        assert int(mat_pow(m, 10)[0, 1]) == 55

    def test_accepts_numpy_exponent(self):
        assert mat_pow(FIBONACCI_MATRIX, np.int64(10))[0, 1] == 55
        assert mat_pow(FIBONACCI_MATRIX, np.int32(0)).tolist() == [[1, 0], [0, 1]]
        with pytest.raises(ValueError):
            mat_pow(FIBONACCI_MATRIX, np.int64(-2))

    def test_bool_exponent_rejected(self):
        with pytest.raises(ValueError):
            mat_pow(FIBONACCI_MATRIX, True)

    def test_rejects_bad_input(self):
        with pytest.raises(ValueError):
            mat_pow(FIBONACCI_MATRIX, -1)
        with pytest.raises(ValueError):
            mat_pow([[1, 2, 3], [4, 5, 6]], 2)
        with pytest.raises(ValueError):
            mat_mult(identity(2), identity(3))


# =========================================================================
# Test: Fibonacci & tilings via matrix
# =========================================================================


class TestFibonacciMatrix:
    """The 2×2 case worked through in the lesson."""

    @pytest.mark.parametrize("n, expected", [(0, 0), (1, 1), (2, 1), (10, 55), (50, 12586269025)])
    def test_fibonacci(self, n, expected):
        assert fibonacci(n) == expected

    def test_tilings_agree_with_iteration(self):
        for n in range(0, 31):
            assert count_tilings_matrix(n) == count_tilings(n), f"n={n}"

    def test_fibonacci_modulus(self):
        mod = 1_000_000_007
        assert fibonacci(1000, modulus=mod) == _fib_iter(1000) % mod


# =========================================================================
# Test: General recurrences
# =========================================================================


class TestLinearRecurrence:
    """Companion-matrix evaluation of arbitrary-order recurrences."""

    def test_companion_matrix(self):
        rec = LinearRecurrence(coefficients=[2, 3], initial=[1, 1])
        assert rec.companion_matrix().tolist() == [[2, 3], [1, 0]]

    def test_tribonacci(self):
        rec = LinearRecurrence(coefficients=[1, 1, 1], initial=[0, 0, 1])
        expected = rec.terms(40)
        assert expected[:7] == [0, 0, 1, 1, 2, 4, 7]
        for n in range(40):
            assert rec.nth(n) == expected[n], f"n={n}"

    def test_weighted_recurrence_with_modulus(self):
        rec = LinearRecurrence(coefficients=[3, 0, -2], initial=[1, 4, 9])
        mod = 97
        expected = rec.terms(60, modulus=mod)
        for n in (0, 2, 3, 17, 59):
            assert rec.nth(n, modulus=mod) == expected[n]

    def test_jump_recurrence_matches_table(self):
        for jumps in [(1, 2), (1, 3), (2, 3, 5)]:
            rec = jump_recurrence(jumps)
            for n in range(0, 30):
                assert rec.nth(n) == count_paths(n, jumps), f"jumps={jumps}, n={n}"

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            LinearRecurrence(coefficients=[1, 1], initial=[0])

    def test_empty_recurrence(self):
        with pytest.raises(ValueError):
            LinearRecurrence(coefficients=[], initial=[])

"""
Linear recurrences evaluated by matrix exponentiation.

A recurrence ``a(i) = c1*a(i-1) + ... + ck*a(i-k)`` advances a state
vector ``[a(i+k-1), ..., a(i)]`` by one step through a fixed k×k
companion matrix, so ``a(n)`` falls out of a single matrix power
computed by repeated squaring in O(k^3 log n).

Matrices are ``numpy`` arrays with ``dtype=object``: entries stay exact
Python ints, so nothing overflows unless a modulus is requested.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, model_validator

from algolessons.tiling import count_paths
from algolessons.utils import check_modulus, check_non_negative, normalize_jumps, reduce

logger = logging.getLogger(__name__)

MatrixLike = Union[np.ndarray, Sequence[Sequence[int]]]

FIBONACCI_MATRIX = ((1, 1), (1, 0))


# =========================================================================
# Matrix helpers
# =========================================================================


def as_matrix(m: MatrixLike) -> np.ndarray:
    """Convert *m* to a square object-dtype matrix, or raise ``ValueError``."""
    arr = np.array(m, dtype=object)
    if arr.ndim != 2 or arr.shape[0] != arr.shape[1] or arr.shape[0] == 0:
        raise ValueError(f"expected a non-empty square matrix, got shape {arr.shape}")
    return arr


def identity(size: int) -> np.ndarray:
    """The ``size``×``size`` identity with exact int entries."""
    eye = np.zeros((size, size), dtype=object)
    for i in range(size):
        eye[i, i] = 1
    return eye


def mat_mult(a: MatrixLike, b: MatrixLike, modulus: Optional[int] = None) -> np.ndarray:
    """Multiply two square matrices of the same size."""
    check_modulus(modulus)
    a, b = as_matrix(a), as_matrix(b)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} vs {b.shape}")
    product = np.dot(a, b)
    if modulus is not None:
        product = product % modulus
    return product


def mat_pow(m: MatrixLike, exponent: int, modulus: Optional[int] = None) -> np.ndarray:
    """Raise *m* to *exponent* by repeated squaring.

    Each iteration squares the base and halves the exponent, multiplying
    the base into the result whenever the current low bit is set.
    """
    exponent = check_non_negative("exponent", exponent)
    check_modulus(modulus)
    base = as_matrix(m)
    if modulus is not None:
        base = base % modulus

    result = identity(base.shape[0])
    if modulus is not None:
        result = result % modulus

    e = exponent
    squarings = 0
    while e > 0:
        if e & 1:
            result = mat_mult(result, base, modulus)
        e >>= 1
        if e:
            base = mat_mult(base, base, modulus)
            squarings += 1

    logger.debug("mat_pow: %dx%d ^ %d in %d squarings.", *base.shape, exponent, squarings)
    return result


# =========================================================================
# Recurrences
# =========================================================================


class LinearRecurrence(BaseModel):
    """``a(i) = sum(coefficients[j] * a(i - 1 - j))`` with given first terms."""

    coefficients: List[int]
    initial: List[int]

    @model_validator(mode="after")
    def _check_order(self) -> "LinearRecurrence":
        if not self.coefficients:
            raise ValueError("a recurrence needs at least one coefficient")
        if len(self.coefficients) != len(self.initial):
            raise ValueError(
                f"{len(self.coefficients)} coefficients need "
                f"{len(self.coefficients)} initial terms, got {len(self.initial)}"
            )
        return self

    @property
    def order(self) -> int:
        return len(self.coefficients)

    def companion_matrix(self) -> np.ndarray:
        """Coefficients on the first row, ones on the subdiagonal."""
        k = self.order
        m = np.zeros((k, k), dtype=object)
        for j, c in enumerate(self.coefficients):
            m[0, j] = c
        for i in range(1, k):
            m[i, i - 1] = 1
        return m

    def nth(self, n: int, modulus: Optional[int] = None) -> int:
        """Term ``a(n)`` via one matrix power."""
        n = check_non_negative("n", n)
        check_modulus(modulus)
        k = self.order
        if n < k:
            return reduce(self.initial[n], modulus)

        power = mat_pow(self.companion_matrix(), n - k + 1, modulus)
        state = list(reversed(self.initial))  # [a(k-1), ..., a(0)]
        value = sum(power[0, j] * state[j] for j in range(k))
        return reduce(int(value), modulus)

    def terms(self, count: int, modulus: Optional[int] = None) -> List[int]:
        """The first *count* terms by direct iteration."""
        count = check_non_negative("count", count)
        check_modulus(modulus)
        seq = [reduce(v, modulus) for v in self.initial]
        while len(seq) < count:
            nxt = sum(c * seq[-1 - j] for j, c in enumerate(self.coefficients))
            seq.append(reduce(nxt, modulus))
        return seq[:count]


def fibonacci(n: int, modulus: Optional[int] = None) -> int:
    """F(n) with F(0) = 0, F(1) = 1, read from ``[[1, 1], [1, 0]] ** n``."""
    return int(mat_pow(FIBONACCI_MATRIX, n, modulus)[0, 1])


def count_tilings_matrix(n: int, modulus: Optional[int] = None) -> int:
    """Tilings of a 1×n strip with 1- and 2-tiles, equal to F(n + 1)."""
    return int(mat_pow(FIBONACCI_MATRIX, n, modulus)[0, 0])


def jump_recurrence(jumps: Iterable[int]) -> LinearRecurrence:
    """The recurrence behind ``count_paths(n, jumps)`` with no blocked cells.

    ``a(i) = sum(a(i - j) for j in jumps)``, so coefficient ``c_j`` is 1
    for every allowed jump length and 0 otherwise.  The first terms come
    from the table DP.
    """
    steps = normalize_jumps(jumps)
    k = steps[-1]
    coefficients = [1 if j in steps else 0 for j in range(1, k + 1)]
    initial = [count_paths(i, steps) for i in range(k)]
    return LinearRecurrence(coefficients=coefficients, initial=initial)

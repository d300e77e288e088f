"""
Bitmask cheat-sheet and two bitmask DPs.

Bit *i* of an int ``mask`` marks element *i* as present in a subset.
The helpers below are the one-liners every bitmask DP is built from;
``subset_sums`` uses a whole int as a bitset, and
``shortest_hamiltonian_path`` is the Held-Karp DP over
(visited set, last vertex) states.
"""

import logging
from typing import Iterator, List, Sequence

import numpy as np

from algolessons.models import PathResult
from algolessons.utils import check_non_negative

logger = logging.getLogger(__name__)

# Held-Karp needs 2^n * n cells; beyond this it gets slow in pure Python.
HELD_KARP_WARN_VERTICES = 16


# =========================================================================
# Single-bit operations
# =========================================================================


def bit_is_set(mask: int, i: int) -> bool:
    """``True`` if bit *i* of *mask* is set."""
    mask = check_non_negative("mask", mask)
    i = check_non_negative("i", i)
    return ((mask >> i) & 1) == 1


def set_bit(mask: int, i: int) -> int:
    mask = check_non_negative("mask", mask)
    i = check_non_negative("i", i)
    return mask | (1 << i)


def clear_bit(mask: int, i: int) -> int:
    mask = check_non_negative("mask", mask)
    i = check_non_negative("i", i)
    return mask & ~(1 << i)


def flip_bit(mask: int, i: int) -> int:
    mask = check_non_negative("mask", mask)
    i = check_non_negative("i", i)
    return mask ^ (1 << i)


def lowest_bit(mask: int) -> int:
    """Value of the lowest set bit (``mask & -mask``); 0 for an empty mask."""
    mask = check_non_negative("mask", mask)
    return mask & -mask


def popcount(mask: int) -> int:
    mask = check_non_negative("mask", mask)
    return bin(mask).count("1")


# =========================================================================
# Iteration
# =========================================================================


def bits_of(mask: int) -> List[int]:
    """Indices of the set bits, ascending."""
    mask = check_non_negative("mask", mask)
    result = []
    while mask:
        low = mask & -mask
        result.append(low.bit_length() - 1)
        mask ^= low
    return result


def submasks(mask: int) -> Iterator[int]:
    """Every submask of *mask* in decreasing order, ending with 0."""
    mask = check_non_negative("mask", mask)
    sub = mask
    while True:
        yield sub
        if sub == 0:
            return
        sub = (sub - 1) & mask


# =========================================================================
# Subset sums
# =========================================================================


def subset_sums(values: Sequence[int]) -> int:
    """Bitset of reachable sums: bit *s* is set iff some subset sums to *s*."""
    reachable = 1
    for v in values:
        v = check_non_negative("value", v)
        reachable |= reachable << v
    return reachable


def min_partition_difference(values: Sequence[int]) -> int:
    """Smallest ``|sum(A) - sum(B)|`` over all splits of *values* into A and B."""
    total = sum(values)
    reachable = subset_sums(values)
    for s in range(total // 2, -1, -1):
        if (reachable >> s) & 1:
            return total - 2 * s
    return total


# =========================================================================
# Held-Karp
# =========================================================================


def shortest_hamiltonian_path(dist: Sequence[Sequence[float]]) -> PathResult:
    """Cheapest path visiting every vertex exactly once, from any start.

    Args:
        dist: ``(n, n)`` matrix; ``dist[u][v]`` is the cost of u → v.
              Use ``inf`` for a missing edge.

    Returns:
        ``PathResult`` with the total cost and vertex order.

    Raises:
        ValueError: if *dist* is not square or no Hamiltonian path exists.
    """
    w = np.asarray(dist, dtype=np.float64)
    if w.ndim == 1 and w.size == 0:
        w = w.reshape(0, 0)
    if w.ndim != 2 or w.shape[0] != w.shape[1]:
        raise ValueError(f"dist must be a square matrix, got shape {w.shape}")

    n = w.shape[0]
    if n == 0:
        return PathResult(cost=0.0, path=[])
    if n > HELD_KARP_WARN_VERTICES:
        logger.warning(
            "Held-Karp on n=%d vertices needs %d states; expect a long run.",
            n, (1 << n) * n,
        )

    full = (1 << n) - 1
    dp = np.full((1 << n, n), np.inf)
    parent = np.full((1 << n, n), -1, dtype=np.int64)
    for v in range(n):
        dp[1 << v, v] = 0.0

    for mask in range(1, full + 1):
        for last in bits_of(mask):
            here = dp[mask, last]
            if np.isinf(here):
                continue
            for nxt in range(n):
                if mask & (1 << nxt):
                    continue
                nmask = mask | (1 << nxt)
                candidate = here + w[last, nxt]
                if candidate < dp[nmask, nxt]:
                    dp[nmask, nxt] = candidate
                    parent[nmask, nxt] = last

    last = int(np.argmin(dp[full]))
    best = float(dp[full, last])
    if np.isinf(best):
        raise ValueError("no Hamiltonian path exists")

    path = []
    mask = full
    while last != -1:
        path.append(last)
        prev = int(parent[mask, last])
        mask ^= 1 << last
        last = prev
    path.reverse()

    logger.debug("Held-Karp over %d vertices: cost=%.4f", n, best)
    return PathResult(cost=best, path=path)

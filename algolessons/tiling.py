"""
Grasshopper and tiling counts: the introductory DP example.

A grasshopper sits on cell 0 of a strip and wants to reach cell *n*,
jumping 1 or 2 cells at a time.  The number of ways equals the number
of tilings of a 1×n strip with 1- and 2-length tiles, i.e. F(n + 1).

The five steps of the framework, as applied here:

1. State:       ``dp[i]`` = number of ways to reach cell *i*.
2. Base case:   ``dp[0] = 1`` (the empty jump sequence).
3. Transition:  ``dp[i] = sum(dp[i - j] for j in jumps)``.
4. Order:       increasing *i*, since every jump moves forward.
5. Answer:      ``dp[n]``.
"""

import logging
import math
from typing import Iterable, List, Optional, Sequence

from algolessons.models import PathResult
from algolessons.utils import check_modulus, check_non_negative, normalize_jumps, reduce

logger = logging.getLogger(__name__)


# =========================================================================
# Counting
# =========================================================================


def count_tilings_table(n: int, modulus: Optional[int] = None) -> int:
    """O(n) time, O(n) memory: fill the whole ``dp`` array."""
    n = check_non_negative("n", n)
    check_modulus(modulus)

    dp = [0] * (n + 1)
    dp[0] = reduce(1, modulus)
    if n >= 1:
        dp[1] = reduce(1, modulus)
    for i in range(2, n + 1):
        dp[i] = reduce(dp[i - 1] + dp[i - 2], modulus)
    return dp[n]


def count_tilings(n: int, modulus: Optional[int] = None) -> int:
    """O(n) time, O(1) memory: only the last two values are needed."""
    n = check_non_negative("n", n)
    check_modulus(modulus)

    prev, cur = 0, reduce(1, modulus)  # dp[-1], dp[0]
    for _ in range(n):
        prev, cur = cur, reduce(prev + cur, modulus)
    return cur


def count_paths(
    n: int,
    jumps: Iterable[int] = (1, 2),
    blocked: Iterable[int] = (),
    modulus: Optional[int] = None,
) -> int:
    """Count jump sequences from cell 0 to cell *n*.

    Args:
        n: Target cell.
        jumps: Allowed jump lengths (positive integers).
        blocked: Cells the grasshopper may not land on.
        modulus: If given, the count is reduced modulo this value.

    Returns:
        Number of distinct jump sequences, or 0 if cell 0 or *n* is
        blocked.
    """
    n = check_non_negative("n", n)
    check_modulus(modulus)
    steps = normalize_jumps(jumps)
    forbidden = set(blocked)

    if 0 in forbidden or n in forbidden:
        logger.debug("Start or target cell %d is blocked.", n)
        return 0

    dp = [0] * (n + 1)
    dp[0] = reduce(1, modulus)
    for i in range(1, n + 1):
        if i in forbidden:
            continue
        total = 0
        for j in steps:
            if j > i:
                break
            total += dp[i - j]
        dp[i] = reduce(total, modulus)

    logger.debug(
        "count_paths(n=%d, jumps=%s, blocked=%d cells) = %d",
        n, steps, len(forbidden), dp[n],
    )
    return dp[n]


# =========================================================================
# Optimisation with path reconstruction
# =========================================================================


def min_cost_path(costs: Sequence[float], jumps: Iterable[int] = (1, 2)) -> PathResult:
    """Cheapest route from the first cell to the last.

    Every visited cell's cost is paid, including the first and last.
    Predecessors are stored during the forward pass and walked
    backwards to rebuild the route.

    Raises:
        ValueError: if *costs* is empty or the last cell is unreachable
            with the given jumps.
    """
    if len(costs) == 0:
        raise ValueError("costs must contain at least one cell")
    steps = normalize_jumps(jumps)

    n = len(costs)
    dp: List[float] = [math.inf] * n
    prev: List[int] = [-1] * n
    dp[0] = costs[0]

    for i in range(1, n):
        for j in steps:
            if j > i:
                break
            candidate = dp[i - j] + costs[i]
            if candidate < dp[i]:
                dp[i] = candidate
                prev[i] = i - j

    if math.isinf(dp[n - 1]):
        raise ValueError(f"cell {n - 1} is unreachable with jumps {steps}")

    path = [n - 1]
    while path[-1] != 0:
        path.append(prev[path[-1]])
    path.reverse()

    logger.debug("min_cost_path over %d cells: cost=%s, hops=%d", n, dp[n - 1], len(path) - 1)
    return PathResult(cost=dp[n - 1], path=path)

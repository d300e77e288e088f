"""
pytest suite for the grasshopper / tiling DP.

Cross-checks the array and constant-space forms against each other and
against hand-computed tables.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from algolessons.tiling import (
    count_paths,
    count_tilings,
    count_tilings_table,
    min_cost_path,
)


# =========================================================================
# Test: Tiling counts
# =========================================================================


class TestTilingCounts:
    """The two textbook forms of the 1×n tiling count."""

    @pytest.mark.parametrize("n, expected", [(0, 1), (1, 1), (2, 2), (3, 3), (5, 8), (10, 89)])
    def test_known_values(self, n, expected):
        assert count_tilings_table(n) == expected
        assert count_tilings(n) == expected

    def test_forms_agree(self):
        """O(n)-memory and O(1)-memory solutions return identical results."""
        for n in range(0, 60):
            assert count_tilings_table(n) == count_tilings(n), f"n={n}"

    def test_large_n_is_exact(self):
        """Python ints do not overflow: F(91) exceeds 2^62."""
        assert count_tilings(90) == 4660046610375530309

    def test_modulus(self):
        mod = 1_000_000_007
        assert count_tilings(500, modulus=mod) == count_tilings(500) % mod
        assert count_tilings_table(500, modulus=mod) == count_tilings(500) % mod

    def test_negative_n_rejected(self):
        with pytest.raises(ValueError):
            count_tilings(-1)
        with pytest.raises(ValueError):
            count_tilings_table(-3)

    def test_numpy_integer_n(self):
        """Integer scalars from numpy are as good as ints; bools are not."""
        assert count_tilings(np.int64(5)) == 8
        assert count_tilings_table(np.uint8(10)) == 89
        assert count_paths(np.int32(6), (1, 3)) == count_paths(6, (1, 3))
        with pytest.raises(ValueError):
            count_tilings(True)
        with pytest.raises(ValueError):
            count_tilings(5.0)

    def test_bad_modulus_rejected(self):
        with pytest.raises(ValueError):
            count_tilings(5, modulus=0)


# =========================================================================
# Test: Generalised grasshopper
# =========================================================================


class TestCountPaths:
    """Arbitrary jump sets and blocked cells."""

    def test_default_jumps_match_tilings(self):
        for n in range(0, 30):
            assert count_paths(n) == count_tilings(n)

    def test_three_jumps(self):
        # 1, 1, 2, 4, 7, 13: each term is the sum of the previous three.
        assert [count_paths(n, (1, 2, 3)) for n in range(6)] == [1, 1, 2, 4, 7, 13]

    def test_blocked_cell(self):
        # dp = [1, 1, 2, 0, 2, 2]
        assert count_paths(5, blocked={3}) == 2

    def test_blocked_endpoints(self):
        assert count_paths(5, blocked=[0]) == 0
        assert count_paths(5, blocked=[5]) == 0

    def test_unreachable_target(self):
        assert count_paths(5, jumps=(2,)) == 0
        assert count_paths(4, jumps=(2,)) == 1

    def test_duplicate_jumps_ignored(self):
        assert count_paths(7, jumps=[2, 1, 2, 1]) == count_paths(7)

    def test_invalid_jumps(self):
        with pytest.raises(ValueError):
            count_paths(5, jumps=())
        with pytest.raises(ValueError):
            count_paths(5, jumps=(0, 1))


# =========================================================================
# Test: Minimum-cost path
# =========================================================================


class TestMinCostPath:
    """Optimisation variant with path reconstruction."""

    def test_avoids_expensive_cells(self):
        result = min_cost_path([1, 100, 1, 1, 100, 1])
        assert result.cost == 4
        assert result.path == [0, 2, 3, 5]

    def test_path_cost_matches(self):
        costs = [3, 2, 7, 1, 1, 9, 4, 2, 8, 1]
        result = min_cost_path(costs, jumps=(1, 2, 3))
        assert result.path[0] == 0
        assert result.path[-1] == len(costs) - 1
        assert sum(costs[i] for i in result.path) == result.cost
        steps = {b - a for a, b in zip(result.path, result.path[1:])}
        assert steps <= {1, 2, 3}

    def test_single_cell(self):
        result = min_cost_path([7])
        assert result.cost == 7
        assert result.path == [0]

    def test_unreachable_last_cell(self):
        with pytest.raises(ValueError):
            min_cost_path([1, 1], jumps=(2,))

    def test_empty_costs(self):
        with pytest.raises(ValueError):
            min_cost_path([])

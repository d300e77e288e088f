"""
Algorithm Lessons
Runnable companions to an introduction to dynamic programming and
graph traversal: tiling counts, matrix-power recurrences, bitmask DP,
and the classic traversals.
"""

__version__ = "0.1.0"

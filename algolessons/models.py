"""
Pydantic models for the algorithm lessons.

DP results: reconstructed paths with their cost.
Graph results: edges, shortest-path trees.
Configuration: the settings shared by the CLI subcommands.
"""

from typing import Any, Dict, Hashable, List, Optional

from pydantic import BaseModel, Field, field_validator


# =========================================================================
# DP results
# =========================================================================


class PathResult(BaseModel):
    """Optimal value of a DP together with the reconstructed path."""

    cost: float
    path: List[int] = Field(default_factory=list)


# =========================================================================
# Graph models
# =========================================================================


class Edge(BaseModel):
    """A single directed edge as read from an edges JSON file."""

    source: Any
    target: Any
    weight: int = 1


class ShortestPaths(BaseModel):
    """Distances and predecessors from a single source."""

    source: Any
    distances: Dict[Any, int] = Field(default_factory=dict)
    predecessors: Dict[Any, Optional[Any]] = Field(default_factory=dict)

    def path_to(self, target: Hashable) -> List[Hashable]:
        """Walk predecessors back from *target* to the source.

        Raises ``KeyError`` if *target* was not reached.
        """
        if target not in self.distances:
            raise KeyError(f"node {target!r} is not reachable from {self.source!r}")
        path = [target]
        while path[-1] != self.source:
            path.append(self.predecessors[path[-1]])
        path.reverse()
        return path


# =========================================================================
# Configuration
# =========================================================================


class LessonConfig(BaseModel):
    """Settings for the ``algolessons`` CLI, loadable from JSON."""

    modulus: Optional[int] = None
    jumps: List[int] = Field(default_factory=lambda: [1, 2])
    log_level: str = "INFO"

    @field_validator("modulus")
    @classmethod
    def _positive_modulus(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("modulus must be positive")
        return v

    @field_validator("jumps")
    @classmethod
    def _positive_jumps(cls, v: List[int]) -> List[int]:
        if not v or min(v) <= 0:
            raise ValueError("jumps must be a non-empty list of positive lengths")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return v

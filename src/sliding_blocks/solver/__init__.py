"""Optimal solver for sliding-block boards."""

from .bfs import SolveOutcome, SolveResult, Solver, SolverConfig, canonical_key, solve
from .cache import SolutionCache

__all__ = [
    "SolveOutcome",
    "SolveResult",
    "SolutionCache",
    "Solver",
    "SolverConfig",
    "canonical_key",
    "solve",
]

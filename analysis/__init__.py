"""Pure comparison engine for per-language cutscene timings.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
I/O.
"""

from .engine import ComparisonSession, recompute

__all__ = ["ComparisonSession", "recompute"]

"""
Generic result container for pylinsolve computations.

The Result class provides a standardized envelope for the high-level
solve() API. This enables shared tooling for timing, reproducibility and
reporting while allowing each backend to define its own parameter payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, rank, fallback)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for linear system solves.

    Type Parameters:
        P: The parameter payload type

    Attributes:
        params: Payload (solution, residuals, rank, ...)
        info: Structured metadata (method, fallback, substituted pivots)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=SystemParams(solution=x, residuals=r, rank=3),
        ...     info={'method': 'lu'},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_lu'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)

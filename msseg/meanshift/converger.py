"""
Per-pixel mean shift convergence loop.

Each pixel starts at its own feature vector and repeatedly moves to the
mean of its neighborhood, with the search window re-centered on the moving
estimate, until successive estimates agree within both tolerances or the
iteration cap is hit.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .aggregator import NeighborhoodAggregator
from .config import MeanShiftConfig
from .feature import FeatureVector, color_distance, spatial_distance
from .grid import SourceGrid


class ConvergenceStatus(Enum):
    """State of a pixel's convergence loop."""
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class ExhaustReason(Enum):
    """Why a loop ended in EXHAUSTED."""
    EMPTY_NEIGHBORHOOD = "empty_neighborhood"
    ITERATION_CAP = "iteration_cap"


@dataclass(frozen=True)
class ConvergenceResult:
    """
    Terminal state of one pixel.

    Callers should only rely on `value`; CONVERGED and EXHAUSTED are both
    final and carry the same meaning for the output image.

    Attributes:
        value: Final estimate written to the output grid
        status: CONVERGED or EXHAUSTED
        n_iter: Number of neighborhood summaries requested
        reason: Set when status is EXHAUSTED
    """
    value: FeatureVector
    status: ConvergenceStatus
    n_iter: int
    reason: Optional[ExhaustReason] = None


class PixelConverger:
    """
    Runs the mean shift loop for a single starting vector.

    Example:
        >>> converger = PixelConverger(MeanShiftConfig(hs=8, hr=16.0))
        >>> result = converger.converge(grid.feature_at(row, col), grid)
        >>> result.value, result.status, result.n_iter
    """

    def __init__(self, config: MeanShiftConfig):
        self.config = config
        self.aggregator = NeighborhoodAggregator(config.hs, config.hr)

    def has_converged(self, current: FeatureVector, previous: FeatureVector) -> bool:
        """Both tolerances must hold at once; either alone is not enough."""
        return (
            color_distance(current, previous) <= self.config.tol_color
            and spatial_distance(current, previous) <= self.config.tol_spatial
        )

    def converge(self, origin: FeatureVector, grid: SourceGrid) -> ConvergenceResult:
        """
        Shift origin toward its local mode.

        Args:
            origin: Starting vector, normally the pixel's own feature vector
            grid: Immutable source snapshot used for every lookup

        Returns:
            ConvergenceResult in a terminal state
        """
        current = origin
        n_iter = 0

        while True:
            previous = current
            summary = self.aggregator.summarize(previous, grid)
            n_iter += 1

            if summary is None:
                return ConvergenceResult(
                    value=previous,
                    status=ConvergenceStatus.EXHAUSTED,
                    n_iter=n_iter,
                    reason=ExhaustReason.EMPTY_NEIGHBORHOOD,
                )

            current = summary.mean

            if self.has_converged(current, previous):
                return ConvergenceResult(
                    value=current,
                    status=ConvergenceStatus.CONVERGED,
                    n_iter=n_iter,
                )

            if n_iter >= self.config.max_iter:
                return ConvergenceResult(
                    value=current,
                    status=ConvergenceStatus.EXHAUSTED,
                    n_iter=n_iter,
                    reason=ExhaustReason.ITERATION_CAP,
                )

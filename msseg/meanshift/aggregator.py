"""
Neighborhood aggregation for one mean shift step.

Scans the (2*hs+1) x (2*hs+1) window around an estimate and averages the
cells that lie within both the spatial and the color radius.
"""

from dataclasses import dataclass
from typing import Optional
import math
import numpy as np

from .feature import FeatureVector
from .grid import SourceGrid


@dataclass(frozen=True)
class NeighborhoodSummary:
    """
    Mean of the qualifying neighbors and how many there were.

    Attributes:
        mean: Component-wise mean of all qualifying cells
        count: Number of qualifying cells (always >= 1)
    """
    mean: FeatureVector
    count: int


class NeighborhoodAggregator:
    """
    Joint spatial + color neighborhood search over a SourceGrid.

    A cell qualifies when spatial_distance(center, cell) <= hs and
    color_distance(center, cell) <= hr. Only the source grid is read.

    Example:
        >>> aggregator = NeighborhoodAggregator(hs=8, hr=16.0)
        >>> summary = aggregator.summarize(grid.feature_at(10, 10), grid)
        >>> if summary is not None:
        ...     next_estimate = summary.mean
    """

    def __init__(self, hs: int, hr: float):
        self.hs = hs
        self.hr = hr

    def window_bounds(self, center: FeatureVector, grid: SourceGrid):
        """
        Clipped window around center's rounded position.

        Returns:
            (row_start, row_stop, col_start, col_stop) with exclusive stops.
            The window is empty when a start is not below its stop.
        """
        cx = _round_half_up(center.x)
        cy = _round_half_up(center.y)
        row_start = max(cy - self.hs, 0)
        row_stop = min(cy + self.hs + 1, grid.rows)
        col_start = max(cx - self.hs, 0)
        col_stop = min(cx + self.hs + 1, grid.cols)
        return row_start, row_stop, col_start, col_stop

    def summarize(self, center: FeatureVector, grid: SourceGrid) -> Optional[NeighborhoodSummary]:
        """
        Average the qualifying neighbors of center.

        Args:
            center: Current estimate (the window follows it)
            grid: Immutable source snapshot

        Returns:
            NeighborhoodSummary, or None when no cell qualifies
        """
        row_start, row_stop, col_start, col_stop = self.window_bounds(center, grid)
        if row_start >= row_stop or col_start >= col_stop:
            return None

        window = grid.colors[row_start:row_stop, col_start:col_stop]
        ys, xs = np.mgrid[row_start:row_stop, col_start:col_stop]

        spatial = np.sqrt((xs - center.x) ** 2 + (ys - center.y) ** 2)
        color = np.sqrt(np.sum((window - np.array(center.color)) ** 2, axis=2))
        mask = (spatial <= self.hs) & (color <= self.hr)

        count = int(mask.sum())
        if count == 0:
            return None

        colors = window[mask]
        mean = FeatureVector(
            float(xs[mask].sum() / count),
            float(ys[mask].sum() / count),
            float(colors[:, 0].sum() / count),
            float(colors[:, 1].sum() / count),
            float(colors[:, 2].sum() / count),
        )
        return NeighborhoodSummary(mean=mean, count=count)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

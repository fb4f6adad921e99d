"""
Source and output grids for a mean shift pass.

The source grid is an immutable snapshot of the Lab image that every
neighborhood lookup reads from. The output grid is a separate buffer that
receives each pixel's converged feature vector exactly once, so the result
of a pixel never depends on the order in which pixels are processed.
"""

from typing import Tuple
import numpy as np

from .feature import FeatureVector


class SourceGrid:
    """
    Read-only (rows, cols) grid of Lab feature vectors.

    The color data is copied on construction and the copy is flagged as
    non-writeable.

    Example:
        >>> lab = rgb_to_lab_features(image)      # (H, W, 3) float
        >>> grid = SourceGrid(lab)
        >>> grid.feature_at(0, 0)
        FeatureVector(x=0.0, y=0.0, c1=..., c2=..., c3=...)
    """

    def __init__(self, colors: np.ndarray):
        """
        Args:
            colors: Lab values, shape (rows, cols, 3)

        Raises:
            ValueError: If colors is not (rows, cols, 3)
        """
        colors = np.asarray(colors)
        if colors.ndim != 3 or colors.shape[2] != 3:
            raise ValueError(f"Source grid must be (rows, cols, 3), got shape {colors.shape}")

        self._colors = np.array(colors, dtype=np.float64, copy=True)
        self._colors.setflags(write=False)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._colors.shape[:2]

    @property
    def rows(self) -> int:
        return self._colors.shape[0]

    @property
    def cols(self) -> int:
        return self._colors.shape[1]

    @property
    def colors(self) -> np.ndarray:
        """Read-only view of the Lab values, shape (rows, cols, 3)."""
        return self._colors

    def is_empty(self) -> bool:
        return self.rows == 0 or self.cols == 0

    def feature_at(self, row: int, col: int) -> FeatureVector:
        """Feature vector of cell (row, col): x is the column, y the row."""
        c1, c2, c3 = self._colors[row, col]
        return FeatureVector(float(col), float(row), float(c1), float(c2), float(c3))


class OutputGrid:
    """
    Write-once (rows, cols) grid of converged 5D feature vectors.

    Each cell stores (x, y, c1, c2, c3). Writing a cell twice is a
    programming error and raises RuntimeError.
    """

    def __init__(self, shape: Tuple[int, int]):
        rows, cols = shape
        self._features = np.zeros((rows, cols, 5), dtype=np.float64)
        self._written = np.zeros((rows, cols), dtype=bool)

    @property
    def shape(self) -> Tuple[int, int]:
        return self._features.shape[:2]

    @property
    def features(self) -> np.ndarray:
        """All converged vectors, shape (rows, cols, 5)."""
        return self._features

    @property
    def colors(self) -> np.ndarray:
        """Converged Lab values, shape (rows, cols, 3)."""
        return self._features[:, :, 2:]

    def write(self, row: int, col: int, value: FeatureVector):
        if self._written[row, col]:
            raise RuntimeError(f"Output cell ({row}, {col}) already written")
        self._features[row, col] = value.as_array()
        self._written[row, col] = True

    def feature_at(self, row: int, col: int) -> FeatureVector:
        if not self._written[row, col]:
            raise RuntimeError(f"Output cell ({row}, {col}) has not been written")
        return FeatureVector.from_array(self._features[row, col])

    def is_complete(self) -> bool:
        return bool(self._written.all())

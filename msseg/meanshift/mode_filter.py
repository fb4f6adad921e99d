"""
Mean Shift Mode Filtering for Image Segmentation

Runs the per-pixel convergence loop over every cell of a Lab image. All
lookups read the immutable SourceGrid and every result lands in a separate
OutputGrid, so the sequential and threaded schedules produce bit-identical
output.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple
import logging
import time
import numpy as np

from ..color import rgb_to_lab_features
from .config import MeanShiftConfig
from .converger import ConvergenceResult, ConvergenceStatus, PixelConverger
from .grid import OutputGrid, SourceGrid

logger = logging.getLogger(__name__)


@dataclass
class MeanShiftResult:
    """
    Result of one filtering pass.

    Attributes:
        output: Converged feature vectors, one per cell
        iterations: Iterations performed per pixel, shape (rows, cols)
        converged: True where the pixel reached CONVERGED, shape (rows, cols)
        elapsed_ms: Wall time of the pass in milliseconds
    """
    output: OutputGrid
    iterations: np.ndarray
    converged: np.ndarray
    elapsed_ms: float = 0.0

    @property
    def segmented(self) -> np.ndarray:
        """Segmented Lab image, shape (rows, cols, 3)."""
        return self.output.colors

    @property
    def n_pixels(self) -> int:
        return int(self.converged.size)

    @property
    def n_converged(self) -> int:
        return int(self.converged.sum())

    @property
    def n_exhausted(self) -> int:
        return self.n_pixels - self.n_converged

    def __str__(self) -> str:
        rows, cols = self.output.shape
        return (
            f"MeanShiftResult({rows}x{cols}, converged={self.n_converged}, "
            f"exhausted={self.n_exhausted}, {self.elapsed_ms:.1f} ms)"
        )


class ImageModeFilter:
    """
    Mean shift filter over a whole image.

    Example:
        >>> config = MeanShiftConfig(hs=8, hr=16.0, max_iter=5)
        >>> mode_filter = ImageModeFilter(config)
        >>> result = mode_filter.apply(SourceGrid(lab))
        >>> segmented_lab = result.segmented
    """

    def __init__(self, config: Optional[MeanShiftConfig] = None):
        """
        Args:
            config: Configuration parameters. If None, uses defaults.
        """
        self.config = config or MeanShiftConfig()
        self.converger = PixelConverger(self.config)

    def apply(
        self,
        grid: SourceGrid,
        order: Optional[Iterable[Tuple[int, int]]] = None
    ) -> MeanShiftResult:
        """
        Filter every cell of grid.

        Args:
            grid: Immutable source snapshot
            order: Optional processing order as (row, col) pairs. Must cover
                   every cell exactly once. When given, cells are processed
                   sequentially in that order.

        Returns:
            MeanShiftResult with an output grid of the same shape

        Raises:
            ValueError: If order does not cover every cell exactly once
        """
        rows, cols = grid.shape
        output = OutputGrid((rows, cols))
        iterations = np.zeros((rows, cols), dtype=np.int32)
        converged = np.zeros((rows, cols), dtype=bool)
        if output.shape != grid.shape:
            raise RuntimeError(
                f"Output grid {output.shape} does not match source grid {grid.shape}"
            )

        if grid.is_empty():
            logger.debug("Empty source grid %s, nothing to filter", grid.shape)
            return MeanShiftResult(output, iterations, converged)

        start = time.perf_counter()

        if order is not None:
            cells = self._validate_order(order, grid.shape)
            schedule = "custom order"
            for row, col in cells:
                self._process_cell(grid, row, col, output, iterations, converged)
        elif self.config.n_workers > 1:
            schedule = f"{self.config.n_workers} threads"
            with ThreadPoolExecutor(max_workers=self.config.n_workers) as pool:
                # list() surfaces worker exceptions
                list(pool.map(
                    lambda row: self._process_row(grid, row, output, iterations, converged),
                    range(rows)
                ))
        else:
            schedule = "sequential"
            for row in range(rows):
                self._process_row(grid, row, output, iterations, converged)

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        result = MeanShiftResult(output, iterations, converged, elapsed_ms)

        if not output.is_complete():
            raise RuntimeError("Mean shift pass left output cells unwritten")
        logger.info(
            "Mean shift on %dx%d (%s): %d converged, %d exhausted in %.1f ms",
            rows, cols, schedule, result.n_converged, result.n_exhausted, elapsed_ms
        )
        return result

    def converge_pixel(self, grid: SourceGrid, row: int, col: int) -> ConvergenceResult:
        """Run the convergence loop for a single cell without writing anything."""
        return self.converger.converge(grid.feature_at(row, col), grid)

    def _process_row(self, grid, row, output, iterations, converged):
        for col in range(grid.cols):
            self._process_cell(grid, row, col, output, iterations, converged)

    def _process_cell(self, grid, row, col, output, iterations, converged):
        result = self.converge_pixel(grid, row, col)
        output.write(row, col, result.value)
        iterations[row, col] = result.n_iter
        converged[row, col] = result.status is ConvergenceStatus.CONVERGED

    @staticmethod
    def _validate_order(order, shape):
        rows, cols = shape
        cells = [(int(r), int(c)) for r, c in order]
        if len(cells) != rows * cols:
            raise ValueError(
                f"Order must list all {rows * cols} cells exactly once, got {len(cells)}"
            )
        seen = np.zeros((rows, cols), dtype=bool)
        for row, col in cells:
            if not (0 <= row < rows and 0 <= col < cols):
                raise ValueError(f"Cell ({row}, {col}) is outside grid {shape}")
            if seen[row, col]:
                raise ValueError(f"Cell ({row}, {col}) appears more than once in order")
            seen[row, col] = True
        return cells


def segment_image(
    lab_features: np.ndarray,
    config: Optional[MeanShiftConfig] = None
) -> MeanShiftResult:
    """
    Convenience wrapper: filter a Lab feature image in one call.

    Args:
        lab_features: Lab values (H, W, 3), as produced by rgb_to_lab_features

    Returns:
        MeanShiftResult
    """
    return ImageModeFilter(config).apply(SourceGrid(lab_features))


def process_images_batch(
    images: Dict[str, np.ndarray],
    config: Optional[MeanShiftConfig] = None,
    configs: Optional[Dict[str, MeanShiftConfig]] = None
) -> Dict[str, MeanShiftResult]:
    """
    Apply mean shift segmentation to a batch of RGB images.

    Each image is converted to Lab features, filtered, and the result stored
    under its id. A per-image config in `configs` takes precedence over the
    shared `config`.

    Args:
        images: {image_id: RGB uint8 array of shape (H, W, 3)}
        config: Shared configuration (defaults if None)
        configs: Optional per-image overrides

    Returns:
        {image_id: MeanShiftResult}

    Raises:
        ValueError: If an image is not (H, W, 3)

    Example:
        >>> loader = ImageLoader()
        >>> images = loader.load_all_images()
        >>> results = process_images_batch(images, MeanShiftConfig(hs=6))
        >>> rgb = lab_features_to_rgb(results['house'].segmented)
    """
    configs = configs or {}
    results = {}

    for image_id, img in images.items():
        if img.ndim != 3 or img.shape[2] != 3:
            raise ValueError(
                f"Image '{image_id}' must have shape (H, W, 3), got shape {img.shape}"
            )

        image_config = configs.get(image_id, config)
        lab = rgb_to_lab_features(img)
        results[image_id] = segment_image(lab, image_config)
        logger.info("Segmented '%s': %s", image_id, results[image_id])

    return results

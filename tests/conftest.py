"""Shared test fixtures."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from msseg.meanshift import MeanShiftConfig, SourceGrid


COLOR_A = (30.0, 10.0, 10.0)
COLOR_B = (70.0, -10.0, -10.0)


def uniform_lab(rows: int, cols: int, color=(50.0, 10.0, -20.0)) -> np.ndarray:
    lab = np.empty((rows, cols, 3), dtype=np.float64)
    lab[:, :] = color
    return lab


@pytest.fixture
def uniform_grid() -> SourceGrid:
    return SourceGrid(uniform_lab(4, 4))


@pytest.fixture
def two_region_lab() -> np.ndarray:
    """4x8 grid: left half COLOR_A, right half COLOR_B."""
    lab = np.empty((4, 8, 3), dtype=np.float64)
    lab[:, :4] = COLOR_A
    lab[:, 4:] = COLOR_B
    return lab


@pytest.fixture
def random_lab() -> np.ndarray:
    rng = np.random.default_rng(7)
    lab = np.empty((6, 7, 3), dtype=np.float64)
    lab[:, :, 0] = rng.uniform(0, 100, size=(6, 7))
    lab[:, :, 1:] = rng.uniform(-40, 40, size=(6, 7, 2))
    return lab


@pytest.fixture
def small_config() -> MeanShiftConfig:
    return MeanShiftConfig(hs=2, hr=30.0, max_iter=6, tol_color=0.3, tol_spatial=0.3)

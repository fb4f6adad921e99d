"""Tests for whole-image mean shift filtering."""

import logging

import numpy as np
import pytest

import msseg.meanshift.mode_filter as mode_filter_module
from msseg.meanshift import (
    ConvergenceStatus,
    ImageModeFilter,
    MeanShiftConfig,
    MeanShiftResult,
    OutputGrid,
    SourceGrid,
    process_images_batch,
    segment_image,
)

from conftest import COLOR_A, COLOR_B


def test_uniform_grid_stays_uniform(uniform_grid):
    result = ImageModeFilter(MeanShiftConfig(hs=2, hr=5.0)).apply(uniform_grid)

    assert result.output.shape == (4, 4)
    assert result.output.is_complete()
    np.testing.assert_array_equal(result.segmented, uniform_grid.colors)


def test_two_regions_keep_sharp_boundary(two_region_lab):
    config = MeanShiftConfig(hs=3, hr=10.0, max_iter=10)
    result = ImageModeFilter(config).apply(SourceGrid(two_region_lab))

    segmented = result.segmented
    assert np.all(segmented[:, :4] == COLOR_A)
    assert np.all(segmented[:, 4:] == COLOR_B)


def test_filtering_is_deterministic(random_lab, small_config):
    mode_filter = ImageModeFilter(small_config)
    first = mode_filter.apply(SourceGrid(random_lab))
    second = mode_filter.apply(SourceGrid(random_lab))

    np.testing.assert_array_equal(first.output.features, second.output.features)
    np.testing.assert_array_equal(first.iterations, second.iterations)


def test_threaded_schedule_matches_sequential(random_lab, small_config):
    grid = SourceGrid(random_lab)
    sequential = ImageModeFilter(small_config).apply(grid)

    threaded_config = MeanShiftConfig(
        hs=small_config.hs,
        hr=small_config.hr,
        max_iter=small_config.max_iter,
        tol_color=small_config.tol_color,
        tol_spatial=small_config.tol_spatial,
        n_workers=4,
    )
    threaded = ImageModeFilter(threaded_config).apply(grid)

    np.testing.assert_array_equal(sequential.output.features, threaded.output.features)
    np.testing.assert_array_equal(sequential.converged, threaded.converged)


def test_processing_order_does_not_change_result(random_lab, small_config):
    grid = SourceGrid(random_lab)
    mode_filter = ImageModeFilter(small_config)
    baseline = mode_filter.apply(grid)

    cells = [(r, c) for r in range(grid.rows) for c in range(grid.cols)]
    rng = np.random.default_rng(3)
    shuffled = [cells[i] for i in rng.permutation(len(cells))]

    for order in (list(reversed(cells)), shuffled):
        permuted = mode_filter.apply(grid, order=order)
        np.testing.assert_array_equal(baseline.output.features, permuted.output.features)


def test_source_grid_is_untouched(random_lab, small_config):
    grid = SourceGrid(random_lab)
    before = grid.colors.copy()
    ImageModeFilter(small_config).apply(grid)
    np.testing.assert_array_equal(grid.colors, before)


def test_iterations_never_exceed_cap(random_lab):
    config = MeanShiftConfig(hs=2, hr=40.0, max_iter=3, tol_color=0.0, tol_spatial=0.0)
    result = ImageModeFilter(config).apply(SourceGrid(random_lab))

    assert result.iterations.min() >= 1
    assert result.iterations.max() <= 3
    assert result.n_converged + result.n_exhausted == result.n_pixels == 42


@pytest.mark.parametrize("shape", [(0, 5, 3), (5, 0, 3), (0, 0, 3)])
def test_empty_grid_gives_empty_output(shape):
    result = ImageModeFilter().apply(SourceGrid(np.zeros(shape)))

    assert result.output.shape == shape[:2]
    assert result.segmented.shape == shape
    assert result.n_pixels == 0


def test_order_must_cover_every_cell_once(uniform_grid):
    mode_filter = ImageModeFilter(MeanShiftConfig(hs=1, hr=1.0))
    cells = [(r, c) for r in range(4) for c in range(4)]

    with pytest.raises(ValueError):
        mode_filter.apply(uniform_grid, order=cells[:-1])
    with pytest.raises(ValueError):
        mode_filter.apply(uniform_grid, order=cells[:-1] + [cells[0]])
    with pytest.raises(ValueError):
        mode_filter.apply(uniform_grid, order=cells[:-1] + [(4, 0)])


def test_converge_pixel_matches_output(random_lab, small_config):
    grid = SourceGrid(random_lab)
    mode_filter = ImageModeFilter(small_config)
    result = mode_filter.apply(grid)

    single = mode_filter.converge_pixel(grid, 2, 5)
    assert single.value == result.output.feature_at(2, 5)
    assert single.n_iter == result.iterations[2, 5]
    assert (single.status is ConvergenceStatus.CONVERGED) == result.converged[2, 5]


def test_apply_logs_summary(uniform_grid, caplog):
    with caplog.at_level(logging.INFO, logger="msseg.meanshift.mode_filter"):
        ImageModeFilter(MeanShiftConfig(hs=1, hr=1.0)).apply(uniform_grid)

    assert "4x4" in caplog.text
    assert "sequential" in caplog.text


def test_segment_image_wraps_filter(two_region_lab):
    result = segment_image(two_region_lab, MeanShiftConfig(hs=2, hr=10.0))

    assert isinstance(result, MeanShiftResult)
    assert result.segmented.shape == two_region_lab.shape
    assert result.elapsed_ms >= 0
    assert "MeanShiftResult(4x8" in str(result)


def test_process_images_batch_uses_per_image_configs():
    flat = np.full((6, 6, 3), 120, dtype=np.uint8)
    split = np.zeros((6, 6, 3), dtype=np.uint8)
    split[:, 3:] = 255

    results = process_images_batch(
        {"flat": flat, "split": split},
        config=MeanShiftConfig(hs=2, hr=8.0),
        configs={"split": MeanShiftConfig(hs=1, hr=1.0, max_iter=2)},
    )

    assert set(results) == {"flat", "split"}
    assert results["flat"].segmented.shape == (6, 6, 3)
    assert results["split"].iterations.max() <= 2
    # Black and white halves never mix with a small color radius
    assert np.all(results["split"].segmented[:, :3, 0] < 1.0)
    assert np.all(results["split"].segmented[:, 3:, 0] > 99.0)


def test_process_images_batch_rejects_bad_shape():
    with pytest.raises(ValueError):
        process_images_batch({"gray": np.zeros((4, 4), dtype=np.uint8)})


def test_process_images_batch_accepts_unit_float_images():
    white = np.ones((4, 4, 3), dtype=np.float64)

    results = process_images_batch({"white": white}, MeanShiftConfig(hs=1, hr=5.0))

    assert np.all(results["white"].segmented[:, :, 0] > 99.0)


def test_process_images_batch_rejects_float_images_in_byte_range():
    with pytest.raises(ValueError):
        process_images_batch({"bright": np.full((4, 4, 3), 200.0)})


def test_unwritten_cells_raise(uniform_grid, monkeypatch):
    monkeypatch.setattr(ImageModeFilter, "_process_row", lambda self, *args: None)

    with pytest.raises(RuntimeError, match="unwritten"):
        ImageModeFilter(MeanShiftConfig(hs=1, hr=1.0)).apply(uniform_grid)


def test_output_shape_mismatch_raises(uniform_grid, monkeypatch):
    monkeypatch.setattr(
        mode_filter_module, "OutputGrid", lambda shape: OutputGrid((shape[0] + 1, shape[1]))
    )

    with pytest.raises(RuntimeError, match="does not match"):
        ImageModeFilter(MeanShiftConfig(hs=1, hr=1.0)).apply(uniform_grid)

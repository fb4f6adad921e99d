"""Tests for MeanShiftConfig validation and loading."""

import json
import math

import pytest

from msseg.meanshift import MeanShiftConfig


def test_defaults():
    config = MeanShiftConfig()
    assert config.hs == 8
    assert config.hr == 16.0
    assert config.max_iter == 5
    assert config.tol_color == 0.3
    assert config.tol_spatial == 0.3
    assert config.n_workers == 1


@pytest.mark.parametrize("kwargs", [
    {"hs": 0},
    {"hs": -3},
    {"hs": 2.5},
    {"hs": True},
    {"hr": 0},
    {"hr": -1.0},
    {"max_iter": 0},
    {"max_iter": 1.5},
    {"tol_color": -0.1},
    {"tol_spatial": -0.1},
    {"n_workers": 0},
    {"hr": math.nan},
    {"hr": math.inf},
    {"tol_color": math.nan},
    {"tol_spatial": math.nan},
    {"tol_spatial": math.inf},
])
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValueError):
        MeanShiftConfig(**kwargs)


def test_zero_tolerances_are_allowed():
    config = MeanShiftConfig(tol_color=0, tol_spatial=0.0)
    assert config.tol_color == 0
    assert config.tol_spatial == 0.0


def test_config_is_not_clamped():
    config = MeanShiftConfig(hs=1, hr=0.001, max_iter=1)
    assert (config.hs, config.hr, config.max_iter) == (1, 0.001, 1)


def test_from_dict_ignores_unknown_keys():
    config = MeanShiftConfig.from_dict({"hs": 4, "hr": 8.0, "image": "house"})
    assert config.hs == 4
    assert config.hr == 8.0
    assert config.max_iter == 5


def test_from_json_reads_parameters_section(tmp_path):
    path = tmp_path / "params_house.json"
    path.write_text(json.dumps({
        "metadata": {"image": "house"},
        "parameters": {"hs": 6, "hr": 12.5, "max_iter": 10},
    }))
    config = MeanShiftConfig.from_json(path)
    assert config == MeanShiftConfig(hs=6, hr=12.5, max_iter=10)


def test_from_json_validates(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"hs": -1}))
    with pytest.raises(ValueError):
        MeanShiftConfig.from_json(path)


def test_to_dict_round_trip():
    config = MeanShiftConfig(hs=3, hr=9.0, n_workers=2)
    assert MeanShiftConfig.from_dict(config.to_dict()) == config


def test_nan_color_radius_never_reaches_the_filter():
    with pytest.raises(ValueError, match="hr"):
        MeanShiftConfig(hs=1, hr=float("nan"))

"""
Mean Shift Configuration

Fixed bandwidths, iteration cap and convergence tolerances for one
filtering pass.
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union
import json
import math
import numbers


@dataclass(frozen=True)
class MeanShiftConfig:
    """
    Configuration for mean shift mode filtering.

    Defaults reproduce the reference parameters used on 256x256 images.

    Attributes:
        hs: Spatial radius in pixels (window is (2*hs+1)^2)
        hr: Color radius in Lab units
        max_iter: Maximum mean shift iterations per pixel
        tol_color: Color displacement below which a pixel may stop
        tol_spatial: Spatial displacement below which a pixel may stop
        n_workers: Worker threads for the pass (1 = sequential)
    """
    hs: int = 8
    """Spatial radius (neighborhood half-width, in pixels)"""

    hr: float = 16.0
    """Color radius (max Lab distance for a neighbor to qualify)"""

    max_iter: int = 5
    """Iteration cap per pixel"""

    tol_color: float = 0.3
    """Convergence tolerance on color displacement"""

    tol_spatial: float = 0.3
    """Convergence tolerance on spatial displacement"""

    n_workers: int = 1
    """Number of worker threads (rows are distributed across them)"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if not _is_int(self.hs) or self.hs <= 0:
            raise ValueError(f"hs must be a positive integer, got {self.hs!r}")
        if not _is_int(self.max_iter) or self.max_iter <= 0:
            raise ValueError(f"max_iter must be a positive integer, got {self.max_iter!r}")
        if not _is_real(self.hr) or self.hr <= 0:
            raise ValueError(f"hr must be positive and finite, got {self.hr!r}")
        if not _is_real(self.tol_color) or self.tol_color < 0:
            raise ValueError(f"tol_color must be finite and >= 0, got {self.tol_color!r}")
        if not _is_real(self.tol_spatial) or self.tol_spatial < 0:
            raise ValueError(f"tol_spatial must be finite and >= 0, got {self.tol_spatial!r}")
        if not _is_int(self.n_workers) or self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MeanShiftConfig':
        """
        Build a config from a mapping, ignoring unknown keys.

        Args:
            data: Mapping with any subset of the config fields

        Returns:
            MeanShiftConfig with defaults for missing fields
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'MeanShiftConfig':
        """
        Load a config from a JSON parameter file.

        The file may hold the fields at top level or under a "parameters" key.
        """
        with open(path, 'r') as f:
            data = json.load(f)
        if 'parameters' in data:
            data = data['parameters']
        return cls.from_dict(data)


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )

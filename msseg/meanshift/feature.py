"""
5D feature vectors for mean shift.

A pixel is represented as a point (x, y, c1, c2, c3): its column and row in
the image plus three perceptual color channels (L, a, b).
"""

from dataclasses import dataclass, astuple
from typing import Iterable
import math
import numpy as np


@dataclass(frozen=True)
class FeatureVector:
    """
    Point in the joint spatial + color feature space.

    Attributes:
        x: Column coordinate
        y: Row coordinate
        c1: First color channel (lightness, 0-100)
        c2: Second color channel (a, centered on 0)
        c3: Third color channel (b, centered on 0)
    """
    x: float
    y: float
    c1: float
    c2: float
    c3: float

    def as_array(self) -> np.ndarray:
        """Return the vector as a float64 array of shape (5,)."""
        return np.array(astuple(self), dtype=np.float64)

    @classmethod
    def from_array(cls, values: np.ndarray) -> 'FeatureVector':
        """Build a vector from any length-5 sequence."""
        if len(values) != 5:
            raise ValueError(f"Expected 5 components, got {len(values)}")
        return cls(*(float(v) for v in values))

    @property
    def color(self):
        return (self.c1, self.c2, self.c3)


def color_distance(a: FeatureVector, b: FeatureVector) -> float:
    """Euclidean distance over the three color channels only."""
    return math.sqrt(
        (a.c1 - b.c1) ** 2 + (a.c2 - b.c2) ** 2 + (a.c3 - b.c3) ** 2
    )


def spatial_distance(a: FeatureVector, b: FeatureVector) -> float:
    """Euclidean distance over the two spatial channels only."""
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2)


def average(vectors: Iterable[FeatureVector]) -> FeatureVector:
    """
    Component-wise arithmetic mean of a non-empty set of vectors.

    Raises:
        ValueError: If vectors is empty
    """
    stacked = [v.as_array() for v in vectors]
    if not stacked:
        raise ValueError("Cannot average an empty set of feature vectors")
    return FeatureVector.from_array(np.mean(stacked, axis=0))

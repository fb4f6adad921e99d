"""
Color encoding helpers: RGB/BGR images <-> Lab mean shift features.
"""

from .lab import (
    rgb_to_lab_features,
    lab_features_to_rgb,
    bgr_to_lab_features,
    lab_features_to_bgr,
)

__all__ = [
    'rgb_to_lab_features',
    'lab_features_to_rgb',
    'bgr_to_lab_features',
    'lab_features_to_bgr',
]

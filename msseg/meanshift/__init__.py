"""
Mean shift mode filtering module for image segmentation.
"""

from .feature import FeatureVector, color_distance, spatial_distance, average
from .config import MeanShiftConfig
from .grid import SourceGrid, OutputGrid
from .aggregator import NeighborhoodAggregator, NeighborhoodSummary
from .converger import PixelConverger, ConvergenceResult, ConvergenceStatus, ExhaustReason
from .mode_filter import ImageModeFilter, MeanShiftResult, segment_image, process_images_batch

__all__ = [
    # Feature space
    'FeatureVector',
    'color_distance',
    'spatial_distance',
    'average',
    # Configuration
    'MeanShiftConfig',
    # Grids
    'SourceGrid',
    'OutputGrid',
    # Algorithm
    'NeighborhoodAggregator',
    'NeighborhoodSummary',
    'PixelConverger',
    'ConvergenceResult',
    'ConvergenceStatus',
    'ExhaustReason',
    'ImageModeFilter',
    'MeanShiftResult',
    'segment_image',
    'process_images_batch',
]

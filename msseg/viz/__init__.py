"""
Módulo de visualización para la segmentación Mean Shift.
"""

from .image_grid import plot_image_grid, plot_meanshift_results, plot_convergence_summary

__all__ = ['plot_image_grid', 'plot_meanshift_results', 'plot_convergence_summary']

"""
Módulo de carga de datos para la segmentación Mean Shift.

Componentes principales:
- ImageLoader: carga/guarda imágenes RGB y lee params_{name}.json

Example:
    >>> from msseg.data_loader import ImageLoader
    >>>
    >>> loader = ImageLoader()
    >>> images = loader.load_all_images()
    >>> config = loader.load_config('house')
"""

from .image_loader import ImageLoader, DEFAULT_SIZE, IMAGE_EXTENSIONS

__all__ = ['ImageLoader', 'DEFAULT_SIZE', 'IMAGE_EXTENSIONS']

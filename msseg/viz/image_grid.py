"""
Utilidades de visualización para resultados de Mean Shift.

Proporciona funciones para mostrar imágenes en cuadrícula, comparar la
imagen original con la segmentada y resumir la convergencia por píxel.
"""

import numpy as np
import matplotlib.pyplot as plt
from typing import List, Tuple, Dict, Optional

from ..color import lab_features_to_rgb
from ..meanshift import MeanShiftResult


def plot_image_grid(
    images: List[np.ndarray],
    titles: List[str],
    figsize: Tuple[int, int] = (12, 6)
) -> plt.Figure:
    """
    Crea un grid de imágenes en una sola fila.

    Args:
        images: Lista de imágenes RGB con shape (H, W, 3).
        titles: Lista de títulos, misma longitud que images.
        figsize: Tamaño de la figura (ancho, alto) en pulgadas.

    Returns:
        fig: Figura de matplotlib con las imágenes sin ejes.

    Raises:
        ValueError: Si la longitud de images y titles no coincide.

    Example:
        >>> fig = plot_image_grid([original, segmented], ['Original', 'Mean Shift'])
    """
    if len(images) != len(titles):
        raise ValueError(
            f"El número de imágenes ({len(images)}) debe coincidir "
            f"con el número de títulos ({len(titles)})"
        )

    n_images = len(images)
    fig, axes = plt.subplots(1, n_images, figsize=figsize)

    # Si solo hay una imagen, axes no es un array
    if n_images == 1:
        axes = [axes]

    for ax, img, title in zip(axes, images, titles):
        ax.imshow(img)
        ax.axis('off')
        ax.set_title(title, fontsize=14, pad=10)

    plt.tight_layout()

    return fig


def plot_meanshift_results(
    original_images: Dict[str, np.ndarray],
    results: Dict[str, MeanShiftResult],
    image_ids: Optional[List[str]] = None,
    figsize: Optional[Tuple[int, int]] = None
) -> plt.Figure:
    """
    Visualiza resultados de Mean Shift en un grid de N filas x 3 columnas.

    Para cada imagen:
    - Columna 1: Imagen original
    - Columna 2: Imagen segmentada (convertida de Lab a RGB)
    - Columna 3: Mapa de iteraciones por píxel

    Args:
        original_images: {image_id: RGB uint8 (H, W, 3)}
        results: {image_id: MeanShiftResult}
        image_ids: IDs a mostrar en orden. Por defecto, las claves de results.
        figsize: Tamaño de la figura. Por defecto (15, 5 * N).

    Returns:
        fig: Figura de matplotlib.

    Raises:
        ValueError: Si faltan image_ids en alguno de los diccionarios.
    """
    if image_ids is None:
        image_ids = list(results.keys())

    missing_in_original = [i for i in image_ids if i not in original_images]
    missing_in_results = [i for i in image_ids if i not in results]
    if missing_in_original or missing_in_results:
        error_msg = "Faltan image_ids en los diccionarios:\n"
        if missing_in_original:
            error_msg += f"  - Faltan en original_images: {missing_in_original}\n"
        if missing_in_results:
            error_msg += f"  - Faltan en results: {missing_in_results}\n"
        raise ValueError(error_msg)

    n_images = len(image_ids)
    if figsize is None:
        figsize = (15, 5 * n_images)

    fig, axes = plt.subplots(n_images, 3, figsize=figsize, squeeze=False)

    for row_idx, img_id in enumerate(image_ids):
        result = results[img_id]

        # === COLUMNA 1: Original ===
        ax_original = axes[row_idx, 0]
        ax_original.imshow(original_images[img_id])
        ax_original.axis('off')
        ax_original.set_title(f'{img_id} - Original', fontsize=12, pad=10)

        # === COLUMNA 2: Segmentada ===
        ax_segmented = axes[row_idx, 1]
        ax_segmented.imshow(lab_features_to_rgb(result.segmented))
        ax_segmented.axis('off')
        ax_segmented.set_title(
            f'Mean Shift ({result.elapsed_ms:.0f} ms)', fontsize=12, pad=10
        )

        # === COLUMNA 3: Iteraciones ===
        ax_iter = axes[row_idx, 2]
        im = ax_iter.imshow(result.iterations, cmap='viridis')
        ax_iter.axis('off')
        ax_iter.set_title('Iteraciones por píxel', fontsize=12, pad=10)
        fig.colorbar(im, ax=ax_iter, fraction=0.046, pad=0.04)

    plt.tight_layout()

    return fig


def plot_convergence_summary(
    result: MeanShiftResult,
    figsize: Tuple[int, int] = (8, 5)
) -> plt.Figure:
    """
    Histograma de iteraciones separando píxeles convergidos y agotados.

    Args:
        result: MeanShiftResult de una pasada
        figsize: Tamaño de la figura

    Returns:
        fig: Figura con barras apiladas por número de iteraciones.
    """
    fig, ax = plt.subplots(figsize=figsize)

    iterations = result.iterations.ravel()
    converged = result.converged.ravel()
    max_iter = int(iterations.max()) if iterations.size else 0
    bins = np.arange(1, max_iter + 1)

    converged_counts = np.bincount(iterations[converged], minlength=max_iter + 1)[1:]
    exhausted_counts = np.bincount(iterations[~converged], minlength=max_iter + 1)[1:]

    ax.bar(bins, converged_counts, color='tab:green', edgecolor='black', label='Convergidos')
    ax.bar(
        bins, exhausted_counts, bottom=converged_counts,
        color='tab:red', edgecolor='black', label='Agotados'
    )

    ax.set_xlabel('Iteraciones', fontsize=10)
    ax.set_ylabel('Píxeles', fontsize=10)
    ax.set_title(
        f'Convergencia: {result.n_converged} convergidos, {result.n_exhausted} agotados',
        fontsize=12, pad=10
    )
    ax.set_xticks(bins)
    ax.legend()

    plt.tight_layout()

    return fig

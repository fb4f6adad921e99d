"""
Cargador de imágenes y parámetros para segmentación Mean Shift.

Proporciona la clase ImageLoader para localizar el directorio de datos,
cargar imágenes (redimensionadas como en el experimento original de 256x256),
guardar resultados y leer archivos JSON de parámetros.
"""

import logging
import numpy as np
import cv2
from pathlib import Path
from PIL import Image
from typing import List, Optional, Dict, Tuple

from ..meanshift.config import MeanShiftConfig

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.bmp')
DEFAULT_SIZE = (256, 256)


class ImageLoader:
    """
    Cargador de imágenes y configuraciones desde un directorio de datos.

    Las imágenes se identifican por su nombre sin extensión. Los parámetros
    guardados siguen el formato:
        params_{name}.json

    Example:
        >>> loader = ImageLoader(data_dir=Path('data'))
        >>> print(loader.get_available_images())  # ['house', 'peppers']
        >>> img = loader.load_image('house')      # (256, 256, 3) uint8 RGB
        >>> config = loader.load_config('house')  # MeanShiftConfig
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Inicializa el cargador.

        Args:
            data_dir: Directorio con las imágenes. Si None, busca ./data
                      desde el directorio actual hacia arriba.

        Raises:
            FileNotFoundError: Si el directorio no existe o no se encuentra.
        """
        if data_dir is None:
            data_dir = self._find_data_directory()

        self.data_dir = Path(data_dir)

        if not self.data_dir.exists():
            raise FileNotFoundError(
                f"El directorio de datos no existe: {self.data_dir}"
            )

    def _find_data_directory(self) -> Path:
        """
        Busca un directorio data/ desde el cwd hacia los directorios padre.

        Raises:
            FileNotFoundError: Si no se encuentra en ningún nivel
        """
        current = Path.cwd()
        for candidate_root in (current, *current.parents):
            candidate = candidate_root / 'data'
            if candidate.is_dir():
                return candidate

        raise FileNotFoundError(
            f"No se pudo encontrar un directorio data/.\n"
            f"Búsqueda iniciada desde: {current}\n"
            f"Solución: crea ./data o especifica data_dir manualmente."
        )

    def _find_image_path(self, name: str) -> Optional[Path]:
        for ext in IMAGE_EXTENSIONS:
            path = self.data_dir / f"{name}{ext}"
            if path.exists():
                return path
        return None

    def get_available_images(self) -> List[str]:
        """
        Lista los nombres (sin extensión) de las imágenes del directorio.

        Returns:
            Lista ordenada de nombres de imagen.
        """
        names = {
            path.stem for path in self.data_dir.iterdir()
            if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
        }
        return sorted(names)

    def load_image(
        self,
        name: str,
        size: Optional[Tuple[int, int]] = DEFAULT_SIZE
    ) -> np.ndarray:
        """
        Carga una imagen como RGB y la redimensiona.

        Args:
            name: Nombre de la imagen sin extensión
            size: (ancho, alto) destino con interpolación bilineal.
                  None conserva el tamaño original.

        Returns:
            numpy array (H, W, 3) uint8 en formato RGB.

        Raises:
            FileNotFoundError: Si la imagen no existe.
        """
        image_path = self._find_image_path(name)
        if image_path is None:
            raise FileNotFoundError(
                f"Imagen '{name}' no encontrada en {self.data_dir}\n"
                f"Extensiones buscadas: {list(IMAGE_EXTENSIONS)}\n"
                f"Imágenes disponibles: {self.get_available_images()}"
            )

        with Image.open(image_path) as img:
            img_array = np.array(img.convert('RGB'))

        if size is not None:
            img_array = cv2.resize(img_array, tuple(size), interpolation=cv2.INTER_LINEAR)

        logger.debug("Loaded %s with shape %s", image_path, img_array.shape)
        return img_array

    def load_all_images(
        self,
        names: Optional[List[str]] = None,
        size: Optional[Tuple[int, int]] = DEFAULT_SIZE
    ) -> Dict[str, np.ndarray]:
        """
        Carga múltiples imágenes.

        Args:
            names: Nombres a cargar. Si None, carga todas las disponibles.
            size: Igual que en load_image()

        Returns:
            Diccionario {name: numpy_array (H, W, 3) uint8}
        """
        if names is None:
            names = self.get_available_images()

        return {name: self.load_image(name, size=size) for name in names}

    def save_image(self, name: str, image: np.ndarray, ext: str = '.png') -> Path:
        """
        Guarda una imagen RGB uint8 en el directorio de datos.

        Args:
            name: Nombre destino sin extensión
            image: Array (H, W, 3) uint8 RGB
            ext: Extensión del archivo

        Returns:
            Ruta del archivo escrito.

        Raises:
            ValueError: Si la imagen no tiene shape (H, W, 3)
        """
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"La imagen debe tener shape (H, W, 3), tiene {image.shape}")

        path = self.data_dir / f"{name}{ext}"
        Image.fromarray(np.asarray(image, dtype=np.uint8)).save(path)
        logger.debug("Saved %s", path)
        return path

    def load_config(self, name: str) -> MeanShiftConfig:
        """
        Lee params_{name}.json como MeanShiftConfig.

        Si el archivo no existe se usan los parámetros por defecto.

        Raises:
            json.JSONDecodeError: Si el JSON está malformado.
            ValueError: Si los parámetros no son válidos.
        """
        path = self.data_dir / f"params_{name}.json"
        if not path.exists():
            logger.debug("No parameter file for '%s', using defaults", name)
            return MeanShiftConfig()
        return MeanShiftConfig.from_json(path)

"""
Image File Reader для пайплайна аннотаций.

Чтение файла, декодирование в numpy array и извлечение EXIF-ориентации.
Пиксели остаются в ориентации хранения - поворот делают потребители
через MenuImage.oriented_pixels().
"""

import io
from pathlib import Path

import cv2
import numpy as np
from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..domain.exceptions import ImageDecodingError
from .menu_image import ImageOrientation, MenuImage

_EXIF_ORIENTATION_TAG = 0x0112


class ImageFileReader:
    """
    Читает изображение из файла.

    ЦКП: MenuImage (BGR буфер + ImageOrientation).
    """

    @staticmethod
    def read(image_path: Path) -> MenuImage:
        """
        Читает файл изображения.

        Args:
            image_path: Путь к файлу изображения

        Returns:
            MenuImage с пикселями в ориентации хранения

        Raises:
            FileNotFoundError: Если файл не найден
            ImageDecodingError: Если не удалось декодировать изображение
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        with open(image_path, "rb") as f:
            raw_bytes = f.read()

        return ImageFileReader.read_bytes(raw_bytes, source_name=image_path.stem)

    @staticmethod
    def read_bytes(raw_bytes: bytes, source_name: str = "unknown") -> MenuImage:
        """Декодирует изображение из байтов."""
        nparr = np.frombuffer(raw_bytes, np.uint8)
        # IGNORE_ORIENTATION: ориентацию применяем сами, иначе она учтётся дважды
        image = cv2.imdecode(nparr, cv2.IMREAD_COLOR | cv2.IMREAD_IGNORE_ORIENTATION)

        if image is None:
            raise ImageDecodingError(
                message=f"Failed to decode image: {source_name}",
                component="ImageFileReader"
            )

        orientation = ImageFileReader._read_orientation(raw_bytes)

        logger.debug(
            f"[ImageFileReader] Изображение прочитано: {source_name}, "
            f"размер: {image.shape}, ориентация: {orientation.name}"
        )

        return MenuImage(pixels=image, orientation=orientation, source_name=source_name)

    @staticmethod
    def _read_orientation(raw_bytes: bytes) -> ImageOrientation:
        """Читает EXIF Orientation через Pillow (без декодирования пикселей)."""
        try:
            with Image.open(io.BytesIO(raw_bytes)) as pil_img:
                value = pil_img.getexif().get(_EXIF_ORIENTATION_TAG)
        except (UnidentifiedImageError, OSError) as e:
            logger.debug(f"[ImageFileReader] EXIF недоступен: {e}")
            return ImageOrientation.UP

        return ImageOrientation.from_exif(value)

"""
JPEG-кодирование растров аннотатора.

Два потребителя: загрузка ориентированного снимка в Vision API
(OCR_JPEG_QUALITY) и итоговый аннотированный растр (OUTPUT_JPEG_QUALITY).
"""

import cv2
import numpy as np
from loguru import logger

from config.settings import OUTPUT_JPEG_QUALITY
from ..domain.exceptions import ImageEncodingError


class ImageEncoder:
    """BGR / BGRA / Grayscale растр -> JPEG байты."""

    @staticmethod
    def encode(image: np.ndarray, quality: int = OUTPUT_JPEG_QUALITY) -> bytes:
        """
        Args:
            image: Растр (BGR, BGRA с холста или Grayscale)
            quality: Качество JPEG, приводится к диапазону 1-100

        Returns:
            JPEG байты

        Raises:
            ImageEncodingError: Пустой растр или отказ cv2.imencode
        """
        if image is None or image.size == 0:
            raise ImageEncodingError(
                message="Пустой растр, кодировать нечего",
                component="ImageEncoder"
            )

        # Альфа-канал холста в JPEG не переносится
        if image.ndim == 3 and image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

        quality = max(1, min(100, int(quality)))
        success, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, quality])

        if not success:
            raise ImageEncodingError(
                message=f"cv2.imencode не смог закодировать растр {image.shape[1]}x{image.shape[0]}",
                component="ImageEncoder"
            )

        jpeg = buffer.tobytes()
        logger.debug(
            f"[ImageEncoder] Растр {image.shape[1]}x{image.shape[0]} -> JPEG "
            f"{len(jpeg)} байт (quality={quality})"
        )
        return jpeg

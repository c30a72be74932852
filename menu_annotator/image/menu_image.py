"""
Декодированное изображение меню + метаданные ориентации.

Пиксельный буфер хранится в ориентации хранения (как в файле),
ориентация - отдельным EXIF-тегом. Все координаты движка
считаются в ВИЗУАЛЬНОЙ ориентации (как изображение видит пользователь).
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import cv2
import numpy as np

from contracts.annotation_dto import ImageSize


class ImageOrientation(IntEnum):
    """EXIF Orientation (тег 0x0112)."""
    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @classmethod
    def from_exif(cls, value: Optional[int]) -> "ImageOrientation":
        """Неизвестные и отсутствующие значения считаются UP."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UP

    @property
    def swaps_dimensions(self) -> bool:
        """Поворот на 90° меняет местами ширину и высоту."""
        return self in (
            ImageOrientation.LEFT_MIRRORED,
            ImageOrientation.RIGHT,
            ImageOrientation.RIGHT_MIRRORED,
            ImageOrientation.LEFT,
        )


@dataclass(frozen=True, eq=False)
class MenuImage:
    """
    Входное изображение для аннотации.

    pixels: numpy.ndarray в BGR (или Grayscale), ориентация хранения.
            None или пустой массив = нет пригодного буфера.
    """
    pixels: Optional[np.ndarray]
    orientation: ImageOrientation = ImageOrientation.UP
    source_name: str = "unknown"

    @property
    def has_pixels(self) -> bool:
        return (
            self.pixels is not None
            and self.pixels.ndim >= 2
            and self.pixels.shape[0] > 0
            and self.pixels.shape[1] > 0
        )

    @property
    def size(self) -> ImageSize:
        """Размер в визуальной ориентации."""
        if not self.has_pixels:
            return ImageSize(width=0.0, height=0.0)

        h, w = self.pixels.shape[:2]
        if self.orientation.swaps_dimensions:
            w, h = h, w
        return ImageSize(width=float(w), height=float(h))

    def oriented_pixels(self) -> np.ndarray:
        """Возвращает буфер, повёрнутый в визуальную ориентацию."""
        image = self.pixels
        orientation = self.orientation

        if orientation == ImageOrientation.UP_MIRRORED:
            return cv2.flip(image, 1)
        if orientation == ImageOrientation.DOWN:
            return cv2.rotate(image, cv2.ROTATE_180)
        if orientation == ImageOrientation.DOWN_MIRRORED:
            return cv2.flip(image, 0)
        if orientation == ImageOrientation.LEFT_MIRRORED:
            return cv2.transpose(image)
        if orientation == ImageOrientation.RIGHT:
            return cv2.rotate(image, cv2.ROTATE_90_CLOCKWISE)
        if orientation == ImageOrientation.RIGHT_MIRRORED:
            return cv2.flip(cv2.transpose(image), -1)
        if orientation == ImageOrientation.LEFT:
            return cv2.rotate(image, cv2.ROTATE_90_COUNTERCLOCKWISE)
        return image

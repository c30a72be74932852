"""
Интерфейсы (абстрактные классы) для домена Annotation.

Домен Annotation отвечает за:
1. Поиск текстовых регионов на фото меню (через внешний OCR)
2. Сопоставление регионов с блюдами
3. Рендеринг бейджей маржи поверх изображения
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Literal, Sequence, Tuple

import numpy as np

from contracts.annotation_dto import BoundingBox, DetectedTextRegion, ImageSize
from .contracts import RecognitionOptions, RecognizedText

# RGBA, 0-255
Color = Tuple[int, int, int, int]
TextAlign = Literal["left", "center"]


@dataclass(frozen=True)
class FontSpec:
    """Описание шрифта, независимое от графического бэкенда."""
    size: int
    bold: bool = False


class ITextRecognizer(ABC):
    """
    Интерфейс внешнего OCR-провайдера.

    Контракт: по пиксельному буферу и подсказке ориентации возвращает
    наблюдения с НОРМАЛИЗОВАННЫМ bbox (origin bottom-left) в системе
    координат визуально ориентированного изображения.
    """

    @abstractmethod
    def recognize(
        self,
        pixels: np.ndarray,
        orientation: int,
        options: RecognitionOptions
    ) -> List[RecognizedText]:
        """
        Распознаёт текст на изображении.

        Args:
            pixels: Буфер в ориентации хранения (BGR)
            orientation: EXIF Orientation буфера
            options: Параметры распознавания

        Returns:
            Список наблюдений OCR

        Raises:
            Exception: Любая ошибка провайдера
        """
        pass


class ITextRegionDetector(ABC):
    """Интерфейс адаптера детекции: MenuImage -> регионы в pixel space."""

    @abstractmethod
    async def detect(self, image) -> List[DetectedTextRegion]:
        """
        Находит текстовые регионы.

        Args:
            image: MenuImage

        Returns:
            Регионы в pixel space (top-left origin)

        Raises:
            DetectionFailed: Нет пригодного пиксельного буфера
            RecognitionError: OCR-провайдер сообщил об ошибке
        """
        pass


class ICanvas(ABC):
    """
    Холст рендеринга.

    Рендерер работает только через этот интерфейс и не зависит
    от конкретной графической библиотеки.
    """

    @property
    @abstractmethod
    def size(self) -> ImageSize:
        pass

    @abstractmethod
    def draw_image(self, pixels: np.ndarray, rect: BoundingBox) -> None:
        """Рисует BGR буфер, масштабированный в rect."""
        pass

    @abstractmethod
    def draw_rounded_rect(
        self,
        rect: BoundingBox,
        radius: float,
        fill: Color,
        outline: Color = None,
        width: int = 0
    ) -> None:
        pass

    @abstractmethod
    def draw_text(
        self,
        text: str,
        rect: BoundingBox,
        font: FontSpec,
        color: Color,
        align: TextAlign = "left"
    ) -> None:
        """Рисует (возможно многострочный) текст внутри rect."""
        pass

    @abstractmethod
    def measure_text(self, text: str, font: FontSpec) -> ImageSize:
        """Размер отрисованного (возможно многострочного) текста."""
        pass

    @abstractmethod
    def to_pixels(self) -> np.ndarray:
        """Итоговый растр (BGR)."""
        pass


class IAnnotationRenderer(ABC):
    """Интерфейс рендерера аннотаций."""

    @abstractmethod
    def render(self, image, annotations: Sequence, geometry):
        """
        Рисует аннотации.

        Args:
            image: MenuImage
            annotations: MatchedAnnotation в порядке вывода матчера
            geometry: DisplayGeometry

        Returns:
            RenderOutput (BGR растр размера geometry.display_size)
        """
        pass

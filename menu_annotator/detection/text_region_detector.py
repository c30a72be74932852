"""
Text Region Detector Adapter.

Оборачивает внешний OCR-провайдер (ITextRecognizer) и приводит
его вывод к списку DetectedTextRegion в pixel space.

КОНТРАКТЫ:
  Входные: MenuImage (BGR буфер + EXIF ориентация)
  От провайдера: RecognizedText (нормализованный bbox, origin bottom-left)
  Выходные: List[DetectedTextRegion] (пиксели, origin top-left)

Единственная точка ожидания всего пайплайна: вызов провайдера
выполняется в отдельном потоке, без таймаута и повторов.
"""

import asyncio
from typing import List, Optional

from loguru import logger

from config.settings import OCR_ACCURATE, OCR_LANGUAGE_CORRECTION, OCR_LANGUAGE_HINTS
from contracts.annotation_dto import BoundingBox, DetectedTextRegion, ImageSize
from ..domain.contracts import NormalizedBoundingBox, RecognitionOptions, RecognizedText
from ..domain.exceptions import DetectionFailed, RecognitionError
from ..domain.interfaces import ITextRecognizer, ITextRegionDetector
from ..image.menu_image import MenuImage


def normalized_to_pixel(box: NormalizedBoundingBox, image_size: ImageSize) -> BoundingBox:
    """
    Переводит нормализованный bbox (bottom-left origin) в пиксели (top-left origin).

    Y переворачивается: верх региона = 1 - y - height.
    """
    return BoundingBox(
        x=box.x * image_size.width,
        y=(1 - box.y - box.height) * image_size.height,
        width=box.width * image_size.width,
        height=box.height * image_size.height,
    )


class TextRegionDetector(ITextRegionDetector):
    """
    Адаптер детекции текста.

    Реализует интерфейс ITextRegionDetector, делегируя распознавание
    провайдеру ITextRecognizer.
    """

    def __init__(
        self,
        recognizer: ITextRecognizer,
        options: Optional[RecognitionOptions] = None
    ):
        """
        Args:
            recognizer: OCR-провайдер
            options: Параметры распознавания (по умолчанию из settings)
        """
        self.recognizer = recognizer
        self.options = options or RecognitionOptions(
            accurate=OCR_ACCURATE,
            language_correction=OCR_LANGUAGE_CORRECTION,
            language_hints=list(OCR_LANGUAGE_HINTS),
        )

    async def detect(self, image: MenuImage) -> List[DetectedTextRegion]:
        """
        Находит текстовые регионы на изображении.

        Returns:
            Регионы в pixel space визуально ориентированного изображения.
            Пустой список - допустимый результат (NoTextDetected).

        Raises:
            DetectionFailed: Нет пригодного пиксельного буфера
            RecognitionError: Ошибка OCR-провайдера
        """
        if image is None or not image.has_pixels:
            raise DetectionFailed(
                message="Нет пригодного пиксельного буфера",
                component="TextRegionDetector"
            )

        image_size = image.size
        logger.debug(
            f"[Detector] Распознавание: {image.source_name} "
            f"({image_size.width:.0f}x{image_size.height:.0f}, {image.orientation.name})"
        )

        try:
            observations = await asyncio.to_thread(
                self.recognizer.recognize,
                image.pixels,
                int(image.orientation),
                self.options,
            )
        except Exception as e:
            logger.error(f"[Detector] Ошибка OCR: {e}")
            raise RecognitionError(
                message="OCR-провайдер вернул ошибку",
                component="TextRegionDetector",
                original_error=e
            )

        regions = self._to_regions(observations, image_size)

        if not regions:
            logger.warning("[Detector] NoTextDetected: OCR не нашёл ни одного региона")
        else:
            logger.info(f"[Detector] Найдено регионов: {len(regions)}")

        return regions

    def _to_regions(
        self,
        observations: List[RecognizedText],
        image_size: ImageSize
    ) -> List[DetectedTextRegion]:
        """Конвертирует наблюдения провайдера в регионы pixel space."""
        regions = []

        for observation in observations:
            if not observation.text.strip():
                continue

            bbox = normalized_to_pixel(observation.bounding_box, image_size)
            regions.append(DetectedTextRegion(
                text=observation.text,
                bounding_box=bbox,
                confidence=observation.confidence,
            ))

            logger.debug(
                f"[Detector] '{observation.text}' normalized={observation.bounding_box} "
                f"-> pixel=({bbox.x:.1f}, {bbox.y:.1f}, {bbox.width:.1f}, {bbox.height:.1f})"
            )

        return regions

"""
OCR: Google Vision API интеграция.

Реализация ITextRecognizer поверх Google Cloud Vision:
- Применение EXIF-ориентации к буферу (у Vision нет подсказки ориентации)
- Отправка JPEG в DOCUMENT_TEXT_DETECTION (точность важнее скорости)
- Сборка строк из параграфов
- Приведение bbox к нормализованному виду с origin bottom-left

КОНТРАКТЫ:
  Входные: numpy BGR буфер + EXIF Orientation
  Выходные: List[RecognizedText] (валидированный через pydantic)
"""

import os
from pathlib import Path
from typing import Any, List, Optional

import numpy as np
from google.cloud import vision
from loguru import logger
from pydantic import ValidationError

from config.settings import GOOGLE_APPLICATION_CREDENTIALS, OCR_JPEG_QUALITY
from ...domain.contracts import (
    ContractValidationError,
    NormalizedBoundingBox,
    RecognitionOptions,
    RecognizedText,
)
from ...domain.interfaces import ITextRecognizer
from ...image.image_encoder import ImageEncoder
from ...image.menu_image import ImageOrientation, MenuImage


class GoogleVisionTextRecognizer(ITextRecognizer):
    """
    Обёртка над Google Cloud Vision API.

    Реализует интерфейс ITextRecognizer.
    Возвращает по одному RecognizedText на параграф (обычно это
    одна строка меню: название блюда или цена).
    """

    def __init__(self, credentials_path: Optional[str] = None, client: Any = None):
        """
        Инициализация OCR клиента.

        Args:
            credentials_path: Путь к JSON-файлу credentials.
                            Если не указан, берётся из settings.
            client: Готовый ImageAnnotatorClient (для тестов)
        """
        if client is not None:
            self.client = client
            logger.info("[GoogleVision] Используется переданный клиент")
            return

        creds_path = credentials_path or GOOGLE_APPLICATION_CREDENTIALS

        if not creds_path:
            raise ValueError(
                "Google credentials не указаны!\n"
                "Укажите путь в config/settings.py или передайте в конструктор."
            )

        if not Path(creds_path).exists():
            raise FileNotFoundError(f"Credentials файл не найден: {creds_path}")

        # Устанавливаем credentials через переменную окружения
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = str(creds_path)

        self.client = vision.ImageAnnotatorClient()

        logger.info("[GoogleVision] Клиент инициализирован")

    def recognize(
        self,
        pixels: np.ndarray,
        orientation: int,
        options: RecognitionOptions
    ) -> List[RecognizedText]:
        """
        Распознаёт текст на изображении.

        Raises:
            RuntimeError: Если Vision API вернул ошибку
            ContractValidationError: Если ответ API невалиден
        """
        # Координаты должны совпадать с визуальной ориентацией
        oriented = MenuImage(
            pixels=pixels,
            orientation=ImageOrientation.from_exif(orientation),
        ).oriented_pixels()
        height, width = oriented.shape[:2]

        content = ImageEncoder.encode(oriented, quality=OCR_JPEG_QUALITY)
        image = vision.Image(content=content)
        image_context = vision.ImageContext(language_hints=list(options.language_hints))

        if not options.language_correction:
            logger.debug("[GoogleVision] Автокоррекция языка не применяется")

        if options.accurate:
            response = self.client.document_text_detection(image=image, image_context=image_context)
        else:
            response = self.client.text_detection(image=image, image_context=image_context)

        if response.error.message:
            raise RuntimeError(f"Google Vision API error: {response.error.message}")

        return self._parse_response(response, width, height)

    def _parse_response(self, response: Any, image_width: int, image_height: int) -> List[RecognizedText]:
        """
        Парсит ответ Google Vision в список RecognizedText.

        Пиксельные вершины (top-left origin) нормализуются по размеру
        страницы и переворачиваются по Y (bottom-left origin).
        """
        observations: List[RecognizedText] = []

        if not response.full_text_annotation:
            logger.debug("[GoogleVision] full_text_annotation пуст")
            return observations

        for page in response.full_text_annotation.pages:
            page_width = page.width or image_width
            page_height = page.height or image_height

            for block in page.blocks:
                for paragraph in block.paragraphs:
                    text = " ".join(
                        "".join(symbol.text for symbol in word.symbols)
                        for word in paragraph.words
                    ).strip()

                    if not text:
                        continue

                    bbox = self._normalize_bounding_box(
                        paragraph.bounding_box, page_width, page_height
                    )
                    if bbox is None:
                        continue

                    try:
                        observations.append(RecognizedText(
                            text=text,
                            bounding_box=bbox,
                            confidence=paragraph.confidence,
                        ))
                    except ValidationError as e:
                        raise ContractValidationError("GoogleVision", "RecognizedText", e.errors())

        logger.debug(f"[GoogleVision] Извлечено строк: {len(observations)}")
        return observations

    def _normalize_bounding_box(
        self,
        bounding_poly: Any,
        page_width: float,
        page_height: float
    ) -> Optional[NormalizedBoundingBox]:
        """Преобразует bounding_poly в нормализованный bbox (bottom-left origin)."""
        vertices = bounding_poly.vertices

        xs = [v.x for v in vertices if v.x is not None]
        ys = [v.y for v in vertices if v.y is not None]

        if not xs or not ys or page_width <= 0 or page_height <= 0:
            return None

        # Vision иногда возвращает вершины чуть за пределами страницы
        x_min = min(max(min(xs), 0), page_width)
        x_max = min(max(max(xs), 0), page_width)
        y_min = min(max(min(ys), 0), page_height)
        y_max = min(max(max(ys), 0), page_height)

        # Пропускаем регионы с нулевыми размерами
        if x_max <= x_min or y_max <= y_min:
            return None

        try:
            return NormalizedBoundingBox(
                x=x_min / page_width,
                y=1 - y_max / page_height,
                width=(x_max - x_min) / page_width,
                height=(y_max - y_min) / page_height,
            )
        except ValidationError as e:
            raise ContractValidationError("GoogleVision", "NormalizedBoundingBox", e.errors())

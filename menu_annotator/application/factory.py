"""
Фабрика для создания компонентов домена Annotation.

Предоставляет удобные методы для создания и конфигурации
всех компонентов домена Annotation через единый интерфейс.
"""

from typing import Any, Dict, Optional

from loguru import logger

from ..detection.text_region_detector import TextRegionDetector
from ..domain.interfaces import IAnnotationRenderer, ITextRecognizer, ITextRegionDetector
from ..matching.dish_matcher import DishRegionMatcher, MatchingMode
from ..rendering.annotation_renderer import AnnotationRenderer
from .annotation_pipeline import MenuAnnotationPipeline
from .annotation_session import AnnotationSession


class AnnotationComponentFactory:
    """
    Фабрика для создания компонентов домена Annotation.

    Домен Annotation отвечает за:
    - Детекцию текстовых регионов (OCR)
    - Сопоставление регионов с блюдами
    - Рендеринг бейджей маржи
    """

    @staticmethod
    def create_text_recognizer(credentials_path: Optional[str] = None) -> ITextRecognizer:
        """
        Создает OCR-провайдер (Google Cloud Vision).

        Args:
            credentials_path: Путь к credentials файлу Google Cloud
        """
        logger.debug("[Annotation] Создание OCR провайдера")
        from ..infrastructure.ocr.google_vision_recognizer import GoogleVisionTextRecognizer
        return GoogleVisionTextRecognizer(credentials_path)

    @staticmethod
    def create_detector(recognizer: Optional[ITextRecognizer] = None) -> ITextRegionDetector:
        """
        Создает адаптер детекции текста.

        Args:
            recognizer: OCR-провайдер (по умолчанию Google Vision)
        """
        logger.debug("[Annotation] Создание детектора текста")
        if recognizer is None:
            recognizer = AnnotationComponentFactory.create_text_recognizer()
        return TextRegionDetector(recognizer)

    @staticmethod
    def create_matcher(mode: Optional[MatchingMode] = None) -> DishRegionMatcher:
        """
        Создает матчер блюд и регионов.

        Args:
            mode: Режим сопоставления (по умолчанию из settings)
        """
        logger.debug("[Annotation] Создание матчера")
        return DishRegionMatcher(mode=mode)

    @staticmethod
    def create_renderer(nudge_collisions: Optional[bool] = None) -> IAnnotationRenderer:
        """
        Создает рендерер аннотаций.

        Args:
            nudge_collisions: Сдвигать пересекающиеся бейджи (по умолчанию из settings)
        """
        logger.debug("[Annotation] Создание рендерера")
        if nudge_collisions is None:
            return AnnotationRenderer()
        return AnnotationRenderer(nudge_collisions=nudge_collisions)

    @staticmethod
    def create_pipeline(
        recognizer: Optional[ITextRecognizer] = None,
        detector: Optional[ITextRegionDetector] = None,
        matcher: Optional[DishRegionMatcher] = None,
        renderer: Optional[IAnnotationRenderer] = None,
        max_display_width: Optional[float] = None,
        max_display_height: Optional[float] = None
    ) -> MenuAnnotationPipeline:
        """
        Создает пайплайн аннотации.

        Args:
            recognizer: OCR-провайдер (используется, если detector не передан)
            detector: Адаптер детекции (опционально)
            matcher: Матчер (опционально)
            renderer: Рендерер (опционально)
            max_display_width: Граница отображения по ширине
            max_display_height: Граница отображения по высоте

        Returns:
            Сконфигурированный MenuAnnotationPipeline
        """
        logger.debug("[Annotation] Создание пайплайна аннотации")

        # Создаем компоненты если они не предоставлены
        if detector is None:
            detector = AnnotationComponentFactory.create_detector(recognizer)

        if matcher is None:
            matcher = AnnotationComponentFactory.create_matcher()

        if renderer is None:
            renderer = AnnotationComponentFactory.create_renderer()

        return MenuAnnotationPipeline(
            detector=detector,
            matcher=matcher,
            renderer=renderer,
            max_display_width=max_display_width,
            max_display_height=max_display_height
        )

    @staticmethod
    def create_session(pipeline: Optional[MenuAnnotationPipeline] = None) -> AnnotationSession:
        """Создает сессию аннотации поверх пайплайна."""
        logger.debug("[Annotation] Создание сессии")
        if pipeline is None:
            pipeline = AnnotationComponentFactory.create_pipeline()
        return AnnotationSession(pipeline)

    @staticmethod
    def get_annotation_info() -> Dict[str, Any]:
        """
        Возвращает информацию о домене Annotation.

        Returns:
            Словарь с информацией о доступных компонентах
        """
        return {
            "domain": "Annotation",
            "responsibility": "OCR регионов + сопоставление блюд + рендеринг бейджей маржи",
            "output": "JPEG (display space)",
            "components": {
                "text_recognizer": "GoogleVisionTextRecognizer",
                "detector": "TextRegionDetector",
                "matcher": "DishRegionMatcher",
                "renderer": "AnnotationRenderer",
                "pipeline": "MenuAnnotationPipeline",
                "session": "AnnotationSession"
            },
            "matching_modes": [mode.value for mode in MatchingMode],
            "dependencies": ["Google Cloud Vision API", "OpenCV", "Pillow"]
        }

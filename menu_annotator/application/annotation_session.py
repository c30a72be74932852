"""
Сессия аннотации: наблюдаемое состояние для UI-слоя.

Состояние (is_loading, error, annotated_image) меняется только
на event loop вызывающего кода: до и после await пайплайна.
Ошибки хранятся как строки для отображения пользователю.
"""

from typing import Optional, Sequence

from loguru import logger

from contracts.annotation_dto import AnnotationResult
from contracts.menu_analysis_dto import DishRecord, MenuAnalysisResponse
from ..domain.exceptions import AnnotationError
from ..image.menu_image import MenuImage
from .annotation_pipeline import MenuAnnotationPipeline

NO_ANALYSIS_ERROR = "No menu analysis data available"
NO_IMAGE_ERROR = "Failed to load menu image"
DETECTION_ERROR_PREFIX = "Text detection failed"


class AnnotationSession:
    """
    Держатель состояния одной аннотации.

    Использование:
        session = AnnotationSession(pipeline)
        session.set_analysis_data(response, image)
        await session.generate_annotated_image()
        session.annotated_image  # JPEG bytes или None
    """

    def __init__(self, pipeline: MenuAnnotationPipeline):
        self.pipeline = pipeline

        self.is_loading: bool = False
        self.error: Optional[str] = None
        self.analysis: Optional[MenuAnalysisResponse] = None
        self.original_image: Optional[MenuImage] = None
        self.annotated_image: Optional[bytes] = None
        self.last_result: Optional[AnnotationResult] = None

    def set_analysis_data(self, response: MenuAnalysisResponse, image: MenuImage) -> None:
        """Сохраняет анализ и изображение, сбрасывает предыдущий результат."""
        self.analysis = response
        self.original_image = image
        self.annotated_image = None
        self.last_result = None
        self.error = None

        logger.info(f"[Session] Данные анализа: {response.dishes_found} блюд")
        for dish in response.dishes:
            logger.debug(f"[Session]   - '{dish.name}' ({dish.margin_percentage}%)")

    async def generate_annotated_image(self) -> None:
        """
        Генерирует аннотированное изображение по сохранённым данным.

        Результат в annotated_image, ошибка в error.
        """
        self.is_loading = True
        self.error = None

        if self.analysis is None:
            self._fail(NO_ANALYSIS_ERROR)
            return

        if self.original_image is None or not self.original_image.has_pixels:
            self._fail(NO_IMAGE_ERROR)
            return

        try:
            result = await self.pipeline.annotate(self.original_image, self.analysis.dishes)
        except AnnotationError as e:
            reason = e.original_error if e.original_error is not None else e.message
            self._fail(f"{DETECTION_ERROR_PREFIX}: {reason}")
            return

        self.last_result = result
        self.annotated_image = result.image_bytes
        self.is_loading = False

        logger.info(
            f"[Session] Готово: {result.annotated_count}/{result.requested_count} блюд аннотировано"
        )

    async def generate_annotations(
        self,
        dishes: Sequence[DishRecord],
        image: MenuImage
    ) -> Optional[bytes]:
        """
        Аннотирует изображение для выбранных блюд.

        Args:
            dishes: Выбранные блюда
            image: Изображение меню

        Returns:
            JPEG bytes или None при ошибке
        """
        logger.info(f"[Session] Прямая генерация для {len(dishes)} выбранных блюд")

        self.set_analysis_data(MenuAnalysisResponse.for_dishes(dishes), image)
        await self.generate_annotated_image()
        return self.annotated_image

    def reset_annotation(self) -> None:
        """Сбрасывает результат и ошибку; анализ и изображение остаются."""
        self.annotated_image = None
        self.last_result = None
        self.error = None
        logger.debug("[Session] Состояние аннотации сброшено")

    def _fail(self, message: str) -> None:
        logger.error(f"[Session] {message}")
        self.error = message
        self.is_loading = False

"""
Пайплайн для домена Annotation.

Один запрос = одно изображение + список выбранных блюд:
1. Детекция текстовых регионов (async, единственная точка ожидания)
2. Сопоставление блюд с регионами
3. Вычисление геометрии display space
4. Рендеринг и кодирование в JPEG

ЦКП: AnnotationResult - закодированный растр + метрика annotated/requested.

Состояния между вызовами нет: пайплайн можно вызывать повторно
и параллельно, если OCR-провайдер это допускает.
"""

from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from config.settings import OUTPUT_JPEG_QUALITY
from contracts.annotation_dto import AnnotationResult
from contracts.menu_analysis_dto import DishRecord, MenuAnalysisResponse
from ..domain.exceptions import AnnotationError, NoTextDetected
from ..domain.interfaces import IAnnotationRenderer, ITextRegionDetector
from ..image.image_encoder import ImageEncoder
from ..image.image_file_reader import ImageFileReader
from ..image.menu_image import MenuImage
from ..layout.display_geometry import compute_display_geometry
from ..matching.dish_matcher import DishRegionMatcher


class MenuAnnotationPipeline:
    """
    Пайплайн домена Annotation.

    Координирует:
    1. TextRegionDetector
    2. DishRegionMatcher
    3. compute_display_geometry
    4. AnnotationRenderer + ImageEncoder
    """

    def __init__(
        self,
        detector: ITextRegionDetector,
        matcher: DishRegionMatcher,
        renderer: IAnnotationRenderer,
        max_display_width: Optional[float] = None,
        max_display_height: Optional[float] = None,
        jpeg_quality: int = OUTPUT_JPEG_QUALITY
    ):
        """
        Args:
            detector: Адаптер детекции текста
            matcher: Сопоставление блюд и регионов
            renderer: Рендерер аннотаций
            max_display_width: Граница отображения (по умолчанию viewport * 1.5)
            max_display_height: Граница отображения (по умолчанию viewport * 1.5)
            jpeg_quality: Качество итогового JPEG
        """
        self.detector = detector
        self.matcher = matcher
        self.renderer = renderer
        self.max_display_width = max_display_width
        self.max_display_height = max_display_height
        self.jpeg_quality = jpeg_quality

        logger.info("[Pipeline] Инициализирован")

    async def annotate(self, image: MenuImage, dishes: Sequence[DishRecord]) -> AnnotationResult:
        """
        Аннотирует изображение меню.

        Args:
            image: Декодированное изображение
            dishes: Блюда, уже отфильтрованные вызывающим кодом

        Returns:
            AnnotationResult

        Raises:
            DetectionFailed: Нет пригодного пиксельного буфера
            RecognitionError: Ошибка OCR-провайдера
            AnnotationError: Любая другая ошибка пайплайна
        """
        try:
            logger.info(f"[Pipeline] Аннотация: {getattr(image, 'source_name', 'unknown')}, блюд: {len(dishes)}")

            # 1. Детекция (единственная точка ожидания)
            regions = await self.detector.detect(image)

            degradation = None
            if not regions:
                degradation = NoTextDetected(
                    message="Текст на изображении не найден, рисуем только заголовок",
                    component="MenuAnnotationPipeline"
                )
                logger.warning(f"[Pipeline] {degradation.message}")

            # 2-4. Синхронно после детекции
            matches = self.matcher.match(dishes, regions)
            geometry = compute_display_geometry(
                image.size, self.max_display_width, self.max_display_height
            )
            output = self.renderer.render(image, matches, geometry)
            image_bytes = ImageEncoder.encode(output.pixels, quality=self.jpeg_quality)

            matched_ids = {m.dish.id for m in matches}
            skipped: List[str] = [d.name for d in dishes if d.id not in matched_ids]
            skipped.extend(output.skipped)

            result = AnnotationResult(
                image_bytes=image_bytes,
                display_geometry=geometry,
                annotations=output.drawn,
                requested_count=len(dishes),
                no_text_detected=degradation is not None,
                regions_detected=len(regions),
                skipped_dish_names=skipped,
                degradation=degradation.message if degradation else None,
            )

            logger.info(
                f"[Pipeline] Готово: {result.annotated_count}/{result.requested_count} блюд аннотировано "
                f"({len(image_bytes)} байт)"
            )
            return result

        except AnnotationError:
            raise
        except Exception as e:
            logger.error(f"[Pipeline] Ошибка: {e}")
            raise AnnotationError(
                message="Ошибка при аннотации изображения",
                component="MenuAnnotationPipeline",
                original_error=e
            )

    async def annotate_file(self, image_path: Path, analysis_path: Path) -> AnnotationResult:
        """
        Читает изображение (с EXIF ориентацией) и JSON анализа, затем аннотирует.

        Args:
            image_path: Путь к фото меню
            analysis_path: Путь к JSON ответа анализа (MenuAnalysisResponse)
        """
        image = ImageFileReader.read(Path(image_path))
        analysis = MenuAnalysisResponse.from_json_file(Path(analysis_path))
        return await self.annotate(image, analysis.dishes)

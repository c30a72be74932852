"""
Coordinate engine: pixel space -> display space.

Холст рендеринга ограничен размером экрана (viewport * 1.5)
с сохранением пропорций. После вычисления геометрии весь рендеринг
работает ТОЛЬКО в display space.
"""

from typing import Optional

from loguru import logger

from config.settings import DISPLAY_BOUND_FACTOR, VIEWPORT_HEIGHT, VIEWPORT_WIDTH
from contracts.annotation_dto import (
    DetectedTextRegion,
    DisplayGeometry,
    ImageSize,
    MatchedAnnotation,
)
from ..domain.exceptions import LayoutError


def default_display_bound() -> ImageSize:
    """Граница отображения по умолчанию: viewport * DISPLAY_BOUND_FACTOR."""
    return ImageSize(
        width=VIEWPORT_WIDTH * DISPLAY_BOUND_FACTOR,
        height=VIEWPORT_HEIGHT * DISPLAY_BOUND_FACTOR,
    )


def compute_display_geometry(
    original_size: ImageSize,
    max_display_width: Optional[float] = None,
    max_display_height: Optional[float] = None
) -> DisplayGeometry:
    """
    Вычисляет размер холста и коэффициенты масштабирования.

    - Изображение помещается в границу -> display_size = original_size
    - Иначе уменьшаем с сохранением aspect ratio; ограничивающая сторона
      определяется сравнением aspect ratio изображения и границы

    Raises:
        LayoutError: Если размеры изображения или границы не положительные
    """
    bound = default_display_bound()
    if max_display_width is None:
        max_display_width = bound.width
    if max_display_height is None:
        max_display_height = bound.height

    if original_size.width <= 0 or original_size.height <= 0:
        raise LayoutError(
            message=f"Некорректный размер изображения: {original_size.width}x{original_size.height}",
            component="DisplayGeometry"
        )
    if max_display_width <= 0 or max_display_height <= 0:
        raise LayoutError(
            message=f"Некорректная граница отображения: {max_display_width}x{max_display_height}",
            component="DisplayGeometry"
        )

    aspect_ratio = original_size.aspect_ratio

    if original_size.width > max_display_width or original_size.height > max_display_height:
        if aspect_ratio > (max_display_width / max_display_height):
            # Ограничивает ширина
            display_size = ImageSize(width=max_display_width, height=max_display_width / aspect_ratio)
        else:
            # Ограничивает высота
            display_size = ImageSize(width=max_display_height * aspect_ratio, height=max_display_height)
    else:
        display_size = original_size

    geometry = DisplayGeometry(
        original_size=original_size,
        display_size=display_size,
        scale_x=display_size.width / original_size.width,
        scale_y=display_size.height / original_size.height,
    )

    logger.debug(
        f"[Layout] {original_size.width:.0f}x{original_size.height:.0f} -> "
        f"{display_size.width:.1f}x{display_size.height:.1f} "
        f"(bound {max_display_width:.0f}x{max_display_height:.0f}, "
        f"scale x={geometry.scale_x:.4f}, y={geometry.scale_y:.4f})"
    )

    return geometry


def to_display_space(annotation: MatchedAnnotation, geometry: DisplayGeometry) -> MatchedAnnotation:
    """Копия аннотации с регионом в display space."""
    region = annotation.region
    return MatchedAnnotation(
        dish=annotation.dish,
        region=DetectedTextRegion(
            text=region.text,
            bounding_box=geometry.to_display(region.bounding_box),
            confidence=region.confidence,
        ),
        score=annotation.score,
    )

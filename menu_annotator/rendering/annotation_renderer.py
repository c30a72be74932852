"""
Annotation Renderer.

Детерминированный порядок композиции на холсте размера display_size:
1. Исходное изображение, масштабированное в display_size
2. Заголовок по центру сверху на непрозрачной подложке
3. Для каждой MatchedAnnotation (в порядке матчера):
   - бейдж (заливка цвета маржи, белая рамка 2pt, процент + категория)
   - обоснование под регионом на полупрозрачной подложке

Рендеринг не бросает исключений наружу: ошибка отрисовки одной
аннотации логируется, аннотация пропускается.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from config.settings import (
    BADGE_BORDER_WIDTH,
    BADGE_COLLISION_NUDGE,
    BADGE_CORNER_RADIUS,
    CATEGORY_FONT_SIZE,
    HEADER_CORNER_RADIUS,
    HEADER_FONT_SIZE,
    HEADER_TEXT,
    JUSTIFICATION_CORNER_RADIUS,
    JUSTIFICATION_FONT_SIZE,
    PERCENTAGE_FONT_SIZE,
)
from contracts.annotation_dto import (
    BadgeLayout,
    BoundingBox,
    DisplayGeometry,
    ImageSize,
    MatchedAnnotation,
)
from ..domain.interfaces import Color, FontSpec, IAnnotationRenderer, ICanvas
from ..image.menu_image import MenuImage
from ..layout.display_geometry import to_display_space
from ..layout.placement import (
    justification_max_width,
    nudge_badges,
    place_badge,
    place_header,
    place_justification,
)
from .canvas import PilCanvas
from .margin_style import MarginStyleTable, RGB, load_margin_styles
from .text_wrap import wrap_text, wrap_to_width

HEADER_FONT = FontSpec(size=HEADER_FONT_SIZE, bold=True)
PERCENTAGE_FONT = FontSpec(size=PERCENTAGE_FONT_SIZE, bold=True)
CATEGORY_FONT = FontSpec(size=CATEGORY_FONT_SIZE)
JUSTIFICATION_FONT = FontSpec(size=JUSTIFICATION_FONT_SIZE)

BLACK: Color = (0, 0, 0, 255)
HEADER_BACKGROUND: Color = (255, 255, 255, int(255 * 0.9))
JUSTIFICATION_BACKGROUND: Color = (255, 255, 255, int(255 * 0.85))

CanvasFactory = Callable[[ImageSize], ICanvas]


def _rgba(rgb: RGB, alpha: int = 255) -> Color:
    return (rgb[0], rgb[1], rgb[2], alpha)


@dataclass
class RenderOutput:
    """Результат рендеринга: растр + что реально нарисовано."""
    pixels: np.ndarray
    drawn: List[MatchedAnnotation] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class AnnotationRenderer(IAnnotationRenderer):
    """
    Рисует аннотации поверх изображения меню.

    Работает только через ICanvas; по умолчанию PilCanvas.
    """

    def __init__(
        self,
        canvas_factory: CanvasFactory = PilCanvas,
        styles: Optional[MarginStyleTable] = None,
        nudge_collisions: bool = BADGE_COLLISION_NUDGE,
        header_text: str = HEADER_TEXT
    ):
        self.canvas_factory = canvas_factory
        self.styles = styles or load_margin_styles()
        self.nudge_collisions = nudge_collisions
        self.header_text = header_text

    def render(
        self,
        image: MenuImage,
        annotations: Sequence[MatchedAnnotation],
        geometry: DisplayGeometry
    ) -> RenderOutput:
        """
        Args:
            image: Исходное изображение
            annotations: Совпадения в pixel space, порядок матчера
            geometry: Геометрия display space

        Returns:
            RenderOutput с BGR растром размера geometry.display_size
        """
        canvas = self.canvas_factory(geometry.display_size)
        canvas_size = canvas.size

        canvas.draw_image(
            image.oriented_pixels(),
            BoundingBox(x=0, y=0, width=canvas_size.width, height=canvas_size.height),
        )
        self._draw_header(canvas)

        output = RenderOutput(pixels=None)

        # Все дальнейшие координаты - только display space
        prepared = []
        for annotation in annotations:
            try:
                display_annotation = to_display_space(annotation, geometry)
                badge = self._layout_badge(canvas, display_annotation)
            except Exception as e:
                self._skip(output, annotation, e)
                continue
            prepared.append((annotation, display_annotation, badge))

        if self.nudge_collisions:
            nudged = nudge_badges([badge for _, _, badge in prepared])
            prepared = [(a, d, badge) for (a, d, _), badge in zip(prepared, nudged)]

        for annotation, display_annotation, badge in prepared:
            try:
                self._draw_badge(canvas, display_annotation, badge)
                self._draw_justification(canvas, display_annotation)
            except Exception as e:
                self._skip(output, annotation, e)
                continue
            output.drawn.append(annotation)

        output.pixels = canvas.to_pixels()

        logger.info(
            f"[Renderer] Нарисовано {len(output.drawn)} аннотаций "
            f"на холсте {canvas_size.width:.0f}x{canvas_size.height:.0f}"
        )
        return output

    @staticmethod
    def _skip(output: RenderOutput, annotation: MatchedAnnotation, error: Exception) -> None:
        logger.error(f"[Renderer] Аннотация '{annotation.dish.name}' пропущена: {error}")
        output.skipped.append(annotation.dish.name)

    def _draw_header(self, canvas: ICanvas) -> None:
        text_size = canvas.measure_text(self.header_text, HEADER_FONT)
        header = place_header(canvas.size, text_size)

        canvas.draw_rounded_rect(header.background, HEADER_CORNER_RADIUS, fill=HEADER_BACKGROUND)
        canvas.draw_text(self.header_text, header.rect, HEADER_FONT, BLACK)

        logger.debug(f"[Renderer] Заголовок '{self.header_text}' в {header.rect}")

    def _badge_texts(self, margin_percentage: int) -> Tuple[str, str]:
        return f"{margin_percentage}%", self.styles.label_for(margin_percentage)

    def _layout_badge(self, canvas: ICanvas, annotation: MatchedAnnotation) -> BadgeLayout:
        percentage_text, category_text = self._badge_texts(annotation.dish.margin_percentage)
        return place_badge(
            annotation.region.bounding_box,
            canvas.measure_text(percentage_text, PERCENTAGE_FONT),
            canvas.measure_text(category_text, CATEGORY_FONT),
        )

    def _draw_badge(self, canvas: ICanvas, annotation: MatchedAnnotation, badge: BadgeLayout) -> None:
        margin = annotation.dish.margin_percentage
        percentage_text, category_text = self._badge_texts(margin)
        text_color = _rgba(self.styles.text_color)

        canvas.draw_rounded_rect(
            badge.rect,
            BADGE_CORNER_RADIUS,
            fill=_rgba(self.styles.color_for(margin)),
            outline=_rgba(self.styles.border_color),
            width=BADGE_BORDER_WIDTH,
        )
        canvas.draw_text(percentage_text, badge.percentage_rect, PERCENTAGE_FONT, text_color, align="center")
        canvas.draw_text(category_text, badge.category_rect, CATEGORY_FONT, text_color, align="center")

        logger.debug(
            f"[Renderer] '{annotation.dish.name}' ({margin}% - {category_text}) "
            f"регион '{annotation.region.text}' {annotation.region.bounding_box}, бейдж {badge.rect}"
        )

    def _fit_justification(self, canvas: ICanvas, justification: str) -> Tuple[str, ImageSize]:
        """Перенос по 40 символам; если текст шире допустимого - перенос по ширине."""
        wrapped = wrap_text(justification)
        text_size = canvas.measure_text(wrapped, JUSTIFICATION_FONT)
        max_width = justification_max_width(canvas.size)

        if text_size.width > max_width:
            lines = wrap_to_width(
                justification,
                max_width,
                lambda line: canvas.measure_text(line, JUSTIFICATION_FONT).width,
            )
            wrapped = "\n".join(lines)
            text_size = canvas.measure_text(wrapped, JUSTIFICATION_FONT)

        return wrapped, text_size

    def _draw_justification(self, canvas: ICanvas, annotation: MatchedAnnotation) -> None:
        if not annotation.dish.justification.strip():
            return

        wrapped, text_size = self._fit_justification(canvas, annotation.dish.justification)
        layout = place_justification(annotation.region.bounding_box, text_size, canvas.size)

        canvas.draw_rounded_rect(layout.background, JUSTIFICATION_CORNER_RADIUS, fill=JUSTIFICATION_BACKGROUND)
        canvas.draw_text(wrapped, layout.rect, JUSTIFICATION_FONT, BLACK)

        logger.debug(f"[Renderer] Обоснование '{wrapped[:50]}...' в {layout.rect}")

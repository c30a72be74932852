"""
PilCanvas: реализация ICanvas на Pillow.

Растр RGBA; полупрозрачные заливки композитятся через отдельный слой.
Шрифты - системные TrueType (DejaVu/Liberation), при их отсутствии
встроенный шрифт Pillow нужного размера.
"""

import functools
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np
from loguru import logger
from PIL import Image, ImageDraw, ImageFont

from contracts.annotation_dto import BoundingBox, ImageSize
from ..domain.interfaces import Color, FontSpec, ICanvas, TextAlign

_REGULAR_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/Library/Fonts/Arial.ttf",
]

_BOLD_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
]

# Межстрочный интервал многострочного текста (px)
LINE_SPACING = 2


def _find_font(candidates: Sequence[str]) -> Optional[str]:
    for path in candidates:
        if Path(path).exists():
            return path
    return None


@functools.lru_cache(maxsize=32)
def load_font(spec: FontSpec) -> ImageFont.ImageFont:
    """Загружает и кеширует шрифт для FontSpec."""
    font_path = _find_font(_BOLD_FONT_CANDIDATES if spec.bold else _REGULAR_FONT_CANDIDATES)
    if font_path is not None:
        return ImageFont.truetype(font_path, size=max(spec.size, 6))

    logger.debug(f"[Canvas] Системный шрифт не найден, встроенный шрифт Pillow ({spec.size}px)")
    return ImageFont.load_default(size=spec.size)


class PilCanvas(ICanvas):
    """Холст рендеринга поверх PIL.Image (RGBA)."""

    def __init__(self, size: ImageSize, background: Color = (255, 255, 255, 255)):
        width = max(1, int(round(size.width)))
        height = max(1, int(round(size.height)))
        self._image = Image.new("RGBA", (width, height), background)
        self._draw = ImageDraw.Draw(self._image)

    @property
    def size(self) -> ImageSize:
        width, height = self._image.size
        return ImageSize(width=float(width), height=float(height))

    def draw_image(self, pixels: np.ndarray, rect: BoundingBox) -> None:
        width = max(1, int(round(rect.width)))
        height = max(1, int(round(rect.height)))

        if pixels.ndim == 2:
            rgb = cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGB)
        elif pixels.shape[2] == 4:
            rgb = cv2.cvtColor(pixels, cv2.COLOR_BGRA2RGB)
        else:
            rgb = cv2.cvtColor(pixels, cv2.COLOR_BGR2RGB)

        if rgb.shape[1] != width or rgb.shape[0] != height:
            rgb = cv2.resize(rgb, (width, height), interpolation=cv2.INTER_AREA)

        layer = Image.fromarray(rgb).convert("RGBA")
        self._image.paste(layer, (int(round(rect.x)), int(round(rect.y))))

    def draw_rounded_rect(
        self,
        rect: BoundingBox,
        radius: float,
        fill: Color,
        outline: Color = None,
        width: int = 0
    ) -> None:
        if rect.width <= 0 or rect.height <= 0:
            return

        xy = [rect.min_x, rect.min_y, rect.max_x, rect.max_y]
        translucent = fill[3] < 255 or (outline is not None and outline[3] < 255)

        if not translucent:
            self._draw.rounded_rectangle(xy, radius=radius, fill=fill, outline=outline, width=width)
            return

        overlay = Image.new("RGBA", self._image.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).rounded_rectangle(
            xy, radius=radius, fill=fill, outline=outline, width=width
        )
        self._image.alpha_composite(overlay)

    def draw_text(
        self,
        text: str,
        rect: BoundingBox,
        font: FontSpec,
        color: Color,
        align: TextAlign = "left"
    ) -> None:
        pil_font = load_font(font)
        x = rect.x

        if align == "center":
            text_width = self.measure_text(text, font).width
            x = rect.x + (rect.width - text_width) / 2

        self._draw.multiline_text(
            (x, rect.y), text, font=pil_font, fill=color, spacing=LINE_SPACING, align=align
        )

    def measure_text(self, text: str, font: FontSpec) -> ImageSize:
        if not text:
            return ImageSize(width=0.0, height=0.0)

        left, top, right, bottom = self._draw.multiline_textbbox(
            (0, 0), text, font=load_font(font), spacing=LINE_SPACING
        )
        return ImageSize(width=float(right), height=float(bottom))

    def to_pixels(self) -> np.ndarray:
        rgb = np.array(self._image.convert("RGB"))
        return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)

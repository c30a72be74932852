"""Annotation Renderer и его составляющие."""

from .annotation_renderer import AnnotationRenderer, RenderOutput
from .canvas import PilCanvas
from .margin_style import MarginStyle, MarginStyleTable, load_margin_styles
from .text_wrap import wrap_lines, wrap_text

__all__ = [
    "AnnotationRenderer",
    "RenderOutput",
    "PilCanvas",
    "MarginStyle",
    "MarginStyleTable",
    "load_margin_styles",
    "wrap_lines",
    "wrap_text",
]

"""
Application слой домена Annotation.

Содержит фабрику, пайплайн и сессию для использования компонентов.
"""

from .factory import AnnotationComponentFactory
from .annotation_pipeline import MenuAnnotationPipeline
from .annotation_session import AnnotationSession

__all__ = [
    "AnnotationComponentFactory",
    "MenuAnnotationPipeline",
    "AnnotationSession",
]

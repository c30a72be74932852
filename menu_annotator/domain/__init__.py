"""Домен аннотаций: исключения и валидационные контракты."""

from .exceptions import (
    AnnotationError,
    ImageProcessingError,
    DetectionFailed,
    ImageDecodingError,
    ImageEncodingError,
    RecognitionError,
    NoTextDetected,
    LayoutError,
    AnnotationConfigurationError,
)
from .contracts import ContractValidationError

__all__ = [
    "AnnotationError",
    "ImageProcessingError",
    "DetectionFailed",
    "ImageDecodingError",
    "ImageEncodingError",
    "RecognitionError",
    "NoTextDetected",
    "LayoutError",
    "AnnotationConfigurationError",
    "ContractValidationError",
]

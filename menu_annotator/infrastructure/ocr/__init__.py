"""OCR-провайдеры (реализации ITextRecognizer)."""

from .google_vision_recognizer import GoogleVisionTextRecognizer

__all__ = ["GoogleVisionTextRecognizer"]

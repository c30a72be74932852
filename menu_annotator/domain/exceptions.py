"""
Исключения для домена Annotation.

Все ошибки локальны для одного вызова: общего состояния нет,
поэтому ошибка не влияет на последующие вызовы.
"""

from typing import Optional


class AnnotationError(Exception):
    """Базовое исключение для ошибок домена Annotation."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Annotation Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ImageProcessingError(AnnotationError):
    """Ошибка обработки изображения."""
    pass


class DetectionFailed(ImageProcessingError):
    """На входе нет пригодного пиксельного буфера. Фатально для запроса."""
    pass


class ImageDecodingError(ImageProcessingError):
    """Ошибка декодирования изображения."""
    pass


class ImageEncodingError(ImageProcessingError):
    """Растр не удалось закодировать в JPEG."""
    pass


class RecognitionError(AnnotationError):
    """
    OCR-провайдер сообщил об ошибке. Фатально для запроса, без повторов.

    Причина доступна через `cause` (то же, что original_error).
    """

    @property
    def cause(self) -> Optional[Exception]:
        return self.original_error


class NoTextDetected(AnnotationError):
    """
    OCR отработал, но не нашёл ни одного региона.

    Деградация, не ошибка: пайплайн рисует изображение только с заголовком.
    """
    pass


class LayoutError(AnnotationError):
    """Некорректные размеры для вычисления геометрии."""
    pass


class AnnotationConfigurationError(AnnotationError):
    """Ошибка конфигурации домена Annotation."""
    pass

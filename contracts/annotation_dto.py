"""
DTO контракт: сущности одного запроса аннотации.

Все объекты создаются и уничтожаются в рамках одного вызова
MenuAnnotationPipeline.annotate(). Кеширования и хранения нет.

Пространства координат:
- pixel space: пиксели исходного (визуально ориентированного) изображения, origin top-left
- display space: пиксели холста рендеринга (может быть уменьшен)
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .menu_analysis_dto import DishRecord


@dataclass(frozen=True)
class ImageSize:
    """Размер изображения или холста."""
    width: float
    height: float

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class BoundingBox:
    """
    Прямоугольник с origin в левом верхнем углу.

    Используется и в pixel space, и в display space - пространство
    определяется тем, кто создал объект.
    """
    x: float          # Левый верхний угол X
    y: float          # Левый верхний угол Y
    width: float      # Ширина
    height: float     # Высота

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    def scaled(self, scale_x: float, scale_y: float) -> "BoundingBox":
        """Масштабирует координаты и размеры."""
        return BoundingBox(
            x=self.x * scale_x,
            y=self.y * scale_y,
            width=self.width * scale_x,
            height=self.height * scale_y,
        )

    def inset(self, dx: float, dy: float) -> "BoundingBox":
        """Сужает (dx > 0) или расширяет (dx < 0) прямоугольник с каждой стороны."""
        return BoundingBox(
            x=self.x + dx,
            y=self.y + dy,
            width=self.width - 2 * dx,
            height=self.height - 2 * dy,
        )

    def translated(self, dx: float, dy: float) -> "BoundingBox":
        return BoundingBox(x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)

    def intersects(self, other: "BoundingBox") -> bool:
        return (
            self.min_x < other.max_x
            and self.max_x > other.min_x
            and self.min_y < other.max_y
            and self.max_y > other.min_y
        )


@dataclass(frozen=True)
class DetectedTextRegion:
    """
    Текстовый регион, найденный OCR.

    bounding_box - в pixel space исходного изображения (top-left origin).
    """
    text: str
    bounding_box: BoundingBox
    confidence: float = 1.0     # Уверенность OCR (0.0 - 1.0)


@dataclass(frozen=True)
class MatchedAnnotation:
    """
    Блюдо + регион, который считается его подписью на изображении.

    Инвариант: каждое блюдо встречается не более одного раза.
    """
    dish: DishRecord
    region: DetectedTextRegion
    score: float


@dataclass(frozen=True)
class DisplayGeometry:
    """Соотношение между pixel space исходника и display space холста."""
    original_size: ImageSize
    display_size: ImageSize
    scale_x: float
    scale_y: float

    def to_display(self, box: BoundingBox) -> BoundingBox:
        """Переводит прямоугольник из pixel space в display space."""
        return box.scaled(self.scale_x, self.scale_y)


@dataclass(frozen=True)
class BadgeLayout:
    """Геометрия бейджа (display space)."""
    rect: BoundingBox
    percentage_rect: BoundingBox
    category_rect: BoundingBox


@dataclass(frozen=True)
class JustificationLayout:
    """Геометрия блока обоснования (display space)."""
    rect: BoundingBox
    background: BoundingBox


@dataclass(frozen=True)
class HeaderLayout:
    """Геометрия заголовка (display space)."""
    rect: BoundingBox
    background: BoundingBox


@dataclass
class AnnotationResult:
    """
    Результат одного вызова аннотации.

    image_bytes - закодированное JPEG изображение размера display_size.
    annotated_count / requested_count - информационная метрика для UI.
    """
    image_bytes: bytes
    display_geometry: DisplayGeometry
    annotations: List[MatchedAnnotation] = field(default_factory=list)
    requested_count: int = 0
    no_text_detected: bool = False
    regions_detected: int = 0
    skipped_dish_names: List[str] = field(default_factory=list)
    degradation: Optional[str] = None   # Сообщение NoTextDetected, если OCR ничего не нашёл

    @property
    def annotated_count(self) -> int:
        return len(self.annotations)

"""Общие fixtures: фейковый OCR-провайдер, блюда, тестовые изображения."""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pytest

from contracts.menu_analysis_dto import DishRecord
from menu_annotator.domain.contracts import NormalizedBoundingBox, RecognitionOptions, RecognizedText
from menu_annotator.domain.interfaces import ITextRecognizer
from menu_annotator.image.menu_image import ImageOrientation, MenuImage

# (текст, (x, y, width, height)) - нормализованный bbox, origin bottom-left
Observation = Tuple[str, Tuple[float, float, float, float]]


class FakeRecognizer(ITextRecognizer):
    """OCR-провайдер с заранее заданным ответом; запоминает вызовы."""

    def __init__(self, observations: Sequence[Observation] = (), error: Optional[Exception] = None):
        self.observations = list(observations)
        self.error = error
        self.calls: List[Tuple[Tuple[int, ...], int, RecognitionOptions]] = []

    def recognize(self, pixels, orientation, options) -> List[RecognizedText]:
        self.calls.append((pixels.shape, orientation, options))
        if self.error is not None:
            raise self.error
        return [
            RecognizedText(
                text=text,
                bounding_box=NormalizedBoundingBox(x=x, y=y, width=w, height=h),
                confidence=0.95,
            )
            for text, (x, y, w, h) in self.observations
        ]


@pytest.fixture
def fake_recognizer_factory():
    """Fixture: фабрика FakeRecognizer."""
    return FakeRecognizer


@pytest.fixture
def make_dish():
    """Fixture: фабрика DishRecord."""
    def _make(name: str, margin: int = 70, justification: str = "Low ingredient cost vs price"):
        return DishRecord(
            dish_name=name,
            price="$12.00",
            estimated_food_cost=3.5,
            margin_percentage=margin,
            justification=justification,
        )
    return _make


@pytest.fixture
def menu_pixels():
    """Fixture: BGR изображение меню 1000x800 (ширина x высота)."""
    image = np.full((800, 1000, 3), 235, dtype=np.uint8)
    image[100:140, 100:500] = 30
    image[300:340, 100:450] = 30
    return image


@pytest.fixture
def menu_image(menu_pixels):
    """Fixture: MenuImage без поворота."""
    return MenuImage(pixels=menu_pixels, orientation=ImageOrientation.UP, source_name="test_menu")


@pytest.fixture
def menu_observations() -> List[Observation]:
    """Fixture: ответ OCR для menu_image (две строки блюд + цена + шум)."""
    return [
        ("Caesar Salad", (0.1, 0.8, 0.4, 0.05)),
        ("$12", (0.6, 0.8, 0.05, 0.05)),
        ("Grilled Salmon", (0.1, 0.55, 0.35, 0.05)),
        ("Wine List", (0.1, 0.1, 0.2, 0.05)),
    ]

import numpy as np
import pytest

from contracts.annotation_dto import (
    BoundingBox,
    DetectedTextRegion,
    DisplayGeometry,
    ImageSize,
    MatchedAnnotation,
)
from menu_annotator.domain.interfaces import ICanvas
from menu_annotator.layout.display_geometry import compute_display_geometry
from menu_annotator.rendering.annotation_renderer import AnnotationRenderer
from menu_annotator.rendering.canvas import PilCanvas


class RecordingCanvas(ICanvas):
    """Холст, записывающий вызовы отрисовки. Текст: 8px на символ, 12px на строку."""

    def __init__(self, size: ImageSize):
        self._size = size
        self.calls = []

    @property
    def size(self) -> ImageSize:
        return self._size

    def draw_image(self, pixels, rect):
        self.calls.append(("image", rect))

    def draw_rounded_rect(self, rect, radius, fill, outline=None, width=0):
        self.calls.append(("rect", rect, fill, outline, width))

    def draw_text(self, text, rect, font, color, align="left"):
        if text == "EXPLODE":
            raise RuntimeError("font backend failure")
        self.calls.append(("text", text, rect, color))

    def measure_text(self, text, font):
        lines = text.split("\n")
        return ImageSize(width=8.0 * max(len(line) for line in lines), height=12.0 * len(lines))

    def to_pixels(self):
        return np.zeros((int(self._size.height), int(self._size.width), 3), dtype=np.uint8)


@pytest.fixture
def canvases():
    """Fixture: список созданных холстов."""
    return []


@pytest.fixture
def renderer(canvases):
    """Fixture: рендерер с записывающим холстом."""
    def factory(size):
        canvas = RecordingCanvas(size)
        canvases.append(canvas)
        return canvas
    return AnnotationRenderer(canvas_factory=factory)


def _annotation(dish, y=1000.0):
    return MatchedAnnotation(
        dish=dish,
        region=DetectedTextRegion(
            text=dish.name,
            bounding_box=BoundingBox(x=500, y=y, width=1000, height=100),
        ),
        score=1.0,
    )


@pytest.fixture
def geometry():
    """Fixture: 3000x4000 -> 600x800."""
    return compute_display_geometry(ImageSize(width=3000, height=4000), 600, 900)


def test_composition_order(renderer, canvases, menu_image, geometry, make_dish):
    """Тест: изображение -> заголовок -> бейдж -> обоснование."""
    output = renderer.render(menu_image, [_annotation(make_dish("Caesar Salad", margin=80))], geometry)

    kinds = [call[0] for call in canvases[0].calls]
    assert kinds == ["image", "rect", "text", "rect", "text", "text", "rect", "text"]
    assert canvases[0].calls[2][1] == "Restaurant Dish Margins"
    assert output.pixels.shape == (800, 600, 3)


def test_canvas_sized_to_display(renderer, canvases, menu_image, geometry):
    """Тест: холст и базовое изображение размера display_size."""
    renderer.render(menu_image, [], geometry)

    canvas = canvases[0]
    assert canvas.size == geometry.display_size
    assert canvas.calls[0][1] == BoundingBox(x=0, y=0, width=600, height=800)


def test_header_only_without_annotations(renderer, canvases, menu_image, geometry):
    """Тест: без аннотаций рисуется только изображение и заголовок."""
    output = renderer.render(menu_image, [], geometry)

    assert [call[0] for call in canvases[0].calls] == ["image", "rect", "text"]
    assert output.drawn == []
    assert output.skipped == []


def test_badge_in_display_space(renderer, canvases, menu_image, geometry, make_dish):
    """Тест: бейдж справа от региона в display space (регион 100,200,200x20)."""
    renderer.render(menu_image, [_annotation(make_dish("Caesar Salad"))], geometry)

    badge_rect = canvases[0].calls[3][1]
    assert badge_rect.x == pytest.approx(100 + 200 + 10)
    assert badge_rect.mid_y == pytest.approx(210)


@pytest.mark.parametrize("margin, fill, label", [
    (80, (255, 59, 48, 255), "High Margin Item"),
    (70, (255, 149, 0, 255), "Med. Margin Item"),
    (40, (52, 199, 89, 255), "Low Margin Item"),
])
def test_badge_color_and_texts(renderer, canvases, menu_image, geometry, make_dish, margin, fill, label):
    """Тест: цвет заливки, белая рамка 2pt, белый текст процента и подписи."""
    renderer.render(menu_image, [_annotation(make_dish("Soup", margin=margin))], geometry)

    calls = canvases[0].calls
    _, _, badge_fill, outline, width = calls[3]
    assert badge_fill == fill
    assert outline == (255, 255, 255, 255)
    assert width == 2
    assert calls[4][1] == f"{margin}%"
    assert calls[5][1] == label
    assert calls[4][3] == (255, 255, 255, 255)
    assert calls[5][3] == (255, 255, 255, 255)


def test_justification_below_region_translucent(renderer, canvases, menu_image, geometry, make_dish):
    """Тест: обоснование под регионом, на полупрозрачной подложке, перенесено по 40 символов."""
    justification = "Pasta costs pennies per portion while the menu price reflects a full entree"
    renderer.render(menu_image, [_annotation(make_dish("Pasta", justification=justification))], geometry)

    calls = canvases[0].calls
    background_fill = calls[6][2]
    text, rect = calls[7][1], calls[7][2]
    assert background_fill[3] < 255
    assert rect.y == pytest.approx(200 + 20 + 5)
    assert all(len(line) <= 40 for line in text.split("\n"))
    assert rect.max_x <= 600 - 10
    assert rect.max_y <= 800 - 10


def test_empty_justification_not_drawn(renderer, canvases, menu_image, geometry, make_dish):
    """Тест: пустое обоснование не рисуется."""
    renderer.render(menu_image, [_annotation(make_dish("Soup", justification=""))], geometry)

    assert len(canvases[0].calls) == 6


def test_annotation_order_follows_matcher(renderer, canvases, menu_image, geometry, make_dish):
    """Тест: аннотации рисуются в порядке матчера."""
    annotations = [
        _annotation(make_dish("Second", margin=40), y=2000),
        _annotation(make_dish("First", margin=80), y=500),
    ]

    output = renderer.render(menu_image, annotations, geometry)

    assert [a.dish.name for a in output.drawn] == ["Second", "First"]
    percentages = [call[1] for call in canvases[0].calls if call[0] == "text" and call[1].endswith("%")]
    assert percentages == ["40%", "80%"]


def test_failed_annotation_is_skipped(renderer, menu_image, geometry, make_dish):
    """Тест: ошибка отрисовки одной аннотации не прерывает рендеринг."""
    annotations = [
        _annotation(make_dish("Broken", justification="EXPLODE")),
        _annotation(make_dish("Caesar Salad"), y=2000),
    ]

    output = renderer.render(menu_image, annotations, geometry)

    assert [a.dish.name for a in output.drawn] == ["Caesar Salad"]
    assert output.skipped == ["Broken"]


def test_nudge_pass_moves_overlapping_badges(canvases, menu_image, geometry, make_dish):
    """Тест: с nudge пересекающиеся бейджи разводятся."""
    def factory(size):
        canvas = RecordingCanvas(size)
        canvases.append(canvas)
        return canvas

    renderer = AnnotationRenderer(canvas_factory=factory, nudge_collisions=True)
    annotations = [
        _annotation(make_dish("Caesar Salad", justification=""), y=1000),
        _annotation(make_dish("Grilled Salmon", justification=""), y=1050),
    ]

    renderer.render(menu_image, annotations, geometry)

    badge_rects = [call[1] for call in canvases[0].calls if call[0] == "rect" and call[4] == 2]
    assert len(badge_rects) == 2
    assert not badge_rects[0].intersects(badge_rects[1])


def test_render_is_deterministic(menu_image, make_dish):
    """Тест: одинаковый вход -> пиксельно одинаковый растр (PilCanvas)."""
    renderer = AnnotationRenderer()
    geometry = DisplayGeometry(
        original_size=menu_image.size,
        display_size=ImageSize(width=500, height=400),
        scale_x=0.5,
        scale_y=0.5,
    )
    annotations = [_annotation(make_dish("Caesar Salad", margin=77), y=100)]

    first = renderer.render(menu_image, annotations, geometry)
    second = renderer.render(menu_image, annotations, geometry)

    assert first.pixels.shape == (400, 500, 3)
    assert np.array_equal(first.pixels, second.pixels)


def _text_calls(canvas):
    return [call for call in canvas.calls if call[0] == "text"]


@pytest.mark.parametrize("justification", [
    "Pasta costs pennies per portion while the menu price is steep",
    "Handmade-" + "x" * 60,
])
def test_justification_text_fits_narrow_canvas(canvases, renderer, menu_image, make_dish, justification):
    """Тест: на узком холсте текст обоснования не выходит за правый край."""
    geometry = compute_display_geometry(ImageSize(width=300, height=400), 300, 400)
    annotation = MatchedAnnotation(
        dish=make_dish("Pasta", justification=justification),
        region=DetectedTextRegion(text="Pasta", bounding_box=BoundingBox(x=200, y=100, width=60, height=20)),
        score=1.0,
    )

    renderer.render(menu_image, [annotation], geometry)

    canvas = canvases[0]
    text, rect = _text_calls(canvas)[-1][1], _text_calls(canvas)[-1][2]
    text_width = canvas.measure_text(text, None).width
    assert text_width <= 300 * 0.6
    assert rect.x + text_width <= 300 - 10
    assert "".join(text.split()) == "".join(justification.split())


class MeasuringPilCanvas(PilCanvas):
    """PilCanvas, запоминающий нарисованные тексты."""

    def __init__(self, size):
        super().__init__(size)
        self.texts = []

    def draw_text(self, text, rect, font, color, align="left"):
        self.texts.append((text, rect, font))
        super().draw_text(text, rect, font, color, align)


def test_justification_fits_pil_canvas(menu_image, make_dish):
    """Тест: с реальными шрифтами текст обоснования остаётся внутри холста."""
    canvases = []

    def factory(size):
        canvas = MeasuringPilCanvas(size)
        canvases.append(canvas)
        return canvas

    geometry = compute_display_geometry(ImageSize(width=300, height=400), 300, 400)
    justification = "Premium ingredients sourced locally make this plate pricey to run"
    annotation = MatchedAnnotation(
        dish=make_dish("Steak", justification=justification),
        region=DetectedTextRegion(text="Steak", bounding_box=BoundingBox(x=200, y=100, width=60, height=20)),
        score=1.0,
    )

    AnnotationRenderer(canvas_factory=factory).render(menu_image, [annotation], geometry)

    canvas = canvases[0]
    text, rect, font = canvas.texts[-1]
    assert rect.x + canvas.measure_text(text, font).width <= 300

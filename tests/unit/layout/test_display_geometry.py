import pytest

from contracts.annotation_dto import BoundingBox, DetectedTextRegion, ImageSize, MatchedAnnotation
from menu_annotator.domain.exceptions import LayoutError
from menu_annotator.layout.display_geometry import (
    compute_display_geometry,
    default_display_bound,
    to_display_space,
)


def test_width_limited_scaling():
    """Тест: 3000x4000 в границе 600x900 -> 600x800, scale 0.2."""
    geometry = compute_display_geometry(ImageSize(width=3000, height=4000), 600, 900)

    assert geometry.display_size.width == pytest.approx(600)
    assert geometry.display_size.height == pytest.approx(800)
    assert geometry.scale_x == pytest.approx(0.2)
    assert geometry.scale_y == pytest.approx(0.2)


def test_height_limited_scaling():
    """Тест: узкое высокое изображение ограничивается высотой."""
    geometry = compute_display_geometry(ImageSize(width=1000, height=4000), 600, 900)

    assert geometry.display_size.height == pytest.approx(900)
    assert geometry.display_size.width == pytest.approx(225)
    assert geometry.scale_x == pytest.approx(geometry.scale_y)


def test_image_that_fits_is_not_scaled():
    """Тест: изображение внутри границы не масштабируется."""
    original = ImageSize(width=500, height=700)

    geometry = compute_display_geometry(original, 600, 900)

    assert geometry.display_size == original
    assert geometry.scale_x == 1.0
    assert geometry.scale_y == 1.0


def test_aspect_ratio_preserved():
    """Тест: пропорции сохраняются при уменьшении."""
    original = ImageSize(width=4032, height=3024)

    geometry = compute_display_geometry(original, 600, 900)

    assert geometry.display_size.aspect_ratio == pytest.approx(original.aspect_ratio)
    assert geometry.display_size.width <= 600
    assert geometry.display_size.height <= 900


def test_default_bound_is_one_and_half_viewport():
    """Тест: граница по умолчанию = viewport * 1.5."""
    from config.settings import VIEWPORT_HEIGHT, VIEWPORT_WIDTH

    bound = default_display_bound()

    assert bound.width == pytest.approx(VIEWPORT_WIDTH * 1.5)
    assert bound.height == pytest.approx(VIEWPORT_HEIGHT * 1.5)


@pytest.mark.parametrize("size, bound", [
    (ImageSize(width=0, height=100), (600, 900)),
    (ImageSize(width=100, height=-1), (600, 900)),
    (ImageSize(width=100, height=100), (-600, 900)),
    (ImageSize(width=100, height=100), (0, 900)),
    (ImageSize(width=100, height=100), (600, 0)),
])
def test_invalid_sizes_raise_layout_error(size, bound):
    """Тест: неположительные размеры -> LayoutError."""
    with pytest.raises(LayoutError):
        compute_display_geometry(size, *bound)


def test_to_display_space_scales_region(make_dish):
    """Тест: регион совпадения масштабируется в display space."""
    geometry = compute_display_geometry(ImageSize(width=3000, height=4000), 600, 900)
    annotation = MatchedAnnotation(
        dish=make_dish("Caesar Salad"),
        region=DetectedTextRegion(
            text="Caesar Salad",
            bounding_box=BoundingBox(x=500, y=1000, width=1000, height=100),
        ),
        score=1.0,
    )

    display = to_display_space(annotation, geometry)

    box = display.region.bounding_box
    assert (box.x, box.y, box.width, box.height) == pytest.approx((100, 200, 200, 20))
    assert display.dish is annotation.dish
    # Исходная аннотация не меняется
    assert annotation.region.bounding_box.x == 500


@pytest.mark.parametrize("kwargs", [
    {"max_display_width": 0},
    {"max_display_height": 0},
], ids=["width", "height"])
def test_explicit_zero_bound_is_not_replaced_by_default(kwargs):
    """Тест: явный 0 для одной стороны -> LayoutError, а не граница по умолчанию."""
    with pytest.raises(LayoutError):
        compute_display_geometry(ImageSize(width=100, height=100), **kwargs)


def test_single_missing_bound_uses_default():
    """Тест: отсутствующая сторона берётся из границы по умолчанию."""
    geometry = compute_display_geometry(ImageSize(width=2000, height=100), max_display_width=500)

    assert geometry.display_size.width == pytest.approx(500)
    assert geometry.display_size.height == pytest.approx(25)

import pytest

from contracts.annotation_dto import BoundingBox, ImageSize
from menu_annotator.layout.placement import (
    justification_max_width,
    nudge_badges,
    place_badge,
    place_header,
    place_justification,
)

PERCENTAGE_SIZE = ImageSize(width=50, height=28)
CATEGORY_SIZE = ImageSize(width=90, height=14)


def test_badge_right_of_region_vertically_centered():
    """Тест: бейдж справа от региона (отступ 10), центрирован по вертикали."""
    anchor = BoundingBox(x=100, y=200, width=300, height=40)

    badge = place_badge(anchor, PERCENTAGE_SIZE, CATEGORY_SIZE)

    assert badge.rect.x == pytest.approx(anchor.max_x + 10)
    assert badge.rect.mid_y == pytest.approx(anchor.mid_y)


def test_badge_size_from_text_and_padding():
    """Тест: ширина = max(тексты) + 16, высота = сумма высот + 12."""
    badge = place_badge(BoundingBox(x=0, y=0, width=10, height=10), PERCENTAGE_SIZE, CATEGORY_SIZE)

    assert badge.rect.width == pytest.approx(90 + 16)
    assert badge.rect.height == pytest.approx(28 + 14 + 12)


def test_badge_text_rects_inside_badge():
    """Тест: прямоугольники текстов внутри бейджа, процент над категорией."""
    badge = place_badge(BoundingBox(x=0, y=100, width=10, height=10), PERCENTAGE_SIZE, CATEGORY_SIZE)

    for inner in (badge.percentage_rect, badge.category_rect):
        assert inner.min_x >= badge.rect.min_x
        assert inner.max_x <= badge.rect.max_x
        assert inner.min_y >= badge.rect.min_y
        assert inner.max_y <= badge.rect.max_y
    assert badge.percentage_rect.max_y <= badge.category_rect.min_y


def test_badges_placed_independently():
    """Тест: перекрывающиеся якоря дают перекрывающиеся бейджи (без коллизий)."""
    first = place_badge(BoundingBox(x=100, y=100, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE)
    second = place_badge(BoundingBox(x=100, y=110, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE)

    assert first.rect.intersects(second.rect)


def test_justification_below_region():
    """Тест: обоснование под регионом с отступом 5, по левому краю."""
    anchor = BoundingBox(x=50, y=100, width=200, height=30)
    canvas = ImageSize(width=600, height=800)

    layout = place_justification(anchor, ImageSize(width=150, height=30), canvas)

    assert layout.rect.x == pytest.approx(50)
    assert layout.rect.y == pytest.approx(135)
    assert layout.background.width == pytest.approx(150 + 8)
    assert layout.background.height == pytest.approx(30 + 6)


def test_justification_clamped_to_right_and_bottom_edges():
    """Тест: обоснование не выходит за правый/нижний край (отступ 10)."""
    anchor = BoundingBox(x=500, y=770, width=80, height=20)
    canvas = ImageSize(width=600, height=800)

    layout = place_justification(anchor, ImageSize(width=200, height=40), canvas)

    assert layout.rect.max_x == pytest.approx(590)
    assert layout.rect.max_y == pytest.approx(790)


def test_justification_width_limited():
    """Тест: ширина не больше min(300, 60% холста)."""
    assert justification_max_width(ImageSize(width=1000, height=800)) == pytest.approx(300)
    assert justification_max_width(ImageSize(width=400, height=800)) == pytest.approx(240)

    layout = place_justification(
        BoundingBox(x=0, y=0, width=10, height=10),
        ImageSize(width=1000, height=20),
        ImageSize(width=400, height=800),
    )
    assert layout.rect.width == pytest.approx(240)


def test_header_centered_at_top():
    """Тест: заголовок по центру, отступ сверху 20."""
    header = place_header(ImageSize(width=600, height=800), ImageSize(width=200, height=30))

    assert header.rect.mid_x == pytest.approx(300)
    assert header.rect.y == pytest.approx(20)
    assert header.background.width == pytest.approx(220)
    assert header.background.height == pytest.approx(40)


def test_nudge_separates_overlapping_badges():
    """Тест: nudge сдвигает пересекающиеся бейджи вниз."""
    badges = [
        place_badge(BoundingBox(x=100, y=100, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE),
        place_badge(BoundingBox(x=100, y=110, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE),
        place_badge(BoundingBox(x=100, y=115, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE),
    ]

    nudged = nudge_badges(badges, spacing=4)

    for i, a in enumerate(nudged):
        for b in nudged[i + 1:]:
            assert not a.rect.intersects(b.rect)
    # Первый бейдж не двигается, x не меняется
    assert nudged[0] == badges[0]
    assert all(n.rect.x == b.rect.x for n, b in zip(nudged, badges))
    # Текст двигается вместе с бейджем
    dy = nudged[1].rect.y - badges[1].rect.y
    assert dy > 0
    assert nudged[1].percentage_rect.y == pytest.approx(badges[1].percentage_rect.y + dy)


def test_nudge_keeps_non_overlapping_badges():
    """Тест: непересекающиеся бейджи не меняются."""
    badges = [
        place_badge(BoundingBox(x=100, y=100, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE),
        place_badge(BoundingBox(x=100, y=400, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE),
    ]

    assert nudge_badges(badges) == badges


def test_nudge_returns_original_order():
    """Тест: результат в исходном порядке, даже если вход не отсортирован."""
    lower = place_badge(BoundingBox(x=100, y=110, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE)
    upper = place_badge(BoundingBox(x=100, y=100, width=200, height=20), PERCENTAGE_SIZE, CATEGORY_SIZE)

    nudged = nudge_badges([lower, upper])

    assert nudged[1] == upper
    assert nudged[0].rect.y > lower.rect.y

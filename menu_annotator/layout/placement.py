"""
Layout engine: размещение бейджа, обоснования и заголовка.

Все функции чистые: якорь (display space) + размеры текста -> прямоугольники.
Коллизии между бейджами здесь НЕ обрабатываются - это отдельный
проход nudge_badges(), применяемый поверх.
"""

from dataclasses import replace
from typing import List, Sequence

from config.settings import (
    BADGE_GAP,
    BADGE_LINE_SPACING,
    BADGE_NUDGE_MAX_ITERATIONS,
    BADGE_NUDGE_SPACING,
    BADGE_PADDING_TOP,
    BADGE_PADDING_X,
    BADGE_PADDING_Y_TOTAL,
    HEADER_PADDING_X,
    HEADER_PADDING_Y,
    HEADER_TOP,
    JUSTIFICATION_EDGE_MARGIN,
    JUSTIFICATION_GAP,
    JUSTIFICATION_MAX_WIDTH,
    JUSTIFICATION_MAX_WIDTH_RATIO,
    JUSTIFICATION_PADDING_X,
    JUSTIFICATION_PADDING_Y,
)
from contracts.annotation_dto import (
    BadgeLayout,
    BoundingBox,
    HeaderLayout,
    ImageSize,
    JustificationLayout,
)


def place_badge(
    anchor: BoundingBox,
    percentage_size: ImageSize,
    category_size: ImageSize
) -> BadgeLayout:
    """
    Бейдж справа от региона, по центру по вертикали.

    Ширина = max(ширины текстов) + 2 * 8, высота = сумма высот + 12.
    """
    width = max(percentage_size.width, category_size.width) + 2 * BADGE_PADDING_X
    height = percentage_size.height + category_size.height + BADGE_PADDING_Y_TOTAL

    rect = BoundingBox(
        x=anchor.max_x + BADGE_GAP,
        y=anchor.mid_y - height / 2,
        width=width,
        height=height,
    )
    return _badge_from_rect(rect, percentage_size, category_size)


def _badge_from_rect(
    rect: BoundingBox,
    percentage_size: ImageSize,
    category_size: ImageSize
) -> BadgeLayout:
    percentage_rect = BoundingBox(
        x=rect.min_x + BADGE_PADDING_X,
        y=rect.min_y + BADGE_PADDING_TOP,
        width=rect.width - 2 * BADGE_PADDING_X,
        height=percentage_size.height,
    )
    category_rect = BoundingBox(
        x=rect.min_x + BADGE_PADDING_X,
        y=percentage_rect.max_y + BADGE_LINE_SPACING,
        width=rect.width - 2 * BADGE_PADDING_X,
        height=category_size.height,
    )
    return BadgeLayout(rect=rect, percentage_rect=percentage_rect, category_rect=category_rect)


def justification_max_width(canvas_size: ImageSize) -> float:
    """Не шире 300pt и не шире 60% холста."""
    return min(JUSTIFICATION_MAX_WIDTH, canvas_size.width * JUSTIFICATION_MAX_WIDTH_RATIO)


def place_justification(
    anchor: BoundingBox,
    text_size: ImageSize,
    canvas_size: ImageSize
) -> JustificationLayout:
    """
    Обоснование под регионом, выровнено по левому краю региона.

    Прижимается так, чтобы не выходить за правый/нижний край холста
    (отступ 10pt).
    """
    max_width = justification_max_width(canvas_size)
    width = min(text_size.width, max_width)
    height = text_size.height

    x = min(anchor.min_x, canvas_size.width - width - JUSTIFICATION_EDGE_MARGIN)
    y = min(anchor.max_y + JUSTIFICATION_GAP, canvas_size.height - height - JUSTIFICATION_EDGE_MARGIN)

    rect = BoundingBox(x=x, y=y, width=width, height=height)
    return JustificationLayout(
        rect=rect,
        background=rect.inset(-JUSTIFICATION_PADDING_X, -JUSTIFICATION_PADDING_Y),
    )


def place_header(canvas_size: ImageSize, text_size: ImageSize) -> HeaderLayout:
    """Заголовок по центру сверху."""
    rect = BoundingBox(
        x=(canvas_size.width - text_size.width) / 2,
        y=HEADER_TOP,
        width=text_size.width,
        height=text_size.height,
    )
    return HeaderLayout(rect=rect, background=rect.inset(-HEADER_PADDING_X, -HEADER_PADDING_Y))


def nudge_badges(
    badges: Sequence[BadgeLayout],
    spacing: float = BADGE_NUDGE_SPACING,
    max_iterations: int = BADGE_NUDGE_MAX_ITERATIONS
) -> List[BadgeLayout]:
    """
    Сдвигает пересекающиеся бейджи вниз.

    Порядок обработки детерминирован: сортировка по (y, x), более поздний
    бейдж уходит под более ранний. Результат возвращается в исходном порядке.
    """
    if len(badges) <= 1:
        return list(badges)

    order = sorted(range(len(badges)), key=lambda i: (badges[i].rect.y, badges[i].rect.x))
    rects = {i: badges[i].rect for i in order}

    for _ in range(max_iterations):
        any_adjusted = False
        for position, i in enumerate(order):
            for j in order[position + 1:]:
                if rects[i].intersects(rects[j]):
                    shift = rects[i].max_y + spacing - rects[j].min_y
                    rects[j] = rects[j].translated(0, shift)
                    any_adjusted = True
        if not any_adjusted:
            break

    result = []
    for i, badge in enumerate(badges):
        dy = rects[i].y - badge.rect.y
        if dy == 0:
            result.append(badge)
            continue
        result.append(replace(
            badge,
            rect=rects[i],
            percentage_rect=badge.percentage_rect.translated(0, dy),
            category_rect=badge.category_rect.translated(0, dy),
        ))
    return result

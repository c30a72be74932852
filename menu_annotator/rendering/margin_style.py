"""
Margin Style: процент маржи -> цвет бейджа и подпись категории.

Пороги - включительные нижние границы, загружаются из
config/annotation_style.yaml:

    >= 75  красный   "High Margin Item"
    65-74  оранжевый "Med. Margin Item"
    < 65   зелёный   "Low Margin Item"

Текст на бейджах всегда белый.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

import yaml
from loguru import logger

from config.settings import ANNOTATION_STYLE_FILE
from ..domain.exceptions import AnnotationConfigurationError

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class MarginStyle:
    """Один уровень маржи."""
    name: str
    min_percentage: int
    color: RGB
    label: str
    short_label: str


@dataclass(frozen=True)
class MarginStyleTable:
    """Таблица уровней, отсортированная по убыванию порога."""
    tiers: Tuple[MarginStyle, ...]
    text_color: RGB = (255, 255, 255)
    border_color: RGB = (255, 255, 255)

    def style_for(self, margin_percentage: int) -> MarginStyle:
        """Первый уровень, чей порог <= процента; ниже всех - последний."""
        for tier in self.tiers:
            if margin_percentage >= tier.min_percentage:
                return tier
        return self.tiers[-1]

    def color_for(self, margin_percentage: int) -> RGB:
        return self.style_for(margin_percentage).color

    def label_for(self, margin_percentage: int) -> str:
        return self.style_for(margin_percentage).label


def _to_rgb(value: List[int], field_name: str) -> RGB:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise AnnotationConfigurationError(
            message=f"Цвет '{field_name}' должен быть [r, g, b]: {value}",
            component="MarginStyleLoader"
        )
    return tuple(int(channel) for channel in value)


@lru_cache(maxsize=8)
def load_margin_styles(path: Path = ANNOTATION_STYLE_FILE) -> MarginStyleTable:
    """
    Загружает таблицу уровней из YAML (с кешированием).

    Raises:
        AnnotationConfigurationError: Файл не найден или структура некорректна
    """
    path = Path(path)
    if not path.exists():
        raise AnnotationConfigurationError(
            message=f"Файл стилей не найден: {path}",
            component="MarginStyleLoader"
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise AnnotationConfigurationError(
            message=f"Некорректный YAML: {path}",
            component="MarginStyleLoader",
            original_error=e
        )

    raw_tiers = data.get("tiers") or []
    if not raw_tiers:
        raise AnnotationConfigurationError(
            message=f"В {path.name} нет ни одного уровня (tiers)",
            component="MarginStyleLoader"
        )

    try:
        tiers = [
            MarginStyle(
                name=str(tier["name"]),
                min_percentage=int(tier["min_percentage"]),
                color=_to_rgb(tier["color"], "color"),
                label=str(tier["label"]),
                short_label=str(tier.get("short_label", tier["label"])),
            )
            for tier in raw_tiers
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise AnnotationConfigurationError(
            message=f"Некорректный уровень в {path.name}",
            component="MarginStyleLoader",
            original_error=e
        )

    tiers.sort(key=lambda tier: tier.min_percentage, reverse=True)

    table = MarginStyleTable(
        tiers=tuple(tiers),
        text_color=_to_rgb(data.get("text_color", [255, 255, 255]), "text_color"),
        border_color=_to_rgb(data.get("border_color", [255, 255, 255]), "border_color"),
    )

    logger.debug(
        f"[MarginStyle] Загружено {len(tiers)} уровней из {path.name}: "
        f"{[(t.name, t.min_percentage) for t in tiers]}"
    )
    return table

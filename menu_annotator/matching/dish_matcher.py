"""
Dish–Region Matcher: для каждого блюда выбирает его подпись на изображении.

Два режима:
- INDEPENDENT (по умолчанию): каждое блюдо ищет лучший регион
  независимо; один регион может достаться нескольким блюдам.
- EXCLUSIVE: жадное распределение по убыванию score,
  каждый регион занимает не более одного блюда.

В обоих режимах:
- Порог строгий: score > MATCH_THRESHOLD
- Вывод в порядке входного списка блюд, несопоставленные пропускаются
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from config.settings import MATCH_THRESHOLD, MATCHING_MODE
from contracts.annotation_dto import DetectedTextRegion, MatchedAnnotation
from contracts.menu_analysis_dto import DishRecord
from ..domain.exceptions import AnnotationConfigurationError
from .similarity import score as similarity_score

Scorer = Callable[[str, str], float]


class MatchingMode(str, Enum):
    """Режим сопоставления блюд и регионов."""
    INDEPENDENT = "independent"
    EXCLUSIVE = "exclusive"


class MatchingStrategy(ABC):
    """Базовая стратегия сопоставления."""

    def __init__(self, scorer: Scorer, threshold: float):
        self.scorer = scorer
        self.threshold = threshold

    @property
    @abstractmethod
    def name(self) -> str:
        """Имя стратегии (для логирования)."""
        pass

    @abstractmethod
    def match(
        self,
        dishes: Sequence[DishRecord],
        regions: Sequence[DetectedTextRegion]
    ) -> List[MatchedAnnotation]:
        pass


class IndependentMatching(MatchingStrategy):
    """Каждое блюдо независимо берёт регион с максимальным score."""

    @property
    def name(self) -> str:
        return "independent"

    def match(
        self,
        dishes: Sequence[DishRecord],
        regions: Sequence[DetectedTextRegion]
    ) -> List[MatchedAnnotation]:
        matches = []

        for dish in dishes:
            best = self._best_region(dish, regions)
            if best is None:
                logger.debug(f"[Matcher] Нет совпадения для '{dish.name}'")
                continue

            region, best_score = best
            matches.append(MatchedAnnotation(dish=dish, region=region, score=best_score))
            logger.debug(
                f"[Matcher] '{dish.name}' -> '{region.text}' "
                f"(score={best_score:.2f}, confidence={region.confidence:.2f})"
            )

        return matches

    def _best_region(
        self,
        dish: DishRecord,
        regions: Sequence[DetectedTextRegion]
    ) -> Optional[Tuple[DetectedTextRegion, float]]:
        """Лучший регион выше порога; при равенстве остаётся первый."""
        best_region = None
        best_score = 0.0

        for region in regions:
            current = self.scorer(dish.name, region.text)
            if current > self.threshold and current > best_score:
                best_region = region
                best_score = current
                logger.trace(f"[Matcher] Лучше для '{dish.name}': '{region.text}' ({current:.2f})")

        if best_region is None:
            return None
        return best_region, best_score


class ExclusiveMatching(MatchingStrategy):
    """
    Жадное распределение: пары (блюдо, регион) по убыванию score,
    при равенстве - порядок блюд, затем порядок регионов.
    """

    @property
    def name(self) -> str:
        return "exclusive"

    def match(
        self,
        dishes: Sequence[DishRecord],
        regions: Sequence[DetectedTextRegion]
    ) -> List[MatchedAnnotation]:
        candidates = []
        for dish_index, dish in enumerate(dishes):
            for region_index, region in enumerate(regions):
                current = self.scorer(dish.name, region.text)
                if current > self.threshold:
                    candidates.append((-current, dish_index, region_index))

        candidates.sort()

        assigned = {}
        claimed_regions = set()
        for negative_score, dish_index, region_index in candidates:
            if dish_index in assigned or region_index in claimed_regions:
                continue
            assigned[dish_index] = (region_index, -negative_score)
            claimed_regions.add(region_index)

        matches = []
        for dish_index, dish in enumerate(dishes):
            if dish_index not in assigned:
                logger.debug(f"[Matcher] Нет свободного совпадения для '{dish.name}'")
                continue
            region_index, best_score = assigned[dish_index]
            matches.append(MatchedAnnotation(
                dish=dish, region=regions[region_index], score=best_score
            ))

        return matches


class DishRegionMatcher:
    """
    Сопоставляет блюда с текстовыми регионами.

    ЦКП: List[MatchedAnnotation] в порядке входных блюд.
    """

    def __init__(
        self,
        mode: Union[MatchingMode, str, None] = None,
        threshold: float = MATCH_THRESHOLD,
        scorer: Scorer = similarity_score
    ):
        """
        Args:
            mode: Режим сопоставления (по умолчанию settings.MATCHING_MODE)
            threshold: Порог score (строго больше)
            scorer: Функция similarity(dish_name, detected_text)
        """
        try:
            self.mode = MatchingMode(mode or MATCHING_MODE)
        except ValueError as e:
            raise AnnotationConfigurationError(
                message=f"Неизвестный режим сопоставления: {mode}",
                component="DishRegionMatcher",
                original_error=e
            )

        if self.mode == MatchingMode.EXCLUSIVE:
            self.strategy: MatchingStrategy = ExclusiveMatching(scorer, threshold)
        else:
            self.strategy = IndependentMatching(scorer, threshold)

    def match(
        self,
        dishes: Sequence[DishRecord],
        regions: Sequence[DetectedTextRegion]
    ) -> List[MatchedAnnotation]:
        """
        Сопоставляет блюда с регионами.

        Args:
            dishes: Блюда в порядке вызывающего кода
            regions: Регионы детекции (pixel space)

        Returns:
            Совпадения в порядке dishes, без несопоставленных блюд
        """
        matches = self.strategy.match(dishes, regions)

        logger.info(
            f"[Matcher] Сопоставлено {len(matches)}/{len(dishes)} блюд "
            f"({len(regions)} регионов, режим={self.strategy.name})"
        )

        return matches

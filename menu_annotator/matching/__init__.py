"""Similarity Scorer и Dish–Region Matcher."""

from .similarity import score
from .dish_matcher import DishRegionMatcher, MatchingMode

__all__ = ["score", "DishRegionMatcher", "MatchingMode"]

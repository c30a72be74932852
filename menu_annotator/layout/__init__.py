"""Coordinate/Layout Engine."""

from .display_geometry import compute_display_geometry, default_display_bound, to_display_space
from .placement import (
    justification_max_width,
    nudge_badges,
    place_badge,
    place_header,
    place_justification,
)

__all__ = [
    "compute_display_geometry",
    "default_display_bound",
    "to_display_space",
    "justification_max_width",
    "nudge_badges",
    "place_badge",
    "place_header",
    "place_justification",
]

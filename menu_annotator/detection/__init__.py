"""Text Region Detector Adapter."""

from .text_region_detector import TextRegionDetector, normalized_to_pixel

__all__ = ["TextRegionDetector", "normalized_to_pixel"]

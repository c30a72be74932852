"""
Контракты DTO проекта Menu Annotator.

Контракты:
- Upstream -> Engine: MenuAnalysisResponse, DishRecord (menu_analysis_dto.py, Pydantic v2)
- Внутри запроса: DetectedTextRegion, MatchedAnnotation, DisplayGeometry (annotation_dto.py)
- Engine -> Caller: AnnotationResult (annotation_dto.py)
"""

# Upstream -> Engine
from .menu_analysis_dto import DishRecord, AnalysisData, MenuAnalysisResponse

# Внутри одного запроса
from .annotation_dto import (
    ImageSize,
    BoundingBox,
    DetectedTextRegion,
    MatchedAnnotation,
    DisplayGeometry,
    BadgeLayout,
    JustificationLayout,
    HeaderLayout,
    AnnotationResult,
)

__all__ = [
    # Upstream
    "DishRecord",
    "AnalysisData",
    "MenuAnalysisResponse",
    # Request
    "ImageSize",
    "BoundingBox",
    "DetectedTextRegion",
    "MatchedAnnotation",
    "DisplayGeometry",
    "BadgeLayout",
    "JustificationLayout",
    "HeaderLayout",
    # Result
    "AnnotationResult",
]

"""
Валидационные контракты (contracts) для границы с OCR-провайдером.

OCR-провайдер возвращает кортежи (текст, нормализованный bbox, confidence).
Нормализованный bbox: диапазон 0..1, origin в ЛЕВОМ НИЖНЕМ углу
(Y отсчитывается снизу).

Без контракта провайдер может передать:
  - width = 1.7 (за пределами изображения)
  - confidence = NaN
  - пустую строку текста

Все модели используют Pydantic v2 с Field validators.
"""

import math
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Допуск на погрешность float у провайдера
_NORMALIZED_EPSILON = 1e-3


class NormalizedBoundingBox(BaseModel):
    """Bounding box в нормализованных координатах (0..1, origin bottom-left)."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., ge=0, le=1, description="Левый край [0-1]")
    y: float = Field(..., ge=0, le=1, description="Нижний край, от низа изображения [0-1]")
    width: float = Field(..., ge=0, le=1, description="Ширина [0-1]")
    height: float = Field(..., ge=0, le=1, description="Высота [0-1]")

    @field_validator("x", "y", "width", "height", mode="before")
    @classmethod
    def no_special_floats(cls, v: Any) -> Any:
        """Не допускаются NaN или Inf значения."""
        if isinstance(v, float) and (math.isnan(v) or math.isinf(v)):
            raise ValueError("Значение не может быть NaN/Inf")
        return v

    @model_validator(mode="after")
    def within_unit_square(self) -> "NormalizedBoundingBox":
        """Прямоугольник не выходит за пределы изображения."""
        if self.x + self.width > 1 + _NORMALIZED_EPSILON:
            raise ValueError(f"x + width > 1: {self.x} + {self.width}")
        if self.y + self.height > 1 + _NORMALIZED_EPSILON:
            raise ValueError(f"y + height > 1: {self.y} + {self.height}")
        return self


class RecognizedText(BaseModel):
    """Одно наблюдение OCR-провайдера."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Распознанная строка (top candidate)")
    bounding_box: NormalizedBoundingBox = Field(..., description="Нормализованный bbox")
    confidence: float = Field(1.0, description="Confidence, приводится к [0-1]")

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> float:
        """Гарантируем [0, 1]; NaN считается нулевой уверенностью."""
        value = float(v)
        if math.isnan(value):
            return 0.0
        return max(0.0, min(1.0, value))


class RecognitionOptions(BaseModel):
    """Параметры распознавания, передаваемые провайдеру."""

    model_config = ConfigDict(frozen=True)

    accurate: bool = Field(True, description="Точность важнее скорости")
    language_correction: bool = Field(False, description="Автокоррекция языка")
    language_hints: List[str] = Field(default_factory=list, description="Подсказки языка")


class ContractValidationError(Exception):
    """Exception для нарушения контрактов (используется вместо Pydantic ValidationError)."""

    def __init__(self, stage_name: str, contract_name: str, errors: Union[List[Dict[str, Any]], List[Any]]) -> None:
        self.stage_name = stage_name
        self.contract_name = contract_name
        self.errors = errors

        error_messages = []
        for err in errors:
            if isinstance(err, dict):
                loc = ".".join(str(part) for part in err.get("loc", [])) or "unknown"
                err_type = err.get("type", "unknown")
                msg = err.get("msg", "unknown error")
                error_messages.append(f"  {loc} ({err_type}): {msg}")
            else:
                error_messages.append(f"  {str(err)}")

        message = (
            f"Contract violation in {stage_name} ({contract_name}):\n"
            + "\n".join(error_messages)
        )
        super().__init__(message)

"""
DTO контракт: Menu Analysis (upstream) -> Annotation Engine

Результат анализа меню внешним сервисом: список блюд с ценой,
оценкой себестоимости, процентом маржи и обоснованием.

ВАЖНО: Блюда неизменяемы после получения. Движок аннотаций
не фильтрует блюда - вызывающий код передаёт уже выбранные.
"""

import json
import uuid
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from menu_annotator.domain.contracts import ContractValidationError


class DishRecord(BaseModel):
    """
    Одно блюдо из анализа меню.

    Поля принимаются как по имени, так и по JSON-ключу upstream-сервиса
    (dish_name, margin_percentage, estimated_food_cost).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Уникальный ID блюда")
    name: str = Field(..., alias="dish_name", description="Название блюда как в меню")
    price: str = Field("", description="Цена (отформатированная строка)")
    estimated_cost: float = Field(
        0.0, alias="estimated_food_cost", ge=0, description="Оценка себестоимости"
    )
    margin_percentage: int = Field(..., ge=0, le=100, description="Маржа [0-100]")
    justification: str = Field("", description="Обоснование оценки маржи")
    ingredients: Optional[str] = Field(None, description="Ингредиенты (для эмбеддингов upstream)")


class AnalysisData(BaseModel):
    """Блок analysis ответа: блюда + общие заметки."""

    model_config = ConfigDict(frozen=True)

    dishes: List[DishRecord] = Field(default_factory=list)
    overall_notes: str = ""


class MenuAnalysisResponse(BaseModel):
    """
    Полный ответ сервиса анализа меню.

    Пример JSON:
        {
          "success": true,
          "analysis": {"dishes": [{"dish_name": "Caesar Salad", ...}], "overall_notes": "..."},
          "dishes_found": 1
        }
    """

    model_config = ConfigDict(frozen=True)

    success: bool = True
    analysis: AnalysisData
    dishes_found: int = Field(0, ge=0)

    @property
    def dishes(self) -> List[DishRecord]:
        return self.analysis.dishes

    @classmethod
    def for_dishes(cls, dishes: Sequence[DishRecord]) -> "MenuAnalysisResponse":
        """Собирает ответ из выбранных пользователем блюд."""
        return cls(
            success=True,
            analysis=AnalysisData(
                dishes=list(dishes),
                overall_notes="Direct annotation generation",
            ),
            dishes_found=len(dishes),
        )

    @classmethod
    def from_json_file(cls, path: Path) -> "MenuAnalysisResponse":
        """
        Загружает ответ анализа из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ContractValidationError: Если структура JSON не соответствует контракту
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Analysis file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise ContractValidationError("MenuAnalysisLoader", "MenuAnalysisResponse", e.errors())

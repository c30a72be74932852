#!/usr/bin/env python3
"""
Точка входа для домена Annotation.

Использование:
    # Аннотировать фото меню по JSON анализа
    python scripts/annotate_menu.py path/to/menu.jpg path/to/analysis.json

    # Только выбранные блюда
    python scripts/annotate_menu.py menu.jpg analysis.json --dish "Caesar Salad" --dish "Ribeye Steak"

    # Эксклюзивное сопоставление + сдвиг пересекающихся бейджей
    python scripts/annotate_menu.py menu.jpg analysis.json --mode exclusive --nudge

ВАЖНО: JSON анализа должен соответствовать MenuAnalysisResponse
из contracts/menu_analysis_dto.py
"""

import sys
import argparse
import asyncio
from pathlib import Path

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import validate_config, OUTPUT_DIR
from contracts.menu_analysis_dto import MenuAnalysisResponse
from menu_annotator.application import AnnotationComponentFactory
from menu_annotator.domain import AnnotationError, ContractValidationError
from menu_annotator.image import ImageFileReader
from menu_annotator.matching import MatchingMode


async def annotate(args) -> bool:
    """
    Аннотирует одно изображение.

    Returns:
        True если успешно, False если ошибка
    """
    image_path = Path(args.image)
    analysis_path = Path(args.analysis)

    try:
        print(f"  [1/3] Загрузка: {image_path.name}, {analysis_path.name}")
        image = ImageFileReader.read(image_path)
        analysis = MenuAnalysisResponse.from_json_file(analysis_path)

        dishes = analysis.dishes
        if args.dish:
            selected = set(args.dish)
            dishes = [d for d in dishes if d.name in selected]
            print(f"  [INFO]  Выбрано блюд: {len(dishes)} из {len(analysis.dishes)}")

        print(f"  [2/3] Детекция текста через Google Vision + рендеринг")
        pipeline = AnnotationComponentFactory.create_pipeline(
            matcher=AnnotationComponentFactory.create_matcher(MatchingMode(args.mode)),
            renderer=AnnotationComponentFactory.create_renderer(nudge_collisions=args.nudge),
        )
        result = await pipeline.annotate(image, dishes)

        output_dir = Path(args.output) if args.output else OUTPUT_DIR
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / f"{image_path.stem}_annotated.jpg"

        print(f"  [3/3] Сохранение: {output_file}")
        output_file.write_bytes(result.image_bytes)

        print(f"  [INFO]  Регионов: {result.regions_detected}, "
              f"аннотировано: {result.annotated_count}/{result.requested_count}")
        if result.no_text_detected:
            print(f"  [WARNING] {result.degradation}")
        for name in result.skipped_dish_names:
            print(f"  [SKIP]  {name}")
        return True

    except (AnnotationError, ContractValidationError, FileNotFoundError) as e:
        print(f"  [ERROR] Ошибка аннотации {image_path.name}: {e}")
        return False


def main():
    """Главная функция запуска домена Annotation."""

    print("\n" + "="*60)
    print("  MENU ANNOTATOR - Бейджи маржи на фото меню")
    print("="*60)

    # Парсинг аргументов
    parser = argparse.ArgumentParser(description="Menu Annotator")
    parser.add_argument("image", help="Путь к фото меню")
    parser.add_argument("analysis", help="Путь к JSON анализа меню")
    parser.add_argument("--dish", action="append", help="Название выбранного блюда (можно несколько раз)")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in MatchingMode],
        default=MatchingMode.INDEPENDENT.value,
        help="Режим сопоставления блюд и регионов"
    )
    parser.add_argument("--nudge", action="store_true", help="Сдвигать пересекающиеся бейджи")
    parser.add_argument("--output", help="Директория результата (по умолчанию data/output)")
    args = parser.parse_args()

    # Проверяем конфигурацию
    try:
        validate_config()
        print("\n[OK] Конфигурация проверена")
    except ValueError as e:
        print(f"\n[ERROR] {e}")
        sys.exit(1)

    if not asyncio.run(annotate(args)):
        sys.exit(1)

    print("\n" + "="*60)
    print("  [SUCCESS] Изображение аннотировано")
    print("="*60)


if __name__ == "__main__":
    main()

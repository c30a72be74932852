"""
Настройки проекта Menu Annotator.

ВАЖНО: Для GoogleVisionTextRecognizer укажите путь к Google Cloud credentials файлу!
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"

# Таблица уровней маржи (цвета, подписи, пороги)
ANNOTATION_STYLE_FILE = CONFIG_DIR / "annotation_style.yaml"


# =============================================================================
# GOOGLE CLOUD VISION API
# =============================================================================
# Путь к JSON-файлу с ключом сервисного аккаунта
GOOGLE_APPLICATION_CREDENTIALS = os.getenv(
    "GOOGLE_APPLICATION_CREDENTIALS",
    str(PROJECT_ROOT / "config" / "google_credentials.json")
)

# Языковые подсказки для OCR (пусто = автоопределение)
OCR_LANGUAGE_HINTS = ["en"]

# Точность важнее скорости; названия блюд часто не словарные слова,
# поэтому автокоррекция языка выключена
OCR_ACCURATE = True
OCR_LANGUAGE_CORRECTION = False

# Качество JPEG при отправке в OCR
OCR_JPEG_QUALITY = 95

# Поддерживаемые форматы изображений
SUPPORTED_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".heic"]

# =============================================================================
# НАСТРОЙКИ MATCHING
# =============================================================================
# Минимальный score (строго больше) для принятия совпадения
MATCH_THRESHOLD = 0.6

# Минимальная длина слова блюда для word-overlap стратегии
MIN_MATCH_WORD_LENGTH = 3

# Режим сопоставления: "independent" (регион может достаться нескольким блюдам)
# или "exclusive" (жадное распределение по убыванию score)
MATCHING_MODE = os.getenv("MENU_MATCHING_MODE", "independent")

# =============================================================================
# НАСТРОЙКИ ОТОБРАЖЕНИЯ
# =============================================================================
# Размер viewport устройства (points)
VIEWPORT_WIDTH = float(os.getenv("MENU_VIEWPORT_WIDTH", "393"))
VIEWPORT_HEIGHT = float(os.getenv("MENU_VIEWPORT_HEIGHT", "852"))

# Граница отображения = viewport * factor
DISPLAY_BOUND_FACTOR = 1.5

# =============================================================================
# НАСТРОЙКИ LAYOUT
# =============================================================================
BADGE_GAP = 10.0                 # Отступ бейджа от правого края региона
BADGE_PADDING_X = 8.0            # Горизонтальный padding (с каждой стороны)
BADGE_PADDING_TOP = 6.0          # Верхний padding
BADGE_PADDING_Y_TOTAL = 12.0     # Суммарный вертикальный padding
BADGE_LINE_SPACING = 2.0         # Между процентом и подписью
BADGE_CORNER_RADIUS = 8.0
BADGE_BORDER_WIDTH = 2

HEADER_TEXT = "Restaurant Dish Margins"
HEADER_TOP = 20.0
HEADER_PADDING_X = 10.0
HEADER_PADDING_Y = 5.0
HEADER_CORNER_RADIUS = 8.0

JUSTIFICATION_GAP = 5.0          # Отступ под регионом
JUSTIFICATION_EDGE_MARGIN = 10.0 # Минимальный отступ от правого/нижнего края
JUSTIFICATION_MAX_WIDTH = 300.0
JUSTIFICATION_MAX_WIDTH_RATIO = 0.6
JUSTIFICATION_PADDING_X = 4.0
JUSTIFICATION_PADDING_Y = 3.0
JUSTIFICATION_CORNER_RADIUS = 6.0

# Перенос строк по количеству символов
WRAP_LINE_LENGTH = 40

# Сдвиг пересекающихся бейджей (по умолчанию выключен)
BADGE_COLLISION_NUDGE = False
BADGE_NUDGE_SPACING = 4.0
BADGE_NUDGE_MAX_ITERATIONS = 20

# =============================================================================
# НАСТРОЙКИ ШРИФТОВ
# =============================================================================
HEADER_FONT_SIZE = 28
PERCENTAGE_FONT_SIZE = 24
CATEGORY_FONT_SIZE = 12
JUSTIFICATION_FONT_SIZE = 11

# =============================================================================
# НАСТРОЙКИ ВЫВОДА
# =============================================================================
# Качество JPEG итогового изображения (0-100)
OUTPUT_JPEG_QUALITY = 90


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config(require_credentials: bool = True):
    """Проверяет корректность конфигурации."""
    errors = []

    if require_credentials:
        if not GOOGLE_APPLICATION_CREDENTIALS:
            errors.append(
                "GOOGLE_APPLICATION_CREDENTIALS не указан!\n"
                "Укажите путь к JSON-ключу в config/settings.py или через переменную окружения."
            )
        elif not Path(GOOGLE_APPLICATION_CREDENTIALS).exists():
            errors.append(
                f"Файл credentials не найден: {GOOGLE_APPLICATION_CREDENTIALS}"
            )

    if MATCHING_MODE not in ("independent", "exclusive"):
        errors.append(f"Неизвестный MATCHING_MODE: {MATCHING_MODE}")

    if VIEWPORT_WIDTH <= 0 or VIEWPORT_HEIGHT <= 0:
        errors.append(f"Некорректный viewport: {VIEWPORT_WIDTH}x{VIEWPORT_HEIGHT}")

    if not ANNOTATION_STYLE_FILE.exists():
        errors.append(f"Файл стилей не найден: {ANNOTATION_STYLE_FILE}")

    if errors:
        raise ValueError("\n".join(errors))

    # Создаём директории если не существуют
    INPUT_DIR.mkdir(parents=True, exist_ok=True)
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    return True

"""
Similarity Scorer: насколько распознанная строка похожа на название блюда.

Стратегии проверяются по порядку, возвращается score ПЕРВОЙ сработавшей:
1. Точное совпадение                         -> 1.0
2. Подстрока в любую сторону                 -> 0.9
3. Пересечение слов (доля > 0.5)             -> 0.7 + ratio * 0.2   (0.7 - 0.9)
4. Jaccard по множествам символов (> 0.6)    -> similarity * 0.6    (0.36 - 0.6)
5. Иначе                                     -> 0.0

Порядок - это приоритет: структурное совпадение всегда важнее
символьного, даже если у символьного «сырое» число выше.
"""

from typing import List

from config.settings import MIN_MATCH_WORD_LENGTH

EXACT_MATCH_SCORE = 1.0
SUBSTRING_MATCH_SCORE = 0.9
WORD_OVERLAP_BASE = 0.7
WORD_OVERLAP_SPAN = 0.2
WORD_OVERLAP_MIN_RATIO = 0.5
CHARSET_MIN_SIMILARITY = 0.6
CHARSET_WEIGHT = 0.6


def normalize_text(text: str) -> str:
    """Нормализация перед сравнением: регистр и крайние пробелы."""
    return text.strip().lower()


def _split_words(text: str) -> List[str]:
    return text.split()


def word_overlap_ratio(dish_name: str, detected_text: str) -> float:
    """
    Доля слов блюда, найденных в распознанной строке.

    Учитываются только слова блюда длиной >= MIN_MATCH_WORD_LENGTH,
    но знаменатель - все слова блюда.
    """
    dish_words = _split_words(dish_name)
    detected_words = _split_words(detected_text)

    if not dish_words:
        return 0.0

    matched_words = 0
    for dish_word in dish_words:
        if len(dish_word) < MIN_MATCH_WORD_LENGTH:
            continue
        for detected_word in detected_words:
            if dish_word in detected_word or detected_word in dish_word:
                matched_words += 1
                break

    return matched_words / len(dish_words)


def charset_similarity(dish_name: str, detected_text: str) -> float:
    """Jaccard similarity множеств символов (пробелы тоже символы)."""
    dish_chars = set(dish_name)
    detected_chars = set(detected_text)
    union = dish_chars | detected_chars

    if not union:
        return 0.0

    return len(dish_chars & detected_chars) / len(union)


def score(dish_name: str, detected_text: str) -> float:
    """
    Score совпадения названия блюда и распознанной строки, [0, 1].

    Регистр не учитывается. Пустая строка с любой стороны даёт 0.0.
    """
    dish = normalize_text(dish_name)
    detected = normalize_text(detected_text)

    if not dish or not detected:
        return 0.0

    # Strategy 1: Exact match
    if dish == detected:
        return EXACT_MATCH_SCORE

    # Strategy 2: Substring match
    if dish in detected or detected in dish:
        return SUBSTRING_MATCH_SCORE

    # Strategy 3: Word overlap
    ratio = word_overlap_ratio(dish, detected)
    if ratio > WORD_OVERLAP_MIN_RATIO:
        return WORD_OVERLAP_BASE + ratio * WORD_OVERLAP_SPAN

    # Strategy 4: Character-set Jaccard
    similarity = charset_similarity(dish, detected)
    if similarity > CHARSET_MIN_SIMILARITY:
        return similarity * CHARSET_WEIGHT

    return 0.0

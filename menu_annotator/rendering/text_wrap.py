"""Перенос строк: жадный по числу символов и по измеренной ширине."""

from typing import Callable, List

from config.settings import WRAP_LINE_LENGTH


def wrap_lines(text: str, max_chars: int = WRAP_LINE_LENGTH) -> List[str]:
    """
    Набирает слова в строку, пока следующая не превысит max_chars.

    Слово длиннее max_chars занимает отдельную строку целиком.
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_chars:
            if current:
                lines.append(current)
                current = word
            else:
                lines.append(word)
        else:
            current = candidate

    if current:
        lines.append(current)

    return lines


def wrap_text(text: str, max_chars: int = WRAP_LINE_LENGTH) -> str:
    return "\n".join(wrap_lines(text, max_chars))


def _split_word(word: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    pieces: List[str] = []
    current = ""
    for char in word:
        if current and measure(current + char) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    if current:
        pieces.append(current)
    return pieces


def wrap_to_width(text: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    """
    Перенос по измеренной ширине строки.

    Слово шире max_width режется посимвольно. Строка из одного символа
    остаётся как есть, даже если она шире max_width.
    """
    lines: List[str] = []
    current = ""

    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if measure(candidate) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if measure(word) <= max_width:
            current = word
            continue

        pieces = _split_word(word, max_width, measure)
        lines.extend(pieces[:-1])
        current = pieces[-1]

    if current:
        lines.append(current)

    return lines

"""
Menu Annotator - движок аннотаций фотографий меню.

Находит на фото подписи блюд (OCR), сопоставляет их с результатами
анализа маржи и рисует цветные бейджи с обоснованием.
"""

__version__ = "0.1.0"

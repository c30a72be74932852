"""Входное изображение: декодирование, ориентация, кодирование."""

from .menu_image import ImageOrientation, MenuImage
from .image_file_reader import ImageFileReader
from .image_encoder import ImageEncoder

__all__ = ["ImageOrientation", "MenuImage", "ImageFileReader", "ImageEncoder"]
